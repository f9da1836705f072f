from supabase import Client
from pydantic import BaseModel
from app.core.exceptions import ChurchDomainError
from app.core.scheduling import (
    ACTIVE_STATUSES,
    Booking,
    BookingKind,
    BookingStatus,
    find_conflicts,
    format_window,
    validate_range,
    validate_transition,
)
from app.database.supabase_client import first_row, is_exclusion_violation
from typing import Any, Dict, List, Optional, Type
from fastapi import HTTPException
from datetime import date, datetime, time, timezone
import logging

logger = logging.getLogger(__name__)

# Fields whose change moves the booking to another slot
_SLOT_FIELDS = ("scheduled_date", "start_time", "end_time")


class ScheduleService:
    """
    Schedule CRUD shared by ministry and safety schedules.

    `parent` is the column filter that ties both the schedule rows and their
    subjects to one owner: {"ministry_id": ...} for ministry schedules,
    {"church_id": ...} for safety schedules.
    """

    def __init__(self, supabase: Client, kind: BookingKind, response_model: Type[BaseModel]):
        self.supabase = supabase
        self.kind = kind
        self.response_model = response_model

    def _conflict_detail(self, booking: Booking) -> str:
        return (
            f"This {self.kind.subject_label} is already scheduled during this time period "
            f"({format_window(booking)})"
        )

    def _scoped(self, query, parent: Dict[str, str]):
        for column, value in parent.items():
            query = query.eq(column, value)
        return query

    def _get_active_subject(self, parent: Dict[str, str], subject_id: str) -> Dict[str, Any]:
        label = self.kind.subject_label
        subject = first_row(
            self._scoped(
                self.supabase.table(self.kind.subject_table).select("id, is_active").eq("id", subject_id),
                parent
            ).limit(1).execute()
        )
        if subject is None:
            raise HTTPException(status_code=404, detail=f"{label.capitalize()} not found")
        if not subject.get("is_active", True):
            raise HTTPException(status_code=400, detail=f"Cannot schedule inactive {label}s")
        return subject

    def _active_bookings(self, subject_id: str, scheduled_date: date) -> List[Booking]:
        """Candidate rows for one subject and date: a single ranged query"""
        result = self.supabase.table(self.kind.schedule_table)\
            .select("*")\
            .eq(self.kind.subject_column, subject_id)\
            .eq("scheduled_date", scheduled_date.isoformat())\
            .in_("status", [s.value for s in ACTIVE_STATUSES])\
            .execute()
        return [Booking.from_row(row, self.kind) for row in (result.data or [])]

    def _ensure_free(
        self,
        subject_id: str,
        scheduled_date: date,
        start_time: time,
        end_time: time,
        exclude_booking_id: Optional[str] = None
    ) -> None:
        conflicts = find_conflicts(
            subject_id,
            scheduled_date,
            start_time,
            end_time,
            self._active_bookings(subject_id, scheduled_date),
            exclude_booking_id=exclude_booking_id,
        )
        if conflicts:
            logger.info(
                "Schedule conflict for %s %s on %s: %s overlaps %s",
                self.kind.subject_label, subject_id, scheduled_date,
                f"{start_time:%H:%M}-{end_time:%H:%M}", format_window(conflicts[0])
            )
            raise HTTPException(status_code=409, detail=self._conflict_detail(conflicts[0]))

    def _storage_error(self, action: str, e: Exception) -> HTTPException:
        if is_exclusion_violation(e):
            logger.warning(f"Exclusion constraint rejected {self.kind.value} schedule {action}: {e}")
            return HTTPException(
                status_code=409,
                detail=f"This {self.kind.subject_label} is already scheduled during this time period"
            )
        logger.error(f"Error during {self.kind.value} schedule {action}: {e}")
        return HTTPException(status_code=500, detail=f"Failed to {action} schedule")

    def list_schedules(
        self,
        parent: Dict[str, str],
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[BookingStatus] = None,
        subject_id: Optional[str] = None
    ) -> List[BaseModel]:
        try:
            query = self._scoped(self.supabase.table(self.kind.schedule_table).select("*"), parent)
            if start_date:
                query = query.gte("scheduled_date", start_date.isoformat())
            if end_date:
                query = query.lte("scheduled_date", end_date.isoformat())
            if status:
                query = query.eq("status", status.value)
            if subject_id:
                query = query.eq(self.kind.subject_column, subject_id)
            result = query.order("scheduled_date").order("start_time").execute()
            return [self.response_model(**row) for row in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_schedule(self, parent: Dict[str, str], schedule_id: str) -> Dict[str, Any]:
        try:
            row = first_row(
                self._scoped(
                    self.supabase.table(self.kind.schedule_table).select("*").eq("id", schedule_id),
                    parent
                ).limit(1).execute()
            )
            if row is None:
                raise HTTPException(status_code=404, detail="Schedule not found")
            return row
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def create_schedule(self, parent: Dict[str, str], schedule_data: BaseModel, created_by: str) -> BaseModel:
        """Book an active subject after checking that the slot is free"""
        subject_id = getattr(schedule_data, self.kind.subject_column)
        validate_range(schedule_data.start_time, schedule_data.end_time)
        try:
            self._get_active_subject(parent, subject_id)
            self._ensure_free(
                subject_id,
                schedule_data.scheduled_date,
                schedule_data.start_time,
                schedule_data.end_time,
            )

            payload = schedule_data.model_dump(mode="json")
            payload.update(parent)
            payload["status"] = BookingStatus.SCHEDULED.value
            payload["created_by"] = created_by

            result = self.supabase.table(self.kind.schedule_table).insert(payload).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create schedule")

            logger.info(f"Created {self.kind.value} schedule {result.data[0]['id']} for {subject_id}")
            return self.response_model(**result.data[0])
        except (HTTPException, ChurchDomainError):
            raise
        except Exception as e:
            raise self._storage_error("create", e)

    def update_schedule(
        self,
        parent: Dict[str, str],
        schedule_id: str,
        schedule_data: BaseModel
    ) -> BaseModel:
        """
        Apply a partial update.

        Status changes go through the transition guard. Moving the booking to
        another subject, date or time re-runs conflict detection against every
        other active booking of the (new) subject.
        """
        current = Booking.from_row(self.get_schedule(parent, schedule_id), self.kind)
        changes = schedule_data.model_dump(exclude_unset=True)
        subject_column = self.kind.subject_column

        # Required columns cannot be cleared
        for column in (subject_column, "status") + _SLOT_FIELDS:
            if column in changes and changes[column] is None:
                del changes[column]

        new_status = current.status
        if "status" in changes:
            new_status = validate_transition(self.kind, current.status, changes["status"])

        subject_id = changes.get(subject_column, current.subject_id)
        scheduled_date = changes.get("scheduled_date", current.scheduled_date)
        start_time = changes.get("start_time", current.start_time)
        end_time = changes.get("end_time", current.end_time)

        subject_changed = subject_id != current.subject_id
        slot_changed = subject_changed or (scheduled_date, start_time, end_time) != (
            current.scheduled_date, current.start_time, current.end_time
        )
        if slot_changed:
            validate_range(start_time, end_time)

        try:
            if subject_changed:
                self._get_active_subject(parent, subject_id)
            if slot_changed and new_status in ACTIVE_STATUSES:
                self._ensure_free(subject_id, scheduled_date, start_time, end_time, exclude_booking_id=schedule_id)

            update_data = {
                key: value for key, value in schedule_data.model_dump(exclude_unset=True, mode="json").items()
                if key in changes
            }
            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()

            result = self._scoped(
                self.supabase.table(self.kind.schedule_table).update(update_data).eq("id", schedule_id),
                parent
            ).execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Schedule not found")

            if new_status is not current.status:
                logger.info(
                    f"{self.kind.value} schedule {schedule_id} status {current.status.value} -> {new_status.value}"
                )
            return self.response_model(**result.data[0])
        except (HTTPException, ChurchDomainError):
            raise
        except Exception as e:
            raise self._storage_error("update", e)

    def delete_schedule(self, parent: Dict[str, str], schedule_id: str) -> bool:
        self.get_schedule(parent, schedule_id)
        try:
            result = self._scoped(
                self.supabase.table(self.kind.schedule_table).delete().eq("id", schedule_id),
                parent
            ).execute()
            return len(result.data) > 0
        except Exception as e:
            raise self._storage_error("delete", e)
