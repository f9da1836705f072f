"""
Schedule conflict detection and booking status transitions.

One implementation serves both ministry schedules and safety-team schedules;
the two kinds differ only in table names, subject column and status set.
"""

from dataclasses import dataclass
from datetime import date, time
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Union

from app.core.exceptions import InvalidRange, InvalidTransition


class BookingStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


# Statuses that still occupy a time slot
ACTIVE_STATUSES: FrozenSet[BookingStatus] = frozenset({BookingStatus.SCHEDULED, BookingStatus.COMPLETED})


class BookingKind(str, Enum):
    MINISTRY = "ministry"
    SAFETY = "safety"

    @property
    def schedule_table(self) -> str:
        return _KIND_CONFIG[self]["schedule_table"]

    @property
    def subject_table(self) -> str:
        return _KIND_CONFIG[self]["subject_table"]

    @property
    def subject_column(self) -> str:
        return _KIND_CONFIG[self]["subject_column"]

    @property
    def subject_label(self) -> str:
        return _KIND_CONFIG[self]["subject_label"]

    @property
    def statuses(self) -> FrozenSet[BookingStatus]:
        return _KIND_CONFIG[self]["statuses"]


_KIND_CONFIG: Dict[BookingKind, Dict[str, Any]] = {
    BookingKind.MINISTRY: {
        "schedule_table": "ministry_schedules",
        "subject_table": "ministry_volunteers",
        "subject_column": "volunteer_id",
        "subject_label": "volunteer",
        "statuses": frozenset(BookingStatus),
    },
    BookingKind.SAFETY: {
        "schedule_table": "safety_schedules",
        "subject_table": "safety_team_members",
        "subject_column": "safety_member_id",
        "subject_label": "member",
        "statuses": frozenset({BookingStatus.SCHEDULED, BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    },
}

# scheduled is the only non-terminal status
_TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.SCHEDULED: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED, BookingStatus.NO_SHOW}),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.NO_SHOW: frozenset(),
}


def _as_date(value: Union[date, str]) -> date:
    return value if isinstance(value, date) else date.fromisoformat(value)


def _as_time(value: Union[time, str]) -> time:
    return value if isinstance(value, time) else time.fromisoformat(value)


@dataclass(frozen=True)
class Booking:
    id: str
    subject_id: str
    scheduled_date: date
    start_time: time
    end_time: time
    status: BookingStatus

    @classmethod
    def from_row(cls, row: Dict[str, Any], kind: BookingKind) -> "Booking":
        """Build from a Supabase schedule row ("2025-11-05", "09:00:00" strings)."""
        return cls(
            id=row["id"],
            subject_id=row[kind.subject_column],
            scheduled_date=_as_date(row["scheduled_date"]),
            start_time=_as_time(row["start_time"]),
            end_time=_as_time(row["end_time"]),
            status=BookingStatus(row["status"]),
        )

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    def overlaps(self, start_time: time, end_time: time) -> bool:
        # Half-open [start, end): touching boundaries do not overlap
        return self.start_time < end_time and self.end_time > start_time


def validate_range(start_time: time, end_time: time) -> None:
    if not start_time < end_time:
        raise InvalidRange(start_time, end_time)


def find_conflicts(
    subject_id: str,
    scheduled_date: date,
    start_time: time,
    end_time: time,
    active_bookings: Iterable[Booking],
    exclude_booking_id: Optional[str] = None,
) -> List[Booking]:
    """Bookings of the same subject on the same date whose window overlaps [start_time, end_time)."""
    validate_range(start_time, end_time)
    return [
        booking for booking in active_bookings
        if booking.subject_id == subject_id
        and booking.scheduled_date == scheduled_date
        and booking.is_active
        and booking.id != exclude_booking_id
        and booking.overlaps(start_time, end_time)
    ]


def has_conflict(
    subject_id: str,
    scheduled_date: date,
    start_time: time,
    end_time: time,
    active_bookings: Iterable[Booking],
    exclude_booking_id: Optional[str] = None,
) -> bool:
    return bool(find_conflicts(subject_id, scheduled_date, start_time, end_time, active_bookings, exclude_booking_id))


def validate_status(kind: BookingKind, status: Union[BookingStatus, str]) -> BookingStatus:
    try:
        status = BookingStatus(status)
    except ValueError:
        raise InvalidTransition(None, status) from None
    if status not in kind.statuses:
        raise InvalidTransition(None, status.value)
    return status


def validate_transition(
    kind: BookingKind,
    current_status: Union[BookingStatus, str],
    new_status: Union[BookingStatus, str],
) -> BookingStatus:
    """Return the new status, or raise InvalidTransition. Re-sending the current status is a no-op."""
    current_status = BookingStatus(current_status)
    new_status = validate_status(kind, new_status)
    if new_status is current_status:
        return new_status
    if new_status not in _TRANSITIONS[current_status]:
        raise InvalidTransition(current_status.value, new_status.value)
    return new_status


def format_window(booking: Booking) -> str:
    return f"{booking.start_time.strftime('%H:%M')}-{booking.end_time.strftime('%H:%M')}"
