from supabase import Client
from app.modules.safety.schemas import (
    SafetyMemberCreate, SafetyMemberUpdate, SafetyMemberResponse,
    IncidentCreate, IncidentUpdate, IncidentResponse, IncidentStatus, IncidentSeverity, IncidentType
)
from app.database.supabase_client import first_row
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
from datetime import date, datetime, time, timezone
import logging

logger = logging.getLogger(__name__)


class SafetyTeamService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_members(self, church_id: str, is_active: Optional[bool] = None) -> List[SafetyMemberResponse]:
        try:
            query = self.supabase.table("safety_team_members").select("*").eq("church_id", church_id)
            if is_active is not None:
                query = query.eq("is_active", is_active)
            result = query.order("joined_at").execute()
            return [SafetyMemberResponse(**m) for m in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def add_member(self, church_id: str, member_data: SafetyMemberCreate) -> SafetyMemberResponse:
        """Put a church member on the safety team"""
        try:
            member = first_row(
                self.supabase.table("church_members")
                .select("id")
                .eq("user_id", member_data.user_id)
                .eq("church_id", church_id)
                .limit(1)
                .execute()
            )
            if member is None:
                raise HTTPException(
                    status_code=400,
                    detail="User must be a member of this church to join the safety team"
                )

            existing = self.supabase.table("safety_team_members")\
                .select("id")\
                .eq("church_id", church_id)\
                .eq("user_id", member_data.user_id)\
                .limit(1)\
                .execute()
            if existing.data:
                raise HTTPException(status_code=409, detail="This user is already on the safety team")

            payload = member_data.model_dump()
            payload.update({"church_id": church_id, "is_active": True})
            result = self.supabase.table("safety_team_members").insert(payload).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to add member to safety team")

            return SafetyMemberResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error adding to safety team of church {church_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def update_member(self, church_id: str, member_id: str, member_data: SafetyMemberUpdate) -> SafetyMemberResponse:
        try:
            update_data = member_data.model_dump(exclude_unset=True)
            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()

            result = self.supabase.table("safety_team_members")\
                .update(update_data)\
                .eq("id", member_id)\
                .eq("church_id", church_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Safety team member not found")

            return SafetyMemberResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def remove_member(self, church_id: str, member_id: str) -> bool:
        try:
            result = self.supabase.table("safety_team_members")\
                .delete()\
                .eq("id", member_id)\
                .eq("church_id", church_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Safety team member not found")
            return True
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))


class IncidentService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _ensure_campus(self, church_id: str, campus_id: Optional[str]) -> None:
        if not campus_id:
            return
        campus = first_row(
            self.supabase.table("campuses")
            .select("church_id")
            .eq("id", campus_id)
            .limit(1)
            .execute()
        )
        if campus is None or campus["church_id"] != church_id:
            raise HTTPException(status_code=400, detail="Invalid campus")

    def _with_names(self, church_id: str, rows: List[Dict[str, Any]]) -> List[IncidentResponse]:
        """Attach reporter and resolver names from church_members"""
        user_ids = {r["reported_by"] for r in rows} | {r["resolved_by"] for r in rows if r.get("resolved_by")}
        names: Dict[str, str] = {}
        if user_ids:
            members = self.supabase.table("church_members")\
                .select("user_id, user_name")\
                .eq("church_id", church_id)\
                .in_("user_id", sorted(user_ids))\
                .execute()
            names = {m["user_id"]: m.get("user_name") for m in (members.data or [])}
        return [
            IncidentResponse(
                **row,
                reporter_name=names.get(row["reported_by"]) or "Unknown",
                resolver_name=names.get(row["resolved_by"]) if row.get("resolved_by") else None,
            )
            for row in rows
        ]

    def list_incidents(
        self,
        church_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        campus_id: Optional[str] = None,
        incident_type: Optional[IncidentType] = None,
        severity: Optional[IncidentSeverity] = None,
        status: Optional[IncidentStatus] = None
    ) -> List[IncidentResponse]:
        """List incident reports, most recent first"""
        try:
            query = self.supabase.table("incident_reports").select("*").eq("church_id", church_id)
            if start_date:
                query = query.gte("occurred_at", datetime.combine(start_date, time.min, timezone.utc).isoformat())
            if end_date:
                query = query.lte("occurred_at", datetime.combine(end_date, time.max, timezone.utc).isoformat())
            if campus_id:
                query = query.eq("campus_id", campus_id)
            if incident_type:
                query = query.eq("incident_type", incident_type.value)
            if severity:
                query = query.eq("severity", severity.value)
            if status:
                query = query.eq("status", status.value)
            result = query.order("occurred_at", desc=True).execute()
            return self._with_names(church_id, result.data or [])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing incidents for church {church_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch incident reports")

    def _get_row(self, church_id: str, incident_id: str) -> Dict[str, Any]:
        row = first_row(
            self.supabase.table("incident_reports")
            .select("*")
            .eq("id", incident_id)
            .eq("church_id", church_id)
            .limit(1)
            .execute()
        )
        if row is None:
            raise HTTPException(status_code=404, detail="Incident report not found")
        return row

    def get_incident(self, church_id: str, incident_id: str) -> IncidentResponse:
        try:
            return self._with_names(church_id, [self._get_row(church_id, incident_id)])[0]
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def create_incident(self, church_id: str, incident_data: IncidentCreate, user_id: str) -> IncidentResponse:
        """File a new incident report; it starts open"""
        try:
            self._ensure_campus(church_id, incident_data.campus_id)
            payload = incident_data.model_dump(mode="json")
            payload.update({
                "church_id": church_id,
                "reported_by": user_id,
                "status": IncidentStatus.OPEN.value,
            })
            result = self.supabase.table("incident_reports").insert(payload).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create incident report")

            row = result.data[0]
            logger.info(f"Incident {row['id']} ({incident_data.severity.value}) reported in church {church_id} by {user_id}")
            return self._with_names(church_id, [row])[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating incident for church {church_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to create incident report")

    def update_incident(
        self,
        church_id: str,
        incident_id: str,
        incident_data: IncidentUpdate,
        user_id: str
    ) -> IncidentResponse:
        """Update a report; resolving stamps resolved_at/by and reopening clears them"""
        try:
            existing = self._get_row(church_id, incident_id)
            update_data = incident_data.model_dump(exclude_unset=True, mode="json")
            if "campus_id" in update_data:
                self._ensure_campus(church_id, update_data["campus_id"])

            if incident_data.status is not None:
                was_settled = IncidentStatus(existing["status"]).is_settled
                if incident_data.status.is_settled and not was_settled:
                    update_data["resolved_at"] = datetime.now(timezone.utc).isoformat()
                    update_data["resolved_by"] = user_id
                elif not incident_data.status.is_settled and was_settled:
                    update_data["resolved_at"] = None
                    update_data["resolved_by"] = None

            update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
            result = self.supabase.table("incident_reports")\
                .update(update_data)\
                .eq("id", incident_id)\
                .eq("church_id", church_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Incident report not found")
            return self._with_names(church_id, result.data)[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating incident {incident_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update incident report")

    def delete_incident(self, church_id: str, incident_id: str) -> bool:
        try:
            result = self.supabase.table("incident_reports")\
                .delete()\
                .eq("id", incident_id)\
                .eq("church_id", church_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Incident report not found")
            return True
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting incident {incident_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete incident report")
