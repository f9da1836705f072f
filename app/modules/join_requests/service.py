from supabase import Client
from app.modules.join_requests.schemas import (
    JoinRequestCreate, JoinRequestResponse, JoinRequestStatus
)
from app.modules.members.service import MemberService
from app.config import settings
from app.database.supabase_client import first_row
from typing import List, Optional
from fastapi import HTTPException
from datetime import datetime, timedelta, timezone
import logging

logger = logging.getLogger(__name__)


class JoinRequestService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _check_request_limits(self, church_id: str, user_id: str) -> None:
        now = datetime.now(timezone.utc)

        pending = self.supabase.table("join_requests")\
            .select("id")\
            .eq("church_id", church_id)\
            .eq("user_id", user_id)\
            .eq("status", JoinRequestStatus.PENDING.value)\
            .limit(1)\
            .execute()
        if pending.data:
            raise HTTPException(status_code=400, detail="You already have a pending request for this church")

        window_start = (now - timedelta(days=settings.join_request_denial_window_days)).isoformat()
        denials = self.supabase.table("join_request_denials")\
            .select("id")\
            .eq("church_id", church_id)\
            .eq("user_id", user_id)\
            .gte("denied_at", window_start)\
            .execute()
        if len(denials.data or []) >= settings.join_request_denial_limit:
            raise HTTPException(
                status_code=403,
                detail="You have been denied multiple times. Please contact the church directly."
            )

        week_start = (now - timedelta(days=7)).isoformat()
        recent = self.supabase.table("join_requests")\
            .select("id")\
            .eq("user_id", user_id)\
            .gte("created_at", week_start)\
            .execute()
        if len(recent.data or []) >= settings.join_request_weekly_limit:
            raise HTTPException(
                status_code=429,
                detail=f"You can only submit {settings.join_request_weekly_limit} join requests per week. Please try again later."
            )

    def create_request(self, request_data: JoinRequestCreate, user_data: dict) -> JoinRequestResponse:
        """Ask to join a church"""
        user_id = user_data["id"]
        try:
            church = first_row(
                self.supabase.table("churches").select("id").eq("id", request_data.church_id).limit(1).execute()
            )
            if church is None:
                raise HTTPException(status_code=404, detail="Church not found")

            if request_data.campus_id:
                campus = first_row(
                    self.supabase.table("campuses")
                    .select("id")
                    .eq("id", request_data.campus_id)
                    .eq("church_id", request_data.church_id)
                    .limit(1)
                    .execute()
                )
                if campus is None:
                    raise HTTPException(status_code=400, detail="Invalid campus")

            if MemberService(self.supabase).user_has_membership(user_id):
                raise HTTPException(status_code=400, detail="You are already a member of a church")

            self._check_request_limits(request_data.church_id, user_id)

            metadata = user_data.get("user_metadata") or {}
            result = self.supabase.table("join_requests").insert({
                "church_id": request_data.church_id,
                "campus_id": request_data.campus_id,
                "user_id": user_id,
                "user_name": metadata.get("full_name"),
                "user_email": user_data.get("email"),
                "personal_note": request_data.personal_note,
                "status": JoinRequestStatus.PENDING.value,
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create join request")

            return JoinRequestResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating join request: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def list_requests(
        self,
        church_id: str,
        status: Optional[JoinRequestStatus] = JoinRequestStatus.PENDING,
        campus_ids: Optional[List[str]] = None
    ) -> List[JoinRequestResponse]:
        """List join requests of a church, optionally restricted to campus_ids"""
        try:
            if campus_ids is not None and len(campus_ids) == 0:
                return []
            query = self.supabase.table("join_requests").select("*").eq("church_id", church_id)
            if status is not None:
                query = query.eq("status", status.value)
            if campus_ids is not None:
                query = query.in_("campus_id", campus_ids)
            result = query.order("created_at", desc=True).execute()
            return [JoinRequestResponse(**r) for r in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_pending_request(self, church_id: str, request_id: str) -> JoinRequestResponse:
        try:
            row = first_row(
                self.supabase.table("join_requests")
                .select("*")
                .eq("id", request_id)
                .eq("church_id", church_id)
                .limit(1)
                .execute()
            )
            if row is None:
                raise HTTPException(status_code=404, detail="Join request not found")
            join_request = JoinRequestResponse(**row)
            if join_request.status is not JoinRequestStatus.PENDING:
                raise HTTPException(status_code=400, detail=f"Join request already {join_request.status.value}")
            return join_request
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def _mark_reviewed(
        self,
        request_id: str,
        status: JoinRequestStatus,
        reviewer_id: str,
        review_note: Optional[str]
    ) -> JoinRequestResponse:
        result = self.supabase.table("join_requests")\
            .update({
                "status": status.value,
                "reviewed_by": reviewer_id,
                "reviewed_at": datetime.now(timezone.utc).isoformat(),
                "review_note": review_note,
            })\
            .eq("id", request_id)\
            .execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="Join request not found")
        return JoinRequestResponse(**result.data[0])

    def approve_request(
        self,
        join_request: JoinRequestResponse,
        reviewer_id: str,
        review_note: Optional[str] = None
    ) -> JoinRequestResponse:
        """Add the requester as a member and mark the request approved"""
        members = MemberService(self.supabase)
        try:
            if members.user_has_membership(join_request.user_id):
                raise HTTPException(status_code=400, detail="User is already a member of a church")

            members.add_member(
                join_request.church_id,
                join_request.user_id,
                campus_id=join_request.campus_id,
                user_name=join_request.user_name,
                user_email=join_request.user_email,
            )
            return self._mark_reviewed(join_request.id, JoinRequestStatus.APPROVED, reviewer_id, review_note)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error approving join request {join_request.id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to approve join request")

    def deny_request(
        self,
        join_request: JoinRequestResponse,
        reviewer_id: str,
        review_note: Optional[str] = None
    ) -> JoinRequestResponse:
        """Mark the request denied and count the denial toward the cooldown"""
        try:
            updated = self._mark_reviewed(join_request.id, JoinRequestStatus.DENIED, reviewer_id, review_note)
            self.supabase.table("join_request_denials").insert({
                "church_id": join_request.church_id,
                "user_id": join_request.user_id,
                "join_request_id": join_request.id,
            }).execute()
            return updated
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error denying join request {join_request.id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to deny join request")
