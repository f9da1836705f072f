from supabase import Client
from app.modules.invites.schemas import InviteCreate, InviteResponse, InviteJoinResponse
from app.modules.members.service import MemberService
from app.config import settings
from app.database.supabase_client import first_row
from typing import List, Optional
from fastapi import HTTPException
from datetime import datetime, timedelta, timezone
import logging
import secrets

logger = logging.getLogger(__name__)


def generate_invite_code(length: int) -> str:
    """URL-safe random code of exactly `length` characters"""
    code = ""
    while len(code) < length:
        code += secrets.token_urlsafe(length)
    return code[:length]


def _as_utc(value: datetime) -> datetime:
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class InviteService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _to_response(self, row: dict) -> InviteResponse:
        return InviteResponse(**row, url=settings.invite_url(row["code"]))

    def create_invite(self, church_id: str, invite_data: InviteCreate, user_id: str) -> InviteResponse:
        """Create an invite code for the church, optionally tied to a campus"""
        try:
            if invite_data.campus_id:
                campus = first_row(
                    self.supabase.table("campuses")
                    .select("id")
                    .eq("id", invite_data.campus_id)
                    .eq("church_id", church_id)
                    .limit(1)
                    .execute()
                )
                if campus is None:
                    raise HTTPException(status_code=400, detail="Invalid campus")

            expires_at = None
            if invite_data.expires_in_days:
                expires_at = (datetime.now(timezone.utc) + timedelta(days=invite_data.expires_in_days)).isoformat()

            result = self.supabase.table("invite_codes").insert({
                "church_id": church_id,
                "campus_id": invite_data.campus_id,
                "code": generate_invite_code(settings.invite_code_length),
                "created_by": user_id,
                "max_uses": invite_data.max_uses,
                "current_uses": 0,
                "expires_at": expires_at,
                "is_active": True,
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create invite code")

            return self._to_response(result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating invite code: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def list_invites(self, church_id: str, campus_ids: Optional[List[str]] = None) -> List[InviteResponse]:
        """List invite codes of a church, optionally restricted to campus_ids"""
        try:
            if campus_ids is not None and len(campus_ids) == 0:
                return []
            query = self.supabase.table("invite_codes").select("*").eq("church_id", church_id)
            if campus_ids is not None:
                query = query.in_("campus_id", campus_ids)
            result = query.order("created_at", desc=True).execute()
            return [self._to_response(invite) for invite in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_invite(self, church_id: str, invite_id: str) -> InviteResponse:
        try:
            row = first_row(
                self.supabase.table("invite_codes")
                .select("*")
                .eq("id", invite_id)
                .eq("church_id", church_id)
                .limit(1)
                .execute()
            )
            if row is None:
                raise HTTPException(status_code=404, detail="Invite code not found")
            return self._to_response(row)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def deactivate_invite(self, church_id: str, invite_id: str) -> InviteResponse:
        try:
            result = self.supabase.table("invite_codes")\
                .update({"is_active": False})\
                .eq("id", invite_id)\
                .eq("church_id", church_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Invite code not found")
            return self._to_response(result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def _claim_use(self, invite: InviteResponse) -> bool:
        """Count one use, only if nobody redeemed the code since it was read and it is still under max_uses"""
        query = self.supabase.table("invite_codes")\
            .update({"current_uses": invite.current_uses + 1})\
            .eq("id", invite.id)\
            .eq("current_uses", invite.current_uses)
        if invite.max_uses:
            query = query.lt("current_uses", invite.max_uses)
        return bool(query.execute().data)

    def _release_use(self, invite: InviteResponse) -> None:
        try:
            self.supabase.table("invite_codes")\
                .update({"current_uses": invite.current_uses})\
                .eq("id", invite.id)\
                .eq("current_uses", invite.current_uses + 1)\
                .execute()
        except Exception as e:
            logger.error(f"Could not release claimed use of invite {invite.id}: {e}")

    def join_with_code(self, code: str, user_data: dict) -> InviteJoinResponse:
        """Redeem an invite code: validate it, claim one use, then add the caller as a member"""
        user_id = user_data["id"]
        members = MemberService(self.supabase)
        try:
            if members.user_has_membership(user_id):
                raise HTTPException(status_code=400, detail="You are already a member of a church")

            row = first_row(
                self.supabase.table("invite_codes")
                .select("*")
                .eq("code", code)
                .eq("is_active", True)
                .limit(1)
                .execute()
            )
            if row is None:
                raise HTTPException(status_code=404, detail="Invalid or expired invite code")
            invite = InviteResponse(**row)

            if invite.expires_at and _as_utc(invite.expires_at) < datetime.now(timezone.utc):
                raise HTTPException(status_code=400, detail="This invite code has expired")
            if invite.max_uses and invite.current_uses >= invite.max_uses:
                raise HTTPException(status_code=400, detail="This invite code has reached its maximum uses")

            if not self._claim_use(invite):
                raise HTTPException(
                    status_code=409,
                    detail="This invite code was just used by someone else. Please try again."
                )

            metadata = user_data.get("user_metadata") or {}
            try:
                member = members.add_member(
                    invite.church_id,
                    user_id,
                    campus_id=invite.campus_id,
                    user_name=metadata.get("full_name"),
                    user_email=user_data.get("email"),
                )
            except Exception:
                self._release_use(invite)
                raise

            return InviteJoinResponse(
                church_id=invite.church_id,
                campus_id=invite.campus_id,
                membership_id=member.id,
                message="Joined church successfully",
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error joining with invite code: {e}")
            raise HTTPException(status_code=500, detail="Failed to join church")
