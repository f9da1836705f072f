from supabase import Client
from app.modules.members.schemas import MemberResponse, DepartureResponse
from app.config.permissions_config import Capability, ChurchRole, Grant, ROLE_ASSIGNMENT_CAPABILITIES
from app.core.authority import (
    authorize_role_change,
    denial_message,
    grant_for,
    is_role_higher,
    scope_denial_message,
)
from app.core.dependencies import MembershipContext, ensure_capability
from app.database.supabase_client import first_row
from typing import List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class MemberService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_members(
        self,
        church_id: str,
        campus_id: Optional[str] = None,
        limit: int = 100,
        offset: int = 0
    ) -> List[MemberResponse]:
        """List church members, optionally filtered by campus"""
        try:
            query = self.supabase.table("church_members").select("*").eq("church_id", church_id)
            if campus_id:
                query = query.eq("campus_id", campus_id)
            result = query.order("joined_at")\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [MemberResponse(**member) for member in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_member(self, church_id: str, member_id: str) -> MemberResponse:
        try:
            row = first_row(
                self.supabase.table("church_members")
                .select("*")
                .eq("id", member_id)
                .eq("church_id", church_id)
                .limit(1)
                .execute()
            )
            if row is None:
                raise HTTPException(status_code=404, detail="Member not found")
            return MemberResponse(**row)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def user_has_membership(self, user_id: str) -> bool:
        """True if the user already belongs to any church"""
        result = self.supabase.table("church_members")\
            .select("id")\
            .eq("user_id", user_id)\
            .limit(1)\
            .execute()
        return bool(result.data)

    def add_member(
        self,
        church_id: str,
        user_id: str,
        campus_id: Optional[str] = None,
        user_name: Optional[str] = None,
        user_email: Optional[str] = None
    ) -> MemberResponse:
        """Create a membership with the member role (invite redemption, join request approval)"""
        result = self.supabase.table("church_members").insert({
            "church_id": church_id,
            "campus_id": campus_id,
            "user_id": user_id,
            "role": ChurchRole.MEMBER.value,
            "user_name": user_name,
            "user_email": user_email,
        }).execute()
        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to add member")
        logger.info(f"User {user_id} joined church {church_id}")
        return MemberResponse(**result.data[0])

    def _update_role(self, member_id: str, role: ChurchRole) -> None:
        self.supabase.table("church_members")\
            .update({"role": role.value, "updated_at": _now()})\
            .eq("id", member_id)\
            .execute()

    def _clear_oversight(self, member_id: str) -> None:
        self.supabase.table("campus_overseers")\
            .delete()\
            .eq("church_member_id", member_id)\
            .execute()

    def _set_role(self, member_id: str, role: ChurchRole) -> None:
        self._update_role(member_id, role)
        if role is not ChurchRole.OVERSEER:
            # Campus oversight only exists for overseers
            self._clear_oversight(member_id)

    def change_role(self, actor: MembershipContext, member_id: str, new_role: ChurchRole) -> MemberResponse:
        """Promote or demote a member within the actor's authority"""
        target = self.get_member(actor.church_id, member_id)
        if target.user_id == actor.user_id:
            raise HTTPException(status_code=400, detail="You cannot change your own role")
        if target.role is new_role:
            raise HTTPException(status_code=400, detail=f"Member is already a {new_role.value}")

        decision = authorize_role_change(actor.role, target.role, new_role, actor.scope(target.campus_id))
        if not decision.allowed:
            logger.info(
                "Denied role change of member %s from %s to %s by %s",
                member_id, target.role.value, new_role.value, actor.role.value
            )
            raise HTTPException(status_code=403, detail=self._role_change_denial(actor, target, new_role))

        try:
            self._set_role(member_id, new_role)
            logger.info(f"Member {member_id} role changed {target.role.value} -> {new_role.value} by {actor.user_id}")
            return self.get_member(actor.church_id, member_id)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating role for member {member_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update role")

    @staticmethod
    def _role_change_denial(actor: MembershipContext, target: MemberResponse, new_role: ChurchRole) -> str:
        if not is_role_higher(actor.role, target.role) or not is_role_higher(actor.role, new_role):
            return "You can only assign roles below your own to members below your own role"
        if is_role_higher(new_role, target.role):
            capability = ROLE_ASSIGNMENT_CAPABILITIES[new_role]
        else:
            capability = Capability.DEMOTE_MEMBERS
        if grant_for(actor.role, capability) is Grant.CAMPUS:
            return scope_denial_message(capability)
        return denial_message(capability)

    def _set_church_owner(self, church_id: str, user_id: str) -> None:
        self.supabase.table("churches")\
            .update({"owner_id": user_id, "updated_at": _now()})\
            .eq("id", church_id)\
            .execute()

    def _undo_transfer(self, actor: MembershipContext, target: MemberResponse, applied: List[str]) -> None:
        """Restore the roles written so far by a failed transfer, newest first"""
        restores = {
            "actor": (actor.id, ChurchRole.OWNER),
            "target": (target.id, target.role),
        }
        for step in reversed(applied):
            member_id, role = restores[step]
            try:
                self._update_role(member_id, role)
            except Exception as e:
                logger.critical(
                    f"Could not restore role {role.value} of member {member_id} "
                    f"after failed ownership transfer in church {actor.church_id}: {e}"
                )

    def transfer_ownership(self, actor: MembershipContext, member_id: str) -> MemberResponse:
        """Hand church ownership to another member; the current owner becomes an overseer.

        The role and owner_id writes are undone if any of them fails, so the
        church keeps exactly one owner.
        """
        ensure_capability(actor, Capability.PROMOTE_TO_OWNER)
        target = self.get_member(actor.church_id, member_id)
        if target.user_id == actor.user_id:
            raise HTTPException(status_code=400, detail="You already own this church")

        applied: List[str] = []
        try:
            self._update_role(member_id, ChurchRole.OWNER)
            applied.append("target")
            self._update_role(actor.id, ChurchRole.OVERSEER)
            applied.append("actor")
            self._set_church_owner(actor.church_id, target.user_id)
        except Exception as e:
            logger.error(f"Error transferring ownership of church {actor.church_id}: {e}")
            self._undo_transfer(actor, target, applied)
            raise HTTPException(status_code=500, detail="Failed to transfer ownership")

        logger.info(f"Church {actor.church_id} ownership transferred from {actor.user_id} to {target.user_id}")
        try:
            self._clear_oversight(member_id)
        except Exception as e:
            # Oversight rows are ignored while the member is owner
            logger.error(f"Error clearing campus oversight of new owner {member_id}: {e}")
        return self.get_member(actor.church_id, member_id)

    def assign_campus(self, actor: MembershipContext, member_id: str, campus_id: Optional[str]) -> MemberResponse:
        """Assign a member to a campus, or clear the assignment with campus_id=None"""
        target = self.get_member(actor.church_id, member_id)
        if target.id != actor.id and not is_role_higher(actor.role, target.role):
            raise HTTPException(status_code=403, detail="You can only assign campuses for members below your role")

        # Overseers must cover both the campus the member leaves and the one they join
        ensure_capability(actor, Capability.ASSIGN_CAMPUS, campus_id)
        if target.campus_id and target.campus_id != campus_id:
            ensure_capability(actor, Capability.ASSIGN_CAMPUS, target.campus_id)

        try:
            if campus_id:
                campus = first_row(
                    self.supabase.table("campuses")
                    .select("church_id")
                    .eq("id", campus_id)
                    .limit(1)
                    .execute()
                )
                if campus is None or campus["church_id"] != actor.church_id:
                    raise HTTPException(status_code=400, detail="Invalid campus")

            self.supabase.table("church_members")\
                .update({"campus_id": campus_id, "updated_at": _now()})\
                .eq("id", member_id)\
                .execute()
            return self.get_member(actor.church_id, member_id)
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error assigning campus for member {member_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to assign campus")

    def _record_departure(
        self,
        member: MemberResponse,
        departure_type: str,
        reason: Optional[str] = None,
        removed_by: Optional[str] = None
    ) -> None:
        try:
            self.supabase.table("member_departures").insert({
                "church_id": member.church_id,
                "user_id": member.user_id,
                "user_name": member.user_name,
                "role": member.role.value,
                "reason": reason,
                "departure_type": departure_type,
                "removed_by": removed_by,
            }).execute()
        except Exception as e:
            # The departure log is informational; the membership change still goes ahead
            logger.error(f"Error logging departure of member {member.id}: {e}")

    def remove_member(self, actor: MembershipContext, member_id: str, reason: Optional[str] = None) -> bool:
        """Remove a member from the church and log the departure"""
        target = self.get_member(actor.church_id, member_id)
        if target.user_id == actor.user_id:
            raise HTTPException(status_code=400, detail='You cannot remove yourself. Use "Leave Church" instead.')
        if target.role is ChurchRole.OWNER:
            raise HTTPException(status_code=400, detail="Cannot remove church owners")
        ensure_capability(actor, Capability.REMOVE_MEMBERS, target.campus_id)
        if not is_role_higher(actor.role, target.role):
            raise HTTPException(status_code=403, detail="You can only remove members below your role")

        try:
            result = self.supabase.table("church_members")\
                .delete()\
                .eq("id", member_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error removing member {member_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to remove member")

        if not result.data:
            return False
        self._record_departure(target, "removed", reason=reason, removed_by=actor.user_id)
        logger.info(f"Member {member_id} removed from church {actor.church_id} by {actor.user_id}")
        return True

    def leave_church(self, membership: MembershipContext, reason: Optional[str] = None) -> bool:
        """Leave the church; owners must transfer ownership first"""
        if membership.role is ChurchRole.OWNER:
            raise HTTPException(
                status_code=400,
                detail="Church owners cannot leave their church. Please transfer ownership first or delete the church."
            )
        member = self.get_member(membership.church_id, membership.id)
        try:
            result = self.supabase.table("church_members")\
                .delete()\
                .eq("id", membership.id)\
                .execute()
        except Exception as e:
            logger.error(f"Error leaving church {membership.church_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to leave church")

        if not result.data:
            return False
        self._record_departure(member, "left", reason=reason)
        logger.info(f"User {membership.user_id} left church {membership.church_id}")
        return True

    def list_departures(self, church_id: str, limit: int = 50, offset: int = 0) -> List[DepartureResponse]:
        try:
            result = self.supabase.table("member_departures")\
                .select("*")\
                .eq("church_id", church_id)\
                .order("departed_at", desc=True)\
                .limit(limit)\
                .offset(offset)\
                .execute()
            return [DepartureResponse(**d) for d in (result.data or [])]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
