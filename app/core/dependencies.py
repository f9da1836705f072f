"""
Core dependencies for route protection and permission checking
"""

from dataclasses import dataclass, field
from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.config.permissions_config import Capability, ChurchRole, Grant
from app.core.authority import (
    ScopeContext,
    authorize,
    denial_message,
    grant_for,
    parse_role,
    scope_denial_message,
)
from app.database.supabase_client import first_row, get_auth_client, get_supabase
from app.modules.auth.service import AuthService
from supabase import Client
from typing import Any, Dict, FrozenSet, Optional
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


@dataclass(frozen=True)
class MembershipContext:
    """The caller's church_members row plus the campuses they oversee."""

    id: str
    church_id: str
    user_id: str
    role: ChurchRole
    campus_id: Optional[str] = None
    overseen_campus_ids: FrozenSet[str] = field(default_factory=frozenset)
    user_name: Optional[str] = None
    user_email: Optional[str] = None

    @property
    def campus_ids(self) -> FrozenSet[str]:
        ids = set(self.overseen_campus_ids)
        if self.campus_id:
            ids.add(self.campus_id)
        return frozenset(ids)

    def scope(self, target_campus: Optional[str]) -> ScopeContext:
        return ScopeContext(
            actor_campus=self.campus_id,
            target_campus=target_campus,
            assigned_campuses=self.overseen_campus_ids,
        )


def _get_request_cache(request: Request) -> Dict[str, Any]:
    """Return request-scoped cache for membership lookups."""
    if not hasattr(request.state, "access_cache"):
        request.state.access_cache = {}
    return request.state.access_cache


def get_auth_service(supabase: Client = Depends(get_auth_client)) -> AuthService:
    return AuthService(supabase)


def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    token = credentials.credentials
    user_data = auth_service.get_current_user(token)
    return user_data


def get_overseen_campus_ids(membership_id: str, supabase: Client) -> FrozenSet[str]:
    result = supabase.table("campus_overseers")\
        .select("campus_id")\
        .eq("church_member_id", membership_id)\
        .execute()
    return frozenset(r["campus_id"] for r in (result.data or []))


def membership_from_row(row: Dict[str, Any], supabase: Client) -> MembershipContext:
    role = parse_role(row["role"])
    overseen = get_overseen_campus_ids(row["id"], supabase) if role is ChurchRole.OVERSEER else frozenset()
    return MembershipContext(
        id=row["id"],
        church_id=row["church_id"],
        user_id=row["user_id"],
        role=role,
        campus_id=row.get("campus_id"),
        overseen_campus_ids=overseen,
        user_name=row.get("user_name"),
        user_email=row.get("user_email"),
    )


def find_membership(user_id: str, supabase: Client, church_id: Optional[str] = None) -> Optional[MembershipContext]:
    """Return the user's membership (in church_id when given), or None."""
    try:
        query = supabase.table("church_members")\
            .select("*")\
            .eq("user_id", user_id)
        if church_id is not None:
            query = query.eq("church_id", church_id)
        row = first_row(query.limit(1).execute())
        if row is None:
            return None
        return membership_from_row(row, supabase)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error loading membership for user {user_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load church membership"
        )


def get_membership(
    church_id: str,
    request: Request,
    user_data: dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_supabase)
) -> MembershipContext:
    """Dependency for routes under /churches/{church_id}: the caller's membership in that church."""
    cache = _get_request_cache(request)
    cache_key = f"membership:{church_id}"
    if cache_key in cache:
        membership = cache[cache_key]
    else:
        membership = find_membership(user_data["id"], supabase, church_id)
        cache[cache_key] = membership
    if membership is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You must be a member of this church"
        )
    return membership


def ensure_capability(
    membership: MembershipContext,
    capability: Capability,
    target_campus: Optional[str] = None
) -> None:
    """Raise 403 unless the member's role grants capability for target_campus."""
    decision = authorize(membership.role, capability, membership.scope(target_campus))
    if decision.allowed:
        return
    if grant_for(membership.role, capability) is Grant.CAMPUS:
        detail = scope_denial_message(capability)
    else:
        detail = denial_message(capability)
    logger.info(
        "Denied %s for member %s (%s) on campus %s",
        capability.value, membership.id, membership.role.value, target_campus
    )
    raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def require_capability(capability: Capability):
    """Factory function to create a church-wide capability check dependency"""
    def check_capability(membership: MembershipContext = Depends(get_membership)) -> MembershipContext:
        ensure_capability(membership, capability)
        return membership
    return check_capability
