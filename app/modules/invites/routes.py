from fastapi import APIRouter, Depends, HTTPException, status
from app.database.supabase_client import get_supabase
from app.modules.invites.schemas import InviteCreate, InviteResponse, InviteJoinRequest, InviteJoinResponse
from app.modules.invites.service import InviteService
from app.config.permissions_config import Capability, Grant
from app.core.authority import authorize, grant_for
from app.core.dependencies import MembershipContext, ensure_capability, get_current_user_id, get_membership
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/churches/{church_id}/invites", tags=["invites"])
join_router = APIRouter(prefix="/invites", tags=["invites"])


def get_invite_service(supabase: Client = Depends(get_supabase)) -> InviteService:
    return InviteService(supabase)


@router.post("", response_model=InviteResponse, status_code=201)
async def create_invite(
    church_id: str,
    invite_data: InviteCreate,
    membership: MembershipContext = Depends(get_membership),
    service: InviteService = Depends(get_invite_service)
):
    """Create an invite code (owners; overseers for their campus)"""
    ensure_capability(membership, Capability.CREATE_INVITES, invite_data.campus_id)
    return service.create_invite(church_id, invite_data, membership.user_id)


@router.get("", response_model=List[InviteResponse])
async def list_invites(
    church_id: str,
    membership: MembershipContext = Depends(get_membership),
    service: InviteService = Depends(get_invite_service)
):
    """List invite codes: all for owners, campus invites for overseers"""
    if authorize(membership.role, Capability.VIEW_ALL_INVITES, membership.scope(None)).allowed:
        return service.list_invites(church_id)
    if grant_for(membership.role, Capability.CREATE_INVITES) is Grant.CAMPUS:
        return service.list_invites(church_id, campus_ids=sorted(membership.campus_ids))
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="You do not have permission to view invites"
    )


@router.put("/{invite_id}/deactivate", response_model=InviteResponse)
async def deactivate_invite(
    church_id: str,
    invite_id: str,
    membership: MembershipContext = Depends(get_membership),
    service: InviteService = Depends(get_invite_service)
):
    """Deactivate an invite code (owners; overseers for their campus)"""
    invite = service.get_invite(church_id, invite_id)
    ensure_capability(membership, Capability.DELETE_INVITES, invite.campus_id)
    return service.deactivate_invite(church_id, invite_id)


@join_router.post("/join", response_model=InviteJoinResponse)
async def join_with_invite(
    join_data: InviteJoinRequest,
    user_data: Dict = Depends(get_current_user_id),
    service: InviteService = Depends(get_invite_service)
):
    """Join a church with an invite code"""
    return service.join_with_code(join_data.code.strip(), user_data)
