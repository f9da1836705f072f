from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.members.schemas import (
    MemberResponse, RoleChangeRequest, CampusAssignRequest,
    LeaveRequest, DepartureResponse, MemberActionResponse
)
from app.modules.members.service import MemberService
from app.config.permissions_config import Capability
from app.core.dependencies import MembershipContext, get_membership, require_capability
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/churches/{church_id}", tags=["members"])


def get_member_service(supabase: Client = Depends(get_supabase)) -> MemberService:
    return MemberService(supabase)


@router.get("/members", response_model=List[MemberResponse])
async def list_members(
    church_id: str,
    campus_id: Optional[str] = None,
    limit: int = 100,
    offset: int = 0,
    membership: MembershipContext = Depends(get_membership),
    service: MemberService = Depends(get_member_service)
):
    """List members of the church (members only)"""
    return service.list_members(church_id, campus_id=campus_id, limit=limit, offset=offset)


@router.put("/members/{member_id}/role", response_model=MemberResponse)
async def change_member_role(
    church_id: str,
    member_id: str,
    role_data: RoleChangeRequest,
    membership: MembershipContext = Depends(get_membership),
    service: MemberService = Depends(get_member_service)
):
    """Promote or demote a member"""
    return service.change_role(membership, member_id, role_data.role)


@router.post("/members/{member_id}/transfer-ownership", response_model=MemberResponse)
async def transfer_ownership(
    church_id: str,
    member_id: str,
    membership: MembershipContext = Depends(get_membership),
    service: MemberService = Depends(get_member_service)
):
    """Make another member the church owner; the caller becomes an overseer"""
    return service.transfer_ownership(membership, member_id)


@router.put("/members/{member_id}/campus", response_model=MemberResponse)
async def assign_member_campus(
    church_id: str,
    member_id: str,
    assign_data: CampusAssignRequest,
    membership: MembershipContext = Depends(get_membership),
    service: MemberService = Depends(get_member_service)
):
    """Assign a member to a campus"""
    return service.assign_campus(membership, member_id, assign_data.campus_id)


@router.delete("/members/{member_id}", response_model=MemberActionResponse)
async def remove_member(
    church_id: str,
    member_id: str,
    reason: Optional[str] = None,
    membership: MembershipContext = Depends(get_membership),
    service: MemberService = Depends(get_member_service)
):
    """Remove a member from the church"""
    service.remove_member(membership, member_id, reason)
    return MemberActionResponse(message="Member removed successfully")


@router.post("/leave", response_model=MemberActionResponse)
async def leave_church(
    church_id: str,
    leave_data: Optional[LeaveRequest] = None,
    membership: MembershipContext = Depends(get_membership),
    service: MemberService = Depends(get_member_service)
):
    """Leave the church"""
    service.leave_church(membership, leave_data.reason if leave_data else None)
    return MemberActionResponse(message="Successfully left church")


@router.get("/departures", response_model=List[DepartureResponse])
async def list_departures(
    church_id: str,
    limit: int = 50,
    offset: int = 0,
    membership: MembershipContext = Depends(require_capability(Capability.VIEW_DEPARTURES)),
    service: MemberService = Depends(get_member_service)
):
    """Departure history (owners and overseers)"""
    return service.list_departures(church_id, limit=limit, offset=offset)
