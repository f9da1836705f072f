from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.churches.schemas import (
    ChurchCreate, ChurchUpdate, ChurchResponse,
    CampusCreate, CampusUpdate, CampusResponse,
    CampusOverseerAssign, CampusOverseerResponse
)
from app.modules.churches.service import ChurchService, CampusService
from app.config.permissions_config import Capability
from app.core.dependencies import (
    MembershipContext,
    ensure_capability,
    get_current_user_id,
    get_membership,
    require_capability,
)
from supabase import Client
from typing import List, Dict

router = APIRouter(prefix="/churches", tags=["churches"])


def get_church_service(supabase: Client = Depends(get_supabase)) -> ChurchService:
    return ChurchService(supabase)


def get_campus_service(supabase: Client = Depends(get_supabase)) -> CampusService:
    return CampusService(supabase)


@router.post("", response_model=ChurchResponse, status_code=201)
async def create_church(
    church_data: ChurchCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: ChurchService = Depends(get_church_service)
):
    """Create a new church; the caller becomes its owner"""
    return service.create_church(church_data, user_data)


@router.get("/{church_id}", response_model=ChurchResponse)
async def get_church(
    church_id: str,
    membership: MembershipContext = Depends(get_membership),
    service: ChurchService = Depends(get_church_service)
):
    """Get church by ID (members only)"""
    return service.get_church_by_id(church_id)


@router.put("/{church_id}", response_model=ChurchResponse)
async def update_church(
    church_id: str,
    church_data: ChurchUpdate,
    membership: MembershipContext = Depends(require_capability(Capability.UPDATE_CHURCH)),
    service: ChurchService = Depends(get_church_service)
):
    """Update church details (owners only)"""
    return service.update_church(church_id, church_data)


@router.delete("/{church_id}", status_code=204)
async def delete_church(
    church_id: str,
    membership: MembershipContext = Depends(require_capability(Capability.DELETE_CHURCH)),
    service: ChurchService = Depends(get_church_service)
):
    """Delete church (owners only)"""
    service.delete_church(church_id)
    return None


# Campus endpoints
@router.get("/{church_id}/campuses", response_model=List[CampusResponse])
async def list_campuses(
    church_id: str,
    membership: MembershipContext = Depends(get_membership),
    service: CampusService = Depends(get_campus_service)
):
    """List campuses of a church (members only)"""
    return service.list_campuses(church_id)


@router.post("/{church_id}/campuses", response_model=CampusResponse, status_code=201)
async def create_campus(
    church_id: str,
    campus_data: CampusCreate,
    membership: MembershipContext = Depends(require_capability(Capability.CREATE_CAMPUS)),
    service: CampusService = Depends(get_campus_service)
):
    """Create a campus (owners only)"""
    return service.create_campus(church_id, campus_data)


@router.put("/{church_id}/campuses/{campus_id}", response_model=CampusResponse)
async def update_campus(
    church_id: str,
    campus_id: str,
    campus_data: CampusUpdate,
    membership: MembershipContext = Depends(get_membership),
    service: CampusService = Depends(get_campus_service)
):
    """Update a campus (owners, or overseers of that campus)"""
    ensure_capability(membership, Capability.UPDATE_CAMPUS, campus_id)
    return service.update_campus(church_id, campus_id, campus_data)


@router.delete("/{church_id}/campuses/{campus_id}", status_code=204)
async def delete_campus(
    church_id: str,
    campus_id: str,
    membership: MembershipContext = Depends(require_capability(Capability.DELETE_CAMPUS)),
    service: CampusService = Depends(get_campus_service)
):
    """Delete a campus (owners only)"""
    service.get_campus(church_id, campus_id)
    service.delete_campus(church_id, campus_id)
    return None


@router.post("/{church_id}/campuses/{campus_id}/overseers", response_model=CampusOverseerResponse, status_code=201)
async def assign_campus_overseer(
    church_id: str,
    campus_id: str,
    assign_data: CampusOverseerAssign,
    membership: MembershipContext = Depends(require_capability(Capability.PROMOTE_TO_OVERSEER)),
    service: CampusService = Depends(get_campus_service)
):
    """Give an overseer responsibility for a campus (owners only)"""
    return service.assign_overseer(church_id, campus_id, assign_data.member_id)


@router.delete("/{church_id}/campuses/{campus_id}/overseers/{member_id}", status_code=204)
async def remove_campus_overseer(
    church_id: str,
    campus_id: str,
    member_id: str,
    membership: MembershipContext = Depends(require_capability(Capability.PROMOTE_TO_OVERSEER)),
    service: CampusService = Depends(get_campus_service)
):
    """Remove an overseer's responsibility for a campus (owners only)"""
    service.get_campus(church_id, campus_id)
    service.remove_overseer(campus_id, member_id)
    return None
