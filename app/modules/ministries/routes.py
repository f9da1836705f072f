from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.modules.ministries.schemas import (
    MinistryCreate, MinistryUpdate, MinistryResponse,
    VolunteerCreate, VolunteerUpdate, VolunteerResponse,
    MinistryScheduleCreate, MinistryScheduleUpdate, MinistryScheduleResponse
)
from app.modules.ministries.service import MinistryService, VolunteerService
from app.modules.scheduling.service import ScheduleService
from app.config.permissions_config import Capability
from app.core.dependencies import MembershipContext, get_membership, require_capability
from app.core.scheduling import BookingKind, BookingStatus
from supabase import Client
from typing import List, Optional
from datetime import date

router = APIRouter(prefix="/churches/{church_id}/ministries", tags=["ministries"])


def get_ministry_service(supabase: Client = Depends(get_supabase)) -> MinistryService:
    return MinistryService(supabase)


def get_volunteer_service(supabase: Client = Depends(get_supabase)) -> VolunteerService:
    return VolunteerService(supabase)


def get_schedule_service(supabase: Client = Depends(get_supabase)) -> ScheduleService:
    return ScheduleService(supabase, BookingKind.MINISTRY, MinistryScheduleResponse)


@router.get("", response_model=List[MinistryResponse])
async def list_ministries(
    church_id: str,
    category: Optional[str] = None,
    is_active: Optional[bool] = None,
    membership: MembershipContext = Depends(get_membership),
    service: MinistryService = Depends(get_ministry_service)
):
    """List ministries of the church (members only)"""
    return service.list_ministries(church_id, category=category, is_active=is_active)


@router.post("", response_model=MinistryResponse, status_code=201)
async def create_ministry(
    church_id: str,
    ministry_data: MinistryCreate,
    membership: MembershipContext = Depends(require_capability(Capability.MANAGE_MINISTRIES)),
    service: MinistryService = Depends(get_ministry_service)
):
    """Create a ministry (owners and overseers)"""
    return service.create_ministry(church_id, ministry_data, membership.user_id)


@router.put("/{ministry_id}", response_model=MinistryResponse)
async def update_ministry(
    church_id: str,
    ministry_id: str,
    ministry_data: MinistryUpdate,
    membership: MembershipContext = Depends(require_capability(Capability.MANAGE_MINISTRIES)),
    service: MinistryService = Depends(get_ministry_service)
):
    """Update a ministry (owners and overseers)"""
    return service.update_ministry(church_id, ministry_id, ministry_data)


@router.delete("/{ministry_id}", status_code=204)
async def delete_ministry(
    church_id: str,
    ministry_id: str,
    membership: MembershipContext = Depends(require_capability(Capability.MANAGE_MINISTRIES)),
    service: MinistryService = Depends(get_ministry_service)
):
    """Delete a ministry (owners and overseers)"""
    service.delete_ministry(church_id, ministry_id)
    return None


# Volunteer endpoints
@router.get("/{ministry_id}/volunteers", response_model=List[VolunteerResponse])
async def list_volunteers(
    church_id: str,
    ministry_id: str,
    is_active: Optional[bool] = None,
    membership: MembershipContext = Depends(get_membership),
    ministries: MinistryService = Depends(get_ministry_service),
    service: VolunteerService = Depends(get_volunteer_service)
):
    """List volunteers of a ministry (members only)"""
    ministries.get_ministry(church_id, ministry_id)
    return service.list_volunteers(ministry_id, is_active=is_active)


@router.post("/{ministry_id}/volunteers", response_model=VolunteerResponse, status_code=201)
async def add_volunteer(
    church_id: str,
    ministry_id: str,
    volunteer_data: VolunteerCreate,
    membership: MembershipContext = Depends(require_capability(Capability.MANAGE_MINISTRIES)),
    ministries: MinistryService = Depends(get_ministry_service),
    service: VolunteerService = Depends(get_volunteer_service)
):
    """Add a church member to a ministry (owners and overseers)"""
    ministries.get_ministry(church_id, ministry_id)
    return service.add_volunteer(church_id, ministry_id, volunteer_data)


@router.put("/{ministry_id}/volunteers/{volunteer_id}", response_model=VolunteerResponse)
async def update_volunteer(
    church_id: str,
    ministry_id: str,
    volunteer_id: str,
    volunteer_data: VolunteerUpdate,
    membership: MembershipContext = Depends(require_capability(Capability.MANAGE_MINISTRIES)),
    ministries: MinistryService = Depends(get_ministry_service),
    service: VolunteerService = Depends(get_volunteer_service)
):
    """Update a volunteer, e.g. deactivate them (owners and overseers)"""
    ministries.get_ministry(church_id, ministry_id)
    return service.update_volunteer(ministry_id, volunteer_id, volunteer_data)


@router.delete("/{ministry_id}/volunteers/{volunteer_id}", status_code=204)
async def remove_volunteer(
    church_id: str,
    ministry_id: str,
    volunteer_id: str,
    membership: MembershipContext = Depends(require_capability(Capability.MANAGE_MINISTRIES)),
    ministries: MinistryService = Depends(get_ministry_service),
    service: VolunteerService = Depends(get_volunteer_service)
):
    """Remove a volunteer from a ministry (owners and overseers)"""
    ministries.get_ministry(church_id, ministry_id)
    service.remove_volunteer(ministry_id, volunteer_id)
    return None


# Schedule endpoints
@router.get("/{ministry_id}/schedules", response_model=List[MinistryScheduleResponse])
async def list_schedules(
    church_id: str,
    ministry_id: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    status: Optional[BookingStatus] = None,
    volunteer_id: Optional[str] = None,
    membership: MembershipContext = Depends(get_membership),
    ministries: MinistryService = Depends(get_ministry_service),
    service: ScheduleService = Depends(get_schedule_service)
):
    """List schedules of a ministry (members only)"""
    ministries.get_ministry(church_id, ministry_id)
    return service.list_schedules(
        {"ministry_id": ministry_id},
        start_date=start_date,
        end_date=end_date,
        status=status,
        subject_id=volunteer_id,
    )


@router.post("/{ministry_id}/schedules", response_model=MinistryScheduleResponse, status_code=201)
async def create_schedule(
    church_id: str,
    ministry_id: str,
    schedule_data: MinistryScheduleCreate,
    membership: MembershipContext = Depends(require_capability(Capability.MANAGE_SCHEDULES)),
    ministries: MinistryService = Depends(get_ministry_service),
    service: ScheduleService = Depends(get_schedule_service)
):
    """Schedule a volunteer (owners and overseers)"""
    ministries.get_ministry(church_id, ministry_id)
    return service.create_schedule({"ministry_id": ministry_id}, schedule_data, membership.user_id)


@router.put("/{ministry_id}/schedules/{schedule_id}", response_model=MinistryScheduleResponse)
async def update_schedule(
    church_id: str,
    ministry_id: str,
    schedule_id: str,
    schedule_data: MinistryScheduleUpdate,
    membership: MembershipContext = Depends(require_capability(Capability.MANAGE_SCHEDULES)),
    ministries: MinistryService = Depends(get_ministry_service),
    service: ScheduleService = Depends(get_schedule_service)
):
    """Update a volunteer schedule or its status (owners and overseers)"""
    ministries.get_ministry(church_id, ministry_id)
    return service.update_schedule({"ministry_id": ministry_id}, schedule_id, schedule_data)


@router.delete("/{ministry_id}/schedules/{schedule_id}", status_code=204)
async def delete_schedule(
    church_id: str,
    ministry_id: str,
    schedule_id: str,
    membership: MembershipContext = Depends(require_capability(Capability.MANAGE_SCHEDULES)),
    ministries: MinistryService = Depends(get_ministry_service),
    service: ScheduleService = Depends(get_schedule_service)
):
    """Delete a volunteer schedule (owners and overseers)"""
    ministries.get_ministry(church_id, ministry_id)
    service.delete_schedule({"ministry_id": ministry_id}, schedule_id)
    return None
