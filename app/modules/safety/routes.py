from fastapi import APIRouter, Depends, Query
from app.database.supabase_client import get_supabase
from app.modules.safety.schemas import (
    SafetyMemberCreate, SafetyMemberUpdate, SafetyMemberResponse,
    SafetyScheduleCreate, SafetyScheduleUpdate, SafetyScheduleResponse,
    IncidentCreate, IncidentUpdate, IncidentResponse, IncidentStatus, IncidentSeverity, IncidentType
)
from app.modules.safety.service import IncidentService, SafetyTeamService
from app.modules.scheduling.service import ScheduleService
from app.config.permissions_config import Capability
from app.core.dependencies import MembershipContext, get_membership, require_capability
from app.core.scheduling import BookingKind, BookingStatus
from supabase import Client
from typing import List, Optional
from datetime import date

router = APIRouter(prefix="/churches/{church_id}", tags=["safety"])


def get_safety_team_service(supabase: Client = Depends(get_supabase)) -> SafetyTeamService:
    return SafetyTeamService(supabase)


def get_schedule_service(supabase: Client = Depends(get_supabase)) -> ScheduleService:
    return ScheduleService(supabase, BookingKind.SAFETY, SafetyScheduleResponse)


def get_incident_service(supabase: Client = Depends(get_supabase)) -> IncidentService:
    return IncidentService(supabase)


@router.get("/safety-team", response_model=List[SafetyMemberResponse])
async def list_safety_team(
    church_id: str,
    is_active: Optional[bool] = None,
    membership: MembershipContext = Depends(get_membership),
    service: SafetyTeamService = Depends(get_safety_team_service)
):
    """List the safety team (members only)"""
    return service.list_members(church_id, is_active=is_active)


@router.post("/safety-team", response_model=SafetyMemberResponse, status_code=201)
async def add_safety_team_member(
    church_id: str,
    member_data: SafetyMemberCreate,
    membership: MembershipContext = Depends(require_capability(Capability.MANAGE_SAFETY_TEAM)),
    service: SafetyTeamService = Depends(get_safety_team_service)
):
    """Add a member to the safety team (owners and overseers)"""
    return service.add_member(church_id, member_data)


@router.put("/safety-team/{member_id}", response_model=SafetyMemberResponse)
async def update_safety_team_member(
    church_id: str,
    member_id: str,
    member_data: SafetyMemberUpdate,
    membership: MembershipContext = Depends(require_capability(Capability.MANAGE_SAFETY_TEAM)),
    service: SafetyTeamService = Depends(get_safety_team_service)
):
    """Update a safety team member (owners and overseers)"""
    return service.update_member(church_id, member_id, member_data)


@router.delete("/safety-team/{member_id}", status_code=204)
async def remove_safety_team_member(
    church_id: str,
    member_id: str,
    membership: MembershipContext = Depends(require_capability(Capability.MANAGE_SAFETY_TEAM)),
    service: SafetyTeamService = Depends(get_safety_team_service)
):
    """Remove a member from the safety team (owners and overseers)"""
    service.remove_member(church_id, member_id)
    return None


@router.get("/safety-schedules", response_model=List[SafetyScheduleResponse])
async def list_safety_schedules(
    church_id: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    status: Optional[BookingStatus] = None,
    safety_member_id: Optional[str] = None,
    membership: MembershipContext = Depends(get_membership),
    service: ScheduleService = Depends(get_schedule_service)
):
    """List safety schedules (members only)"""
    return service.list_schedules(
        {"church_id": church_id},
        start_date=start_date,
        end_date=end_date,
        status=status,
        subject_id=safety_member_id,
    )


@router.post("/safety-schedules", response_model=SafetyScheduleResponse, status_code=201)
async def create_safety_schedule(
    church_id: str,
    schedule_data: SafetyScheduleCreate,
    membership: MembershipContext = Depends(require_capability(Capability.MANAGE_SCHEDULES)),
    service: ScheduleService = Depends(get_schedule_service)
):
    """Schedule a safety team member (owners and overseers)"""
    return service.create_schedule({"church_id": church_id}, schedule_data, membership.user_id)


@router.put("/safety-schedules/{schedule_id}", response_model=SafetyScheduleResponse)
async def update_safety_schedule(
    church_id: str,
    schedule_id: str,
    schedule_data: SafetyScheduleUpdate,
    membership: MembershipContext = Depends(require_capability(Capability.MANAGE_SCHEDULES)),
    service: ScheduleService = Depends(get_schedule_service)
):
    """Update a safety schedule or its status (owners and overseers)"""
    return service.update_schedule({"church_id": church_id}, schedule_id, schedule_data)


@router.delete("/safety-schedules/{schedule_id}", status_code=204)
async def delete_safety_schedule(
    church_id: str,
    schedule_id: str,
    membership: MembershipContext = Depends(require_capability(Capability.MANAGE_SCHEDULES)),
    service: ScheduleService = Depends(get_schedule_service)
):
    """Delete a safety schedule (owners and overseers)"""
    service.delete_schedule({"church_id": church_id}, schedule_id)
    return None


@router.get("/safety-incidents", response_model=List[IncidentResponse])
async def list_incidents(
    church_id: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    campus_id: Optional[str] = None,
    incident_type: Optional[IncidentType] = Query(None, alias="type"),
    severity: Optional[IncidentSeverity] = None,
    status: Optional[IncidentStatus] = None,
    membership: MembershipContext = Depends(require_capability(Capability.MANAGE_SAFETY_INCIDENTS)),
    service: IncidentService = Depends(get_incident_service)
):
    """List incident reports (owners, overseers and moderators)"""
    return service.list_incidents(
        church_id,
        start_date=start_date,
        end_date=end_date,
        campus_id=campus_id,
        incident_type=incident_type,
        severity=severity,
        status=status,
    )


@router.post("/safety-incidents", response_model=IncidentResponse, status_code=201)
async def create_incident(
    church_id: str,
    incident_data: IncidentCreate,
    membership: MembershipContext = Depends(require_capability(Capability.MANAGE_SAFETY_INCIDENTS)),
    service: IncidentService = Depends(get_incident_service)
):
    """File an incident report"""
    return service.create_incident(church_id, incident_data, membership.user_id)


@router.get("/safety-incidents/{incident_id}", response_model=IncidentResponse)
async def get_incident(
    church_id: str,
    incident_id: str,
    membership: MembershipContext = Depends(require_capability(Capability.MANAGE_SAFETY_INCIDENTS)),
    service: IncidentService = Depends(get_incident_service)
):
    return service.get_incident(church_id, incident_id)


@router.put("/safety-incidents/{incident_id}", response_model=IncidentResponse)
async def update_incident(
    church_id: str,
    incident_id: str,
    incident_data: IncidentUpdate,
    membership: MembershipContext = Depends(require_capability(Capability.MANAGE_SAFETY_INCIDENTS)),
    service: IncidentService = Depends(get_incident_service)
):
    """Update an incident report or move it through open/under_review/resolved/closed"""
    return service.update_incident(church_id, incident_id, incident_data, membership.user_id)


@router.delete("/safety-incidents/{incident_id}", status_code=204)
async def delete_incident(
    church_id: str,
    incident_id: str,
    membership: MembershipContext = Depends(require_capability(Capability.MANAGE_SAFETY_INCIDENTS)),
    service: IncidentService = Depends(get_incident_service)
):
    service.delete_incident(church_id, incident_id)
    return None
