from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum
from app.modules.scheduling.schemas import ScheduleBase, ScheduleUpdateBase, ScheduleResponseBase


class SafetyMemberCreate(BaseModel):
    user_id: str
    team_role: str = "member"
    specialty: str = "general"
    certifications: Optional[str] = None
    phone: Optional[str] = None
    availability_notes: Optional[str] = None


class SafetyMemberUpdate(BaseModel):
    team_role: Optional[str] = None
    specialty: Optional[str] = None
    certifications: Optional[str] = None
    phone: Optional[str] = None
    availability_notes: Optional[str] = None
    is_active: Optional[bool] = None


class SafetyMemberResponse(BaseModel):
    id: str
    church_id: str
    user_id: str
    team_role: Optional[str] = None
    specialty: Optional[str] = None
    certifications: Optional[str] = None
    phone: Optional[str] = None
    availability_notes: Optional[str] = None
    is_active: bool = True
    joined_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SafetyScheduleCreate(ScheduleBase):
    safety_member_id: str
    event_type: str = "service"
    event_name: Optional[str] = None


class SafetyScheduleUpdate(ScheduleUpdateBase):
    safety_member_id: Optional[str] = None
    event_type: Optional[str] = None
    event_name: Optional[str] = None


class SafetyScheduleResponse(ScheduleResponseBase):
    church_id: str
    safety_member_id: str
    event_type: Optional[str] = None
    event_name: Optional[str] = None


class IncidentType(str, Enum):
    MEDICAL = "medical"
    SECURITY = "security"
    ACCIDENT = "accident"
    FIRE = "fire"
    WEATHER = "weather"
    OTHER = "other"


class IncidentSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class IncidentStatus(str, Enum):
    OPEN = "open"
    UNDER_REVIEW = "under_review"
    RESOLVED = "resolved"
    CLOSED = "closed"

    @property
    def is_settled(self) -> bool:
        return self in (IncidentStatus.RESOLVED, IncidentStatus.CLOSED)


class IncidentCreate(BaseModel):
    campus_id: Optional[str] = None
    incident_type: IncidentType
    severity: IncidentSeverity
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    location: Optional[str] = None
    occurred_at: datetime
    people_involved: Optional[str] = None
    witnesses: Optional[str] = None
    actions_taken: str = Field(min_length=1)
    follow_up_needed: bool = False
    follow_up_notes: Optional[str] = None


class IncidentUpdate(BaseModel):
    campus_id: Optional[str] = None
    incident_type: Optional[IncidentType] = None
    severity: Optional[IncidentSeverity] = None
    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    occurred_at: Optional[datetime] = None
    people_involved: Optional[str] = None
    witnesses: Optional[str] = None
    actions_taken: Optional[str] = None
    follow_up_needed: Optional[bool] = None
    follow_up_notes: Optional[str] = None
    status: Optional[IncidentStatus] = None


class IncidentResponse(BaseModel):
    id: str
    church_id: str
    campus_id: Optional[str] = None
    reported_by: str
    reporter_name: Optional[str] = None
    incident_type: IncidentType
    severity: IncidentSeverity
    title: str
    description: str
    location: Optional[str] = None
    occurred_at: datetime
    people_involved: Optional[str] = None
    witnesses: Optional[str] = None
    actions_taken: str
    follow_up_needed: bool = False
    follow_up_notes: Optional[str] = None
    status: IncidentStatus
    resolved_at: Optional[datetime] = None
    resolved_by: Optional[str] = None
    resolver_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
