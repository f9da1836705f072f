from pydantic import BaseModel, EmailStr
from typing import Optional
from datetime import date, datetime
from app.modules.scheduling.schemas import ScheduleBase, ScheduleUpdateBase, ScheduleResponseBase


class MinistryCreate(BaseModel):
    name: str
    category: str
    campus_id: Optional[str] = None
    description: Optional[str] = None
    leader_user_id: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = None
    meeting_info: Optional[str] = None


class MinistryUpdate(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    campus_id: Optional[str] = None
    description: Optional[str] = None
    leader_user_id: Optional[str] = None
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = None
    meeting_info: Optional[str] = None
    is_active: Optional[bool] = None


class MinistryResponse(BaseModel):
    id: str
    church_id: str
    campus_id: Optional[str] = None
    name: str
    category: str
    description: Optional[str] = None
    leader_user_id: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    meeting_info: Optional[str] = None
    is_active: bool = True
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class VolunteerCreate(BaseModel):
    user_id: str
    role_id: Optional[str] = None
    availability_notes: Optional[str] = None
    background_check_date: Optional[date] = None
    training_completed: bool = False


class VolunteerUpdate(BaseModel):
    role_id: Optional[str] = None
    availability_notes: Optional[str] = None
    background_check_date: Optional[date] = None
    training_completed: Optional[bool] = None
    is_active: Optional[bool] = None


class VolunteerResponse(BaseModel):
    id: str
    ministry_id: str
    user_id: str
    role_id: Optional[str] = None
    availability_notes: Optional[str] = None
    background_check_date: Optional[date] = None
    training_completed: bool = False
    is_active: bool = True
    joined_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MinistryScheduleCreate(ScheduleBase):
    volunteer_id: str
    service_type: str = "other"
    service_name: Optional[str] = None
    role_assignment: Optional[str] = None


class MinistryScheduleUpdate(ScheduleUpdateBase):
    volunteer_id: Optional[str] = None
    service_type: Optional[str] = None
    service_name: Optional[str] = None
    role_assignment: Optional[str] = None


class MinistryScheduleResponse(ScheduleResponseBase):
    ministry_id: str
    volunteer_id: str
    service_type: Optional[str] = None
    service_name: Optional[str] = None
    role_assignment: Optional[str] = None
