from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from app.config.permissions_config import ChurchRole


class MemberResponse(BaseModel):
    id: str
    church_id: str
    campus_id: Optional[str] = None
    user_id: str
    role: ChurchRole
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    joined_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class RoleChangeRequest(BaseModel):
    role: ChurchRole


class CampusAssignRequest(BaseModel):
    campus_id: Optional[str] = None  # None removes the assignment


class LeaveRequest(BaseModel):
    reason: Optional[str] = None


class DepartureResponse(BaseModel):
    id: str
    church_id: str
    user_id: str
    user_name: Optional[str] = None
    role: str
    reason: Optional[str] = None
    departure_type: str
    removed_by: Optional[str] = None
    departed_at: datetime

    class Config:
        from_attributes = True


class MemberActionResponse(BaseModel):
    success: bool = True
    message: str
