from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class InviteCreate(BaseModel):
    campus_id: Optional[str] = None
    max_uses: Optional[int] = Field(default=None, gt=0)
    expires_in_days: Optional[int] = Field(default=None, gt=0)


class InviteResponse(BaseModel):
    id: str
    church_id: str
    campus_id: Optional[str] = None
    code: str
    created_by: str
    max_uses: Optional[int] = None
    current_uses: int = 0
    expires_at: Optional[datetime] = None
    is_active: bool = True
    created_at: datetime
    url: Optional[str] = None

    class Config:
        from_attributes = True


class InviteJoinRequest(BaseModel):
    code: str


class InviteJoinResponse(BaseModel):
    success: bool = True
    church_id: str
    campus_id: Optional[str] = None
    membership_id: str
    message: str
