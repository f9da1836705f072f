from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from enum import Enum


class JoinRequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


class JoinRequestCreate(BaseModel):
    church_id: str
    campus_id: Optional[str] = None
    personal_note: Optional[str] = None


class JoinRequestReview(BaseModel):
    review_note: Optional[str] = None


class JoinRequestResponse(BaseModel):
    id: str
    church_id: str
    campus_id: Optional[str] = None
    user_id: str
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    personal_note: Optional[str] = None
    status: JoinRequestStatus
    reviewed_by: Optional[str] = None
    reviewed_at: Optional[datetime] = None
    review_note: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
