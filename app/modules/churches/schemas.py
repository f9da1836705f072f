from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class ChurchCreate(BaseModel):
    name: str
    description: Optional[str] = None
    location: Optional[str] = None
    is_public: bool = True


class ChurchUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    is_public: Optional[bool] = None


class ChurchResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    location: Optional[str] = None
    owner_id: str
    is_public: bool = True
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CampusCreate(BaseModel):
    name: str
    location: Optional[str] = None
    address: Optional[str] = None


class CampusUpdate(BaseModel):
    name: Optional[str] = None
    location: Optional[str] = None
    address: Optional[str] = None


class CampusResponse(BaseModel):
    id: str
    church_id: str
    name: str
    location: Optional[str] = None
    address: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class CampusOverseerAssign(BaseModel):
    member_id: str


class CampusOverseerResponse(BaseModel):
    id: str
    church_member_id: str
    campus_id: str
    assigned_at: datetime

    class Config:
        from_attributes = True
