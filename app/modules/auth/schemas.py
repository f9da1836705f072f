from pydantic import BaseModel, EmailStr
from typing import Optional, List, Dict


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
    email: str


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    full_name: Optional[str] = None


class RegisterResponse(BaseModel):
    user_id: str
    email: str
    message: str


class MembershipSummary(BaseModel):
    id: str
    church_id: str
    campus_id: Optional[str] = None
    overseen_campus_ids: List[str] = []
    role: str
    role_display_name: str
    role_description: str
    promotable_roles: List[str]
    capabilities: Dict[str, str]


class MeResponse(BaseModel):
    id: str
    email: Optional[str] = None
    user_metadata: Dict = {}
    membership: Optional[MembershipSummary] = None
