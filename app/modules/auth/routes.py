from fastapi import APIRouter, Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.database.supabase_client import get_supabase
from app.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse,
    MeResponse, MembershipSummary
)
from app.modules.auth.service import AuthService
from app.core.authority import granted_capabilities, promotable_roles, role_description, role_display_name
from app.core.dependencies import get_auth_service, get_current_user_id, find_membership
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])

# Security scheme for JWT Bearer token
security = HTTPBearer()


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user"""
    return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token"""
    return service.login(login_data)


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and invalidate token"""
    service.logout(token)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=MeResponse)
async def get_current_user(
    current_user: Dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_supabase),
):
    """Get current user, their church membership and granted capabilities (for frontend UI)."""
    membership = find_membership(current_user["id"], supabase)
    summary = None
    if membership is not None:
        summary = MembershipSummary(
            id=membership.id,
            church_id=membership.church_id,
            campus_id=membership.campus_id,
            overseen_campus_ids=sorted(membership.overseen_campus_ids),
            role=membership.role.value,
            role_display_name=role_display_name(membership.role),
            role_description=role_description(membership.role),
            promotable_roles=[r.value for r in promotable_roles(membership.role)],
            capabilities=granted_capabilities(membership.role),
        )
    return MeResponse(
        id=current_user["id"],
        email=current_user.get("email"),
        user_metadata=current_user.get("user_metadata") or {},
        membership=summary,
    )
