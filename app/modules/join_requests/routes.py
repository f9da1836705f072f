from fastapi import APIRouter, Depends, HTTPException, Query, status
from app.database.supabase_client import get_supabase
from app.modules.join_requests.schemas import (
    JoinRequestCreate, JoinRequestReview, JoinRequestResponse, JoinRequestStatus
)
from app.modules.join_requests.service import JoinRequestService
from app.config.permissions_config import Capability, Grant
from app.core.authority import grant_for
from app.core.dependencies import MembershipContext, ensure_capability, get_current_user_id, get_membership
from supabase import Client
from typing import Dict, List, Optional

router = APIRouter(tags=["join-requests"])


def get_join_request_service(supabase: Client = Depends(get_supabase)) -> JoinRequestService:
    return JoinRequestService(supabase)


@router.post("/join-requests", response_model=JoinRequestResponse, status_code=201)
async def create_join_request(
    request_data: JoinRequestCreate,
    user_data: Dict = Depends(get_current_user_id),
    service: JoinRequestService = Depends(get_join_request_service)
):
    """Ask to join a church"""
    return service.create_request(request_data, user_data)


@router.get("/churches/{church_id}/join-requests", response_model=List[JoinRequestResponse])
async def list_join_requests(
    church_id: str,
    status_filter: Optional[JoinRequestStatus] = Query(JoinRequestStatus.PENDING, alias="status"),
    membership: MembershipContext = Depends(get_membership),
    service: JoinRequestService = Depends(get_join_request_service)
):
    """List join requests: all for owners, campus requests for overseers and moderators"""
    grant = grant_for(membership.role, Capability.APPROVE_JOIN_REQUESTS)
    if grant is Grant.CHURCH:
        return service.list_requests(church_id, status=status_filter)
    if grant is Grant.CAMPUS:
        return service.list_requests(church_id, status=status_filter, campus_ids=sorted(membership.campus_ids))
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="You do not have permission to view join requests"
    )


@router.post("/churches/{church_id}/join-requests/{request_id}/approve", response_model=JoinRequestResponse)
async def approve_join_request(
    church_id: str,
    request_id: str,
    review: Optional[JoinRequestReview] = None,
    membership: MembershipContext = Depends(get_membership),
    service: JoinRequestService = Depends(get_join_request_service)
):
    """Approve a pending join request"""
    join_request = service.get_pending_request(church_id, request_id)
    ensure_capability(membership, Capability.APPROVE_JOIN_REQUESTS, join_request.campus_id)
    return service.approve_request(join_request, membership.user_id, review.review_note if review else None)


@router.post("/churches/{church_id}/join-requests/{request_id}/deny", response_model=JoinRequestResponse)
async def deny_join_request(
    church_id: str,
    request_id: str,
    review: Optional[JoinRequestReview] = None,
    membership: MembershipContext = Depends(get_membership),
    service: JoinRequestService = Depends(get_join_request_service)
):
    """Deny a pending join request"""
    join_request = service.get_pending_request(church_id, request_id)
    ensure_capability(membership, Capability.APPROVE_JOIN_REQUESTS, join_request.campus_id)
    return service.deny_request(join_request, membership.user_id, review.review_note if review else None)
