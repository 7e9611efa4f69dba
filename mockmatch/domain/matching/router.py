"""Matching router - FastAPI endpoints for match requests and best matches"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ..users.schemas import ScoredUserResponse, UserResponse
from .schemas import (
    MatchRequestCreate,
    MatchRequestListResponse,
    MatchRequestResponse,
    MatchRequestStatusUpdate,
)
from .service import MatchingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Matching"])


def get_matching_service(db: Session = Depends(get_db)) -> MatchingService:
    """Dependency injection for MatchingService"""
    return MatchingService(db)


# ============================================================================
# MATCH REQUESTS
# ============================================================================


@router.post("/match-requests", response_model=MatchRequestResponse, status_code=201)
async def create_match_request(
    data: MatchRequestCreate,
    current_user: User = Depends(get_current_user),
    service: MatchingService = Depends(get_matching_service),
):
    """Broadcast a new match request"""
    return MatchRequestResponse.from_request(service.create_request(data, current_user))


@router.get("/match-requests", response_model=MatchRequestListResponse)
async def list_match_requests(
    current_user: User = Depends(get_current_user),
    service: MatchingService = Depends(get_matching_service),
):
    """Incoming and outgoing requests for the current user"""
    return MatchRequestListResponse(
        incoming=[MatchRequestResponse.from_request(r) for r in service.list_incoming(current_user)],
        outgoing=[MatchRequestResponse.from_request(r) for r in service.list_outgoing(current_user)],
    )


@router.get("/match-requests/incoming", response_model=list[MatchRequestResponse])
async def list_incoming_match_requests(
    current_user: User = Depends(get_current_user),
    service: MatchingService = Depends(get_matching_service),
):
    """Pending requests from other users that match the current user's profile"""
    return [MatchRequestResponse.from_request(r) for r in service.list_incoming(current_user)]


@router.get("/match-requests/outgoing", response_model=list[MatchRequestResponse])
async def list_outgoing_match_requests(
    current_user: User = Depends(get_current_user),
    service: MatchingService = Depends(get_matching_service),
):
    return [MatchRequestResponse.from_request(r) for r in service.list_outgoing(current_user)]


@router.get("/match-requests/{request_id}", response_model=MatchRequestResponse)
async def get_match_request(
    request_id: int,
    current_user: User = Depends(get_current_user),
    service: MatchingService = Depends(get_matching_service),
):
    return MatchRequestResponse.from_request(service.get_request(request_id, current_user))


@router.put("/match-requests/{request_id}/status", response_model=MatchRequestResponse)
async def update_match_request_status(
    request_id: int,
    data: MatchRequestStatusUpdate,
    current_user: User = Depends(get_current_user),
    service: MatchingService = Depends(get_matching_service),
):
    """Accept, reject or cancel a pending match request"""
    request = service.update_status(request_id, data.status, current_user)
    return MatchRequestResponse.from_request(request)


# ============================================================================
# BEST MATCH
# ============================================================================


@router.get("/best-match", response_model=list[ScoredUserResponse])
async def best_match(
    current_user: User = Depends(get_current_user),
    service: MatchingService = Depends(get_matching_service),
):
    """Top scored peers for the current user"""
    return [
        ScoredUserResponse(
            **UserResponse.from_user(c.user).model_dump(),
            matchScore=round(c.match_score, 4),
            experienceScore=c.experience_score,
            skillScore=round(c.skill_score, 4),
        )
        for c in service.best_matches(current_user)
    ]
