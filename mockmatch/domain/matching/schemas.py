"""Matching domain schemas - Pydantic models for match requests"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import MatchRequest
from ...shared.validators import normalize_skills, validate_experience_level
from ..users.schemas import UserResponse


class MatchRequestCreate(BaseModel):
    """Schema for broadcasting a match request. Status is always pending on creation."""

    targetExperienceLevel: str = "any"
    targetSkills: list[str] = []
    notes: Optional[str] = None
    requestedTime: Optional[datetime] = None

    @field_validator("targetExperienceLevel")
    @classmethod
    def validate_level(cls, v: str) -> str:
        return validate_experience_level(v, allow_any=True)

    @field_validator("targetSkills")
    @classmethod
    def clean_skills(cls, v: list[str]) -> list[str]:
        return normalize_skills(v)


class MatchRequestStatusUpdate(BaseModel):
    status: str


class MatchRequestResponse(BaseModel):
    id: int
    requesterId: int
    matchedPeerId: Optional[int] = None
    status: str
    targetExperienceLevel: str
    targetSkills: list[str]
    requestedTime: Optional[datetime] = None
    notes: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
    requester: Optional[UserResponse] = None
    matchedPeer: Optional[UserResponse] = None
    # Slot created when the request was accepted, if any
    interviewSlotId: Optional[int] = None

    @classmethod
    def from_request(cls, request: MatchRequest) -> "MatchRequestResponse":
        slot_ids = sorted(s.id for s in request.interview_slots or [])
        return cls(
            id=request.id,
            requesterId=request.requester_id,
            matchedPeerId=request.matched_peer_id,
            status=request.status,
            targetExperienceLevel=request.target_experience_level,
            targetSkills=list(request.target_skills or []),
            requestedTime=request.requested_time,
            notes=request.notes,
            createdAt=request.created_at,
            updatedAt=request.updated_at,
            requester=UserResponse.from_user(request.requester) if request.requester else None,
            matchedPeer=UserResponse.from_user(request.matched_peer) if request.matched_peer else None,
            interviewSlotId=slot_ids[0] if slot_ids else None,
        )


class MatchRequestListResponse(BaseModel):
    incoming: list[MatchRequestResponse]
    outgoing: list[MatchRequestResponse]
