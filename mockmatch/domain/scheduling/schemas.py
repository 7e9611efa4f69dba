"""Scheduling domain schemas - Pydantic models for interview slots"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...models import MEETING_TYPES, InterviewSlot, User
from ..users.schemas import UserResponse


class SlotCreate(BaseModel):
    """Schema for publishing an availability window"""

    startTime: datetime
    endTime: datetime
    meetingLink: Optional[str] = None
    meetingType: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("meetingType")
    @classmethod
    def validate_meeting_type(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip().lower()
        if v not in MEETING_TYPES:
            raise ValueError(f"Meeting type must be one of: {', '.join(MEETING_TYPES)}")
        return v


class MeetingLinkUpdate(BaseModel):
    meetingLink: str


class SlotResponse(BaseModel):
    """Interview slot with its participants embedded"""

    id: int
    interviewerId: int
    intervieweeId: Optional[int] = None
    startTime: datetime
    endTime: datetime
    status: str
    meetingLink: Optional[str] = None
    meetingType: str
    notes: Optional[str] = None
    matchRequestId: Optional[int] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
    interviewer: Optional[UserResponse] = None
    interviewee: Optional[UserResponse] = None
    # The other participant, relative to the viewer
    partner: Optional[UserResponse] = None

    @classmethod
    def from_slot(cls, slot: InterviewSlot, viewer: Optional[User] = None) -> "SlotResponse":
        interviewer = UserResponse.from_user(slot.interviewer) if slot.interviewer else None
        interviewee = UserResponse.from_user(slot.interviewee) if slot.interviewee else None

        partner = None
        if viewer is not None:
            if viewer.id == slot.interviewer_id:
                partner = interviewee
            elif viewer.id == slot.interviewee_id:
                partner = interviewer

        return cls(
            id=slot.id,
            interviewerId=slot.interviewer_id,
            intervieweeId=slot.interviewee_id,
            startTime=slot.start_time,
            endTime=slot.end_time,
            status=slot.status,
            meetingLink=slot.meeting_link,
            meetingType=slot.meeting_type,
            notes=slot.notes,
            matchRequestId=slot.match_request_id,
            createdAt=slot.created_at,
            updatedAt=slot.updated_at,
            interviewer=interviewer,
            interviewee=interviewee,
            partner=partner,
        )


class SlotListResponse(BaseModel):
    upcoming: list[SlotResponse]
    past: list[SlotResponse]
