"""Interview slot router - FastAPI endpoints for publishing and booking slots"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import MeetingLinkUpdate, SlotCreate, SlotListResponse, SlotResponse
from .service import SlotService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/interview-slots", tags=["Interview Slots"])


def get_slot_service(db: Session = Depends(get_db)) -> SlotService:
    """Dependency injection for SlotService"""
    return SlotService(db)


@router.post("", response_model=SlotResponse, status_code=201)
async def create_slot(
    data: SlotCreate,
    current_user: User = Depends(get_current_user),
    service: SlotService = Depends(get_slot_service),
):
    """Publish an availability window as interviewer"""
    return SlotResponse.from_slot(service.create_slot(data, current_user), current_user)


@router.get("", response_model=SlotListResponse)
async def list_my_interviews(
    current_user: User = Depends(get_current_user),
    service: SlotService = Depends(get_slot_service),
):
    """Upcoming and past interviews for the current user"""
    return SlotListResponse(
        upcoming=[SlotResponse.from_slot(s, current_user) for s in service.list_upcoming(current_user)],
        past=[SlotResponse.from_slot(s, current_user) for s in service.list_past(current_user)],
    )


@router.get("/available", response_model=list[SlotResponse])
async def list_available_slots(
    current_user: User = Depends(get_current_user),
    service: SlotService = Depends(get_slot_service),
):
    return [SlotResponse.from_slot(s, current_user) for s in service.list_available(current_user)]


@router.get("/upcoming", response_model=list[SlotResponse])
async def list_upcoming_interviews(
    current_user: User = Depends(get_current_user),
    service: SlotService = Depends(get_slot_service),
):
    return [SlotResponse.from_slot(s, current_user) for s in service.list_upcoming(current_user)]


@router.get("/past", response_model=list[SlotResponse])
async def list_past_interviews(
    current_user: User = Depends(get_current_user),
    service: SlotService = Depends(get_slot_service),
):
    return [SlotResponse.from_slot(s, current_user) for s in service.list_past(current_user)]


@router.get("/{slot_id}", response_model=SlotResponse)
async def get_slot(
    slot_id: int,
    current_user: User = Depends(get_current_user),
    service: SlotService = Depends(get_slot_service),
):
    return SlotResponse.from_slot(service.get_slot(slot_id), current_user)


@router.put("/{slot_id}/book", response_model=SlotResponse)
async def book_slot(
    slot_id: int,
    current_user: User = Depends(get_current_user),
    service: SlotService = Depends(get_slot_service),
):
    """Book an available slot as interviewee"""
    return SlotResponse.from_slot(service.book_slot(slot_id, current_user), current_user)


@router.put("/{slot_id}/cancel", response_model=SlotResponse)
async def cancel_slot(
    slot_id: int,
    current_user: User = Depends(get_current_user),
    service: SlotService = Depends(get_slot_service),
):
    """Cancel as interviewer (ends the slot) or as interviewee (reopens it)"""
    return SlotResponse.from_slot(service.cancel_slot(slot_id, current_user), current_user)


@router.patch("/{slot_id}/meeting-link", response_model=SlotResponse)
async def update_meeting_link(
    slot_id: int,
    data: MeetingLinkUpdate,
    current_user: User = Depends(get_current_user),
    service: SlotService = Depends(get_slot_service),
):
    slot = service.update_meeting_link(slot_id, data.meetingLink, current_user)
    return SlotResponse.from_slot(slot, current_user)
