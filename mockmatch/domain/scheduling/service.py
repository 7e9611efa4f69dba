"""Interview slot service - Booking state machine for interview slots

Slot statuses: available → booked → completed
               available | booked → cancelled (interviewer)
               booked → available (interviewee cancels, slot reopens)

'completed' is never set by a user: past-ness is derived from the end time
at read time and made durable by complete_elapsed_slots().
"""

import logging
import secrets
from datetime import datetime
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...config import MEETING_LINK_BASE
from ...models import InterviewSlot, User
from ...shared.time_utils import to_utc_naive, utcnow
from .repository import SlotRepository
from .schemas import SlotCreate

logger = logging.getLogger(__name__)


def generate_meeting_link() -> str:
    return f"{MEETING_LINK_BASE}{secrets.token_hex(4)}"


class SlotService:
    """Service layer for interview slot business logic"""

    def __init__(self, db: Session, repo: Optional[SlotRepository] = None):
        self.db = db
        self.repo = repo or SlotRepository()

    def get_slot(self, slot_id: int) -> InterviewSlot:
        slot = self.repo.get_slot_by_id(self.db, slot_id)
        if not slot:
            raise HTTPException(status_code=404, detail="Interview slot not found")
        return slot

    def create_slot(self, data: SlotCreate, user: User) -> InterviewSlot:
        """Publish a new availability window; the caller becomes the interviewer"""
        start = to_utc_naive(data.startTime)
        end = to_utc_naive(data.endTime)
        if start >= end:
            raise HTTPException(status_code=400, detail="End time must be after start time")

        slot = self.repo.create_slot(
            self.db,
            user.id,
            start_time=start,
            end_time=end,
            status="available",
            meeting_link=data.meetingLink,
            meeting_type=data.meetingType or "zoom",
            notes=data.notes,
        )
        logger.info(f"📅 Slot {slot.id} created by user {user.id}: {start} → {end}")
        return self.get_slot(slot.id)

    def list_available(self, user: User, now: Optional[datetime] = None) -> list[InterviewSlot]:
        """Future open slots offered by other users"""
        return self.repo.list_available(self.db, now or utcnow(), exclude_interviewer_id=user.id)

    def list_upcoming(self, user: User, now: Optional[datetime] = None) -> list[InterviewSlot]:
        return self.repo.list_upcoming(self.db, user.id, now or utcnow())

    def list_past(self, user: User, now: Optional[datetime] = None) -> list[InterviewSlot]:
        return self.repo.list_past(self.db, user.id, now or utcnow())

    def book_slot(self, slot_id: int, user: User) -> InterviewSlot:
        """Claim an available slot as interviewee"""
        slot = self.get_slot(slot_id)

        if slot.interviewer_id == user.id:
            raise HTTPException(status_code=400, detail="You cannot book your own interview slot")
        if slot.status != "available":
            raise HTTPException(status_code=400, detail="This slot is not available for booking")

        if not self.repo.book_slot(self.db, slot_id, user.id):
            # Another booking won the race between our read and the update
            logger.info(f"⚠️ Slot {slot_id} was taken before user {user.id} could book it")
            raise HTTPException(status_code=400, detail="This slot is not available for booking")

        logger.info(f"✅ Slot {slot_id} booked by user {user.id}")
        return self.get_slot(slot_id)

    def cancel_slot(self, slot_id: int, user: User, now: Optional[datetime] = None) -> InterviewSlot:
        """Interviewer cancelling ends the slot; interviewee cancelling reopens it.

        A booked interview that has already ended can no longer be cancelled.
        """
        slot = self.get_slot(slot_id)
        now = now or utcnow()

        is_interviewer = slot.interviewer_id == user.id
        is_interviewee = slot.interviewee_id is not None and slot.interviewee_id == user.id
        if not is_interviewer and not is_interviewee:
            raise HTTPException(status_code=403, detail="Not authorized to cancel this interview")

        if slot.status not in ("available", "booked"):
            raise HTTPException(status_code=400, detail=f"Cannot cancel a {slot.status} interview slot")
        if slot.status == "booked" and slot.end_time <= now:
            raise HTTPException(
                status_code=400, detail="Cannot cancel an interview that has already ended"
            )

        if is_interviewer:
            updated = self.repo.cancel_slot(self.db, slot_id, now)
            action = "cancelled"
        else:
            updated = self.repo.reopen_slot(self.db, slot_id, user.id, now)
            action = "reopened"

        if not updated:
            raise HTTPException(status_code=400, detail="Could not cancel slot")

        logger.info(f"🗑️ Slot {slot_id} {action} by user {user.id}")
        return self.get_slot(slot_id)

    def update_meeting_link(self, slot_id: int, meeting_link: str, user: User) -> InterviewSlot:
        slot = self.get_slot(slot_id)

        if slot.interviewer_id != user.id:
            raise HTTPException(
                status_code=403, detail="Only the interviewer can update the meeting link"
            )
        link = (meeting_link or "").strip()
        if not link:
            raise HTTPException(status_code=400, detail="Meeting link is required")

        return self.repo.update_meeting_link(self.db, slot, link)


def complete_elapsed_slots(db: Session, now: Optional[datetime] = None) -> int:
    """
    Mark booked slots whose end time has passed as completed.
    Run as a scheduled job (see worker.py).

    Returns:
        int: Number of slots transitioned booked → completed
    """
    try:
        count = SlotRepository.complete_elapsed(db, now or utcnow())
    except Exception as e:
        logger.error(f"❌ Error completing elapsed slots: {str(e)}")
        db.rollback()
        raise

    if count:
        logger.info(f"✅ {count} interview slot(s) transitioned: booked → completed")
    else:
        logger.debug("ℹ️ No elapsed interview slots to complete")
    return count
