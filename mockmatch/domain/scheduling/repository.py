"""Interview slot repository - Database operations for interview slots"""

from datetime import datetime
from typing import Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.sql import func

from ...models import InterviewSlot


class SlotRepository:
    """Repository for interview slot database operations.

    State changes are conditional UPDATEs so that the status check and the
    write happen in one statement; callers inspect the returned row count.
    """

    @staticmethod
    def _with_participants(db: Session):
        return db.query(InterviewSlot).options(
            joinedload(InterviewSlot.interviewer), joinedload(InterviewSlot.interviewee)
        )

    @staticmethod
    def get_slot_by_id(db: Session, slot_id: int) -> Optional[InterviewSlot]:
        """Get a slot by ID"""
        return SlotRepository._with_participants(db).filter(InterviewSlot.id == slot_id).first()

    @staticmethod
    def create_slot(db: Session, interviewer_id: int, **slot_data) -> InterviewSlot:
        """Create a new slot"""
        slot = InterviewSlot(interviewer_id=interviewer_id, **slot_data)
        db.add(slot)
        db.commit()
        db.refresh(slot)
        return slot

    @staticmethod
    def list_available(
        db: Session, now: datetime, exclude_interviewer_id: Optional[int] = None
    ) -> list[InterviewSlot]:
        """Open slots starting in the future, soonest first"""
        query = SlotRepository._with_participants(db).filter(
            InterviewSlot.status == "available",
            InterviewSlot.start_time > now,
        )
        if exclude_interviewer_id is not None:
            query = query.filter(InterviewSlot.interviewer_id != exclude_interviewer_id)
        return query.order_by(InterviewSlot.start_time.asc(), InterviewSlot.id.asc()).all()

    @staticmethod
    def list_upcoming(db: Session, user_id: int, now: datetime) -> list[InterviewSlot]:
        """Booked slots the user takes part in that have not started yet"""
        return (
            SlotRepository._with_participants(db)
            .filter(
                or_(InterviewSlot.interviewer_id == user_id, InterviewSlot.interviewee_id == user_id),
                InterviewSlot.status == "booked",
                InterviewSlot.start_time > now,
            )
            .order_by(InterviewSlot.start_time.asc(), InterviewSlot.id.asc())
            .all()
        )

    @staticmethod
    def list_past(db: Session, user_id: int, now: datetime) -> list[InterviewSlot]:
        """Completed slots, plus booked slots whose end time has passed; most recent first"""
        return (
            SlotRepository._with_participants(db)
            .filter(
                or_(InterviewSlot.interviewer_id == user_id, InterviewSlot.interviewee_id == user_id),
                or_(
                    InterviewSlot.status == "completed",
                    and_(InterviewSlot.status == "booked", InterviewSlot.end_time <= now),
                ),
            )
            .order_by(InterviewSlot.start_time.desc(), InterviewSlot.id.desc())
            .all()
        )

    @staticmethod
    def book_slot(db: Session, slot_id: int, interviewee_id: int) -> int:
        """Claim an available slot. Returns the number of rows updated (0 or 1)."""
        updated = (
            db.query(InterviewSlot)
            .filter(
                InterviewSlot.id == slot_id,
                InterviewSlot.status == "available",
                InterviewSlot.interviewee_id.is_(None),
                InterviewSlot.interviewer_id != interviewee_id,
            )
            .update(
                {
                    InterviewSlot.interviewee_id: interviewee_id,
                    InterviewSlot.status: "booked",
                    InterviewSlot.updated_at: func.now(),
                },
                synchronize_session=False,
            )
        )
        db.commit()
        return updated

    @staticmethod
    def cancel_slot(db: Session, slot_id: int, now: datetime) -> int:
        """Terminate an available slot, or a booked one that has not ended yet"""
        updated = (
            db.query(InterviewSlot)
            .filter(
                InterviewSlot.id == slot_id,
                or_(
                    InterviewSlot.status == "available",
                    and_(InterviewSlot.status == "booked", InterviewSlot.end_time > now),
                ),
            )
            .update(
                {InterviewSlot.status: "cancelled", InterviewSlot.updated_at: func.now()},
                synchronize_session=False,
            )
        )
        db.commit()
        return updated

    @staticmethod
    def reopen_slot(db: Session, slot_id: int, interviewee_id: int, now: datetime) -> int:
        """Release a booking held by `interviewee_id` before it ends and make the slot available again"""
        updated = (
            db.query(InterviewSlot)
            .filter(
                InterviewSlot.id == slot_id,
                InterviewSlot.status == "booked",
                InterviewSlot.interviewee_id == interviewee_id,
                InterviewSlot.end_time > now,
            )
            .update(
                {
                    InterviewSlot.interviewee_id: None,
                    InterviewSlot.status: "available",
                    InterviewSlot.updated_at: func.now(),
                },
                synchronize_session=False,
            )
        )
        db.commit()
        return updated

    @staticmethod
    def update_meeting_link(db: Session, slot: InterviewSlot, meeting_link: str) -> InterviewSlot:
        slot.meeting_link = meeting_link
        db.commit()
        db.refresh(slot)
        return slot

    @staticmethod
    def complete_elapsed(db: Session, now: datetime) -> int:
        """Mark booked slots whose end time has passed as completed"""
        updated = (
            db.query(InterviewSlot)
            .filter(InterviewSlot.status == "booked", InterviewSlot.end_time <= now)
            .update(
                {InterviewSlot.status: "completed", InterviewSlot.updated_at: func.now()},
                synchronize_session=False,
            )
        )
        db.commit()
        return updated
