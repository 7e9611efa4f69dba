"""Match request repository - Database operations for match requests"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload, selectinload
from sqlalchemy.sql import func

from ...models import ANY_EXPERIENCE_LEVEL, MatchRequest


class MatchRequestRepository:
    """Repository for match request database operations"""

    @staticmethod
    def _with_users(db: Session):
        return db.query(MatchRequest).options(
            joinedload(MatchRequest.requester),
            joinedload(MatchRequest.matched_peer),
            selectinload(MatchRequest.interview_slots),
        )

    @staticmethod
    def get_request_by_id(db: Session, request_id: int) -> Optional[MatchRequest]:
        return MatchRequestRepository._with_users(db).filter(MatchRequest.id == request_id).first()

    @staticmethod
    def create_request(db: Session, requester_id: int, **request_data) -> MatchRequest:
        """Create a new match request"""
        request = MatchRequest(requester_id=requester_id, **request_data)
        db.add(request)
        db.commit()
        db.refresh(request)
        return request

    @staticmethod
    def list_pending_for_level(
        db: Session, experience_level: str, exclude_requester_id: int
    ) -> list[MatchRequest]:
        """Pending requests from other users targeting this level (or any level), newest first.

        Skill compatibility is checked by the caller since target_skills is a JSON list.
        """
        return (
            MatchRequestRepository._with_users(db)
            .filter(
                MatchRequest.status == "pending",
                MatchRequest.requester_id != exclude_requester_id,
                MatchRequest.target_experience_level.in_((experience_level, ANY_EXPERIENCE_LEVEL)),
            )
            .order_by(MatchRequest.created_at.desc(), MatchRequest.id.desc())
            .all()
        )

    @staticmethod
    def list_by_requester(db: Session, requester_id: int) -> list[MatchRequest]:
        """All requests created by a user, any status, newest first"""
        return (
            MatchRequestRepository._with_users(db)
            .filter(MatchRequest.requester_id == requester_id)
            .order_by(MatchRequest.created_at.desc(), MatchRequest.id.desc())
            .all()
        )

    @staticmethod
    def transition_from_pending(
        db: Session, request_id: int, status: str, matched_peer_id: Optional[int] = None
    ) -> int:
        """
        Move a pending request to `status` in a single conditional UPDATE.
        Does not commit, so the caller can persist related rows in the same transaction.

        Returns:
            int: 1 if the request was still pending and got updated, else 0
        """
        values = {MatchRequest.status: status, MatchRequest.updated_at: func.now()}
        if matched_peer_id is not None:
            values[MatchRequest.matched_peer_id] = matched_peer_id

        return (
            db.query(MatchRequest)
            .filter(MatchRequest.id == request_id, MatchRequest.status == "pending")
            .update(values, synchronize_session=False)
        )
