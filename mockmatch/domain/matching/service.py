"""Matching service - Match request lifecycle and best-match ranking

Match requests are broadcast: a pending request shows up for every user
whose profile fits its target experience level and skills, and any such
user may accept or reject it. Accepting binds the request to that user.

Request statuses: pending → accepted | rejected | cancelled (all terminal)
"""

import logging
from datetime import timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...config import BEST_MATCH_LIMIT, DEFAULT_INTERVIEW_MINUTES
from ...models import ANY_EXPERIENCE_LEVEL, MATCH_REQUEST_STATUSES, InterviewSlot, MatchRequest, User
from ...shared.time_utils import to_utc_naive, utcnow
from ..scheduling.service import generate_meeting_link
from ..users.repository import UserRepository
from .repository import MatchRequestRepository
from .schemas import MatchRequestCreate
from .scorer import ScoredCandidate, rank_best_matches

logger = logging.getLogger(__name__)

# Statuses a pending request can move to
RESPONSE_STATUSES = tuple(s for s in MATCH_REQUEST_STATUSES if s != "pending")


def is_compatible(request: MatchRequest, user: User) -> bool:
    """True when the user fits the request's target level and skills (empty/any are wildcards)"""
    level = request.target_experience_level
    if level != ANY_EXPERIENCE_LEVEL and level != user.experience_level:
        return False

    wanted = {s.lower() for s in request.target_skills or []}
    if not wanted:
        return True
    return bool(wanted & {s.lower() for s in user.skills or []})


def normalize_status(status: Optional[str]) -> str:
    value = (status or "").strip().lower()
    # Accept the single-l spelling too
    return "cancelled" if value == "canceled" else value


class MatchingService:
    """Service layer for match requests and best-match suggestions"""

    def __init__(
        self,
        db: Session,
        repo: Optional[MatchRequestRepository] = None,
        user_repo: Optional[UserRepository] = None,
    ):
        self.db = db
        self.repo = repo or MatchRequestRepository()
        self.user_repo = user_repo or UserRepository()

    def create_request(self, data: MatchRequestCreate, user: User) -> MatchRequest:
        """Create a match request; it always starts pending"""
        request = self.repo.create_request(
            self.db,
            user.id,
            status="pending",
            target_experience_level=data.targetExperienceLevel,
            target_skills=data.targetSkills,
            notes=data.notes,
            requested_time=to_utc_naive(data.requestedTime) if data.requestedTime else None,
        )
        logger.info(
            f"📨 Match request {request.id} created by user {user.id} "
            f"(level={request.target_experience_level}, skills={request.target_skills})"
        )
        return self.get_request(request.id, user)

    def list_incoming(self, user: User) -> list[MatchRequest]:
        """Pending requests from other users that this user's profile satisfies"""
        candidates = self.repo.list_pending_for_level(self.db, user.experience_level, user.id)
        return [r for r in candidates if is_compatible(r, user)]

    def list_outgoing(self, user: User) -> list[MatchRequest]:
        return self.repo.list_by_requester(self.db, user.id)

    def get_request(self, request_id: int, user: User) -> MatchRequest:
        request = self.repo.get_request_by_id(self.db, request_id)
        if not request:
            raise HTTPException(status_code=404, detail="Match request not found")

        if user.id in (request.requester_id, request.matched_peer_id):
            return request
        if request.status == "pending" and is_compatible(request, user):
            return request

        raise HTTPException(status_code=403, detail="Not authorized to view this match request")

    def update_status(self, request_id: int, status: str, user: User) -> MatchRequest:
        """Accept, reject or cancel a pending request.

        Accepting a request with a future requested time also books an
        interview slot (acceptor interviews the requester) in the same
        transaction.
        """
        new_status = normalize_status(status)
        if new_status not in RESPONSE_STATUSES:
            raise HTTPException(status_code=400, detail="Invalid status")

        request = self.repo.get_request_by_id(self.db, request_id)
        if not request:
            raise HTTPException(status_code=404, detail="Match request not found")

        if new_status == "cancelled":
            if request.requester_id != user.id:
                raise HTTPException(
                    status_code=403, detail="Only the requester can cancel this match request"
                )
        else:
            if request.requester_id == user.id:
                raise HTTPException(
                    status_code=403, detail="You cannot respond to your own match request"
                )
            if not is_compatible(request, user):
                raise HTTPException(
                    status_code=403, detail="Not authorized to update this match request"
                )

        if request.status != "pending":
            raise HTTPException(status_code=400, detail="Match request is no longer pending")

        requester_id = request.requester_id
        requested_time = request.requested_time

        try:
            updated = self.repo.transition_from_pending(
                self.db,
                request_id,
                new_status,
                matched_peer_id=user.id if new_status == "accepted" else None,
            )
            if updated and new_status == "accepted" and requested_time and requested_time > utcnow():
                self.db.add(
                    InterviewSlot(
                        interviewer_id=user.id,
                        interviewee_id=requester_id,
                        start_time=requested_time,
                        end_time=requested_time + timedelta(minutes=DEFAULT_INTERVIEW_MINUTES),
                        status="booked",
                        meeting_link=generate_meeting_link(),
                        match_request_id=request_id,
                    )
                )
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to update match request {request_id}: {str(e)}")
            raise

        if not updated:
            logger.info(f"⚠️ Match request {request_id} changed state before user {user.id} responded")
            raise HTTPException(status_code=400, detail="Match request is no longer pending")

        logger.info(f"✅ Match request {request_id}: pending → {new_status} by user {user.id}")
        # Caller was authorized above; a rejecter is not a viewer of the result
        return self.repo.get_request_by_id(self.db, request_id)

    def best_matches(self, user: User, limit: int = BEST_MATCH_LIMIT) -> list[ScoredCandidate]:
        """Top candidate peers for the user by best-match score"""
        candidates = self.user_repo.list_users(self.db, exclude_user_id=user.id)
        return rank_best_matches(user, candidates, limit=limit)
