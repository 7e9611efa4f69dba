from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

# Experience levels in ascending order; adjacency is based on this ordering
EXPERIENCE_LEVELS = ("beginner", "intermediate", "advanced")
ANY_EXPERIENCE_LEVEL = "any"

MATCH_REQUEST_STATUSES = ("pending", "accepted", "rejected", "cancelled")
MEETING_TYPES = ("zoom", "google-meet", "microsoft-teams", "other")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    experience_level = Column(String(20), nullable=False, index=True)
    skills = Column(JSON, default=list, nullable=False)
    target_role = Column(String(255), nullable=True)
    bio = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    match_requests = relationship(
        "MatchRequest",
        back_populates="requester",
        foreign_keys="MatchRequest.requester_id",
    )


class MatchRequest(Base):
    __tablename__ = "match_requests"

    id = Column(Integer, primary_key=True, index=True)
    requester_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    # NULL until the request is accepted
    matched_peer_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    status = Column(String(20), default="pending", nullable=False, index=True)
    target_experience_level = Column(String(20), nullable=False)
    target_skills = Column(JSON, default=list, nullable=False)  # empty list matches any skill
    requested_time = Column(DateTime, nullable=True)  # proposed interview start (UTC)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    requester = relationship("User", foreign_keys=[requester_id], back_populates="match_requests")
    matched_peer = relationship("User", foreign_keys=[matched_peer_id])
    interview_slots = relationship("InterviewSlot", back_populates="match_request")


class InterviewSlot(Base):
    __tablename__ = "interview_slots"

    id = Column(Integer, primary_key=True, index=True)
    interviewer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    # NULL while the slot is available
    interviewee_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    start_time = Column(DateTime, nullable=False, index=True)
    end_time = Column(DateTime, nullable=False)
    # available, booked, completed, cancelled
    status = Column(String(20), default="available", nullable=False, index=True)
    meeting_link = Column(String(500), nullable=True)
    meeting_type = Column(String(30), default="zoom", nullable=False)
    notes = Column(Text, nullable=True)
    match_request_id = Column(Integer, ForeignKey("match_requests.id"), nullable=True)
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    interviewer = relationship("User", foreign_keys=[interviewer_id])
    interviewee = relationship("User", foreign_keys=[interviewee_id])
    match_request = relationship("MatchRequest", back_populates="interview_slots")
