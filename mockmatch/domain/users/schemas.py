"""User domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...models import User
from ...shared.validators import normalize_skills, validate_email, validate_experience_level


class RegisterRequest(BaseModel):
    """Schema for registering a new user"""

    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=6, max_length=128)
    fullName: str = Field(..., min_length=1, max_length=255)
    email: str
    experienceLevel: str
    skills: list[str] = []
    targetRole: Optional[str] = None
    bio: Optional[str] = None

    @field_validator("username", "fullName")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Must not be blank")
        return v

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v: str) -> str:
        return validate_email(v)

    @field_validator("experienceLevel")
    @classmethod
    def validate_level(cls, v: str) -> str:
        return validate_experience_level(v)

    @field_validator("skills")
    @classmethod
    def clean_skills(cls, v: list[str]) -> list[str]:
        return normalize_skills(v)


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserUpdate(BaseModel):
    """Schema for updating a profile; only provided fields change"""

    fullName: Optional[str] = None
    email: Optional[str] = None
    experienceLevel: Optional[str] = None
    skills: Optional[list[str]] = None
    targetRole: Optional[str] = None
    bio: Optional[str] = None

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v: Optional[str]) -> Optional[str]:
        return validate_email(v)

    @field_validator("experienceLevel")
    @classmethod
    def validate_level(cls, v: Optional[str]) -> Optional[str]:
        return validate_experience_level(v)

    @field_validator("skills")
    @classmethod
    def clean_skills(cls, v: Optional[list[str]]) -> Optional[list[str]]:
        if v is None:
            return v
        return normalize_skills(v)


class UserResponse(BaseModel):
    """Public view of a user (never includes the password hash)"""

    id: int
    username: str
    fullName: str
    email: str
    experienceLevel: str
    skills: list[str]
    targetRole: Optional[str] = None
    bio: Optional[str] = None
    createdAt: Optional[datetime] = None

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            username=user.username,
            fullName=user.full_name,
            email=user.email,
            experienceLevel=user.experience_level,
            skills=list(user.skills or []),
            targetRole=user.target_role,
            bio=user.bio,
            createdAt=user.created_at,
        )


class ScoredUserResponse(UserResponse):
    """A candidate peer with its best-match score breakdown"""

    matchScore: float
    experienceScore: float
    skillScore: float
