"""User service - Business logic for the user directory and credentials"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...auth import hash_password, verify_password
from ...models import User
from .repository import UserRepository
from .schemas import RegisterRequest, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    """Service layer for user business logic"""

    def __init__(self, db: Session, repo: Optional[UserRepository] = None):
        self.db = db
        self.repo = repo or UserRepository()

    def register(self, data: RegisterRequest) -> User:
        """Create a new user; username and email must be unused"""
        if self.repo.get_user_by_username_or_email(self.db, data.username, data.email):
            logger.info(f"⚠️ Registration rejected, user exists: {data.username}")
            raise HTTPException(status_code=400, detail="User already exists")

        try:
            user = self.repo.create_user(
                self.db,
                username=data.username,
                password_hash=hash_password(data.password),
                full_name=data.fullName,
                email=data.email,
                experience_level=data.experienceLevel,
                skills=data.skills,
                target_role=data.targetRole,
                bio=data.bio,
            )
        except IntegrityError as e:
            # Username or email taken between the check and the insert
            self.db.rollback()
            raise HTTPException(status_code=400, detail="User already exists") from e

        logger.info(f"🆕 New user registered: {user.username} (id={user.id})")
        return user

    def authenticate(self, username: str, password: str) -> User:
        user = self.repo.get_user_by_username(self.db, username.strip())
        if not user or not verify_password(password, user.password_hash):
            logger.info(f"🔒 Failed login for username '{username}'")
            raise HTTPException(status_code=401, detail="Incorrect username or password")
        return user

    def get_user(self, user_id: int) -> User:
        user = self.repo.get_user_by_id(self.db, user_id)
        if not user:
            raise HTTPException(status_code=404, detail="User not found")
        return user

    def list_users(
        self,
        viewer: User,
        experience_level: Optional[str] = None,
        skill: Optional[str] = None,
    ) -> list[User]:
        """All users except the viewer, optionally filtered by level and skill"""
        users = self.repo.list_users(
            self.db, exclude_user_id=viewer.id, experience_level=experience_level
        )
        if skill:
            wanted = skill.strip().lower()
            users = [u for u in users if wanted in {s.lower() for s in (u.skills or [])}]
        return users

    def update_profile(self, user_id: int, data: UserUpdate, viewer: User) -> User:
        """Update a profile; users can only edit their own"""
        user = self.get_user(user_id)
        if user.id != viewer.id:
            logger.warning(f"🚫 User {viewer.id} tried to update profile {user_id}")
            raise HTTPException(status_code=403, detail="Not authorized to update this profile")

        if data.email is not None and self.repo.email_taken(self.db, data.email, exclude_user_id=user.id):
            raise HTTPException(status_code=400, detail="Email already registered")

        updates = {
            "full_name": data.fullName.strip() if data.fullName else None,
            "email": data.email,
            "experience_level": data.experienceLevel,
            "skills": data.skills,
            "target_role": data.targetRole,
            "bio": data.bio,
        }
        return self.repo.update_user(self.db, user, **updates)
