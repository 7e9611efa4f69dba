"""User repository - Database operations for users"""

from typing import Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ...models import User


class UserRepository:
    """Repository for user database operations"""

    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
        """Get user by ID"""
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def get_user_by_username(db: Session, username: str) -> Optional[User]:
        """Get user by username"""
        return db.query(User).filter(User.username == username).first()

    @staticmethod
    def get_user_by_username_or_email(db: Session, username: str, email: str) -> Optional[User]:
        """Find a user holding either identifier"""
        return (
            db.query(User)
            .filter(or_(User.username == username, func.lower(User.email) == email.lower()))
            .first()
        )

    @staticmethod
    def email_taken(db: Session, email: str, exclude_user_id: Optional[int] = None) -> bool:
        query = db.query(User.id).filter(func.lower(User.email) == email.lower())
        if exclude_user_id is not None:
            query = query.filter(User.id != exclude_user_id)
        return query.first() is not None

    @staticmethod
    def list_users(
        db: Session,
        exclude_user_id: Optional[int] = None,
        experience_level: Optional[str] = None,
    ) -> list[User]:
        """List users ordered by id, optionally excluding one and filtering by level"""
        query = db.query(User)
        if exclude_user_id is not None:
            query = query.filter(User.id != exclude_user_id)
        if experience_level:
            query = query.filter(User.experience_level == experience_level)
        return query.order_by(User.id.asc()).all()

    @staticmethod
    def create_user(db: Session, **user_data) -> User:
        """Create a new user"""
        user = User(**user_data)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def update_user(db: Session, user: User, **updates) -> User:
        """Update a user with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(user, key):
                setattr(user, key, value)

        db.commit()
        db.refresh(user)
        return user
