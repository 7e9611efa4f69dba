"""User router - FastAPI endpoints for the user directory"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...shared.validators import validate_experience_level
from .schemas import UserResponse, UserUpdate
from .service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Dependency injection for UserService"""
    return UserService(db)


@router.get("", response_model=list[UserResponse])
async def list_users(
    experienceLevel: Optional[str] = Query(None, description="Filter by experience level"),
    skill: Optional[str] = Query(None, description="Filter by skill tag"),
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """List peers (excludes the current user)"""
    try:
        level = validate_experience_level(experienceLevel)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    users = service.list_users(current_user, experience_level=level, skill=skill)
    return [UserResponse.from_user(u) for u in users]


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return UserResponse.from_user(service.get_user(user_id))


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    data: UserUpdate,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    """Update the current user's profile"""
    return UserResponse.from_user(service.update_profile(user_id, data, current_user))
