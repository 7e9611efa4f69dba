import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ..auth import end_session, get_current_user, start_session
from ..config import (
    LOGIN_RATE_LIMIT,
    LOGIN_RATE_WINDOW,
    REGISTER_RATE_LIMIT,
    REGISTER_RATE_WINDOW,
)
from ..database import get_db
from ..domain.users.schemas import LoginRequest, RegisterRequest, UserResponse
from ..domain.users.service import UserService
from ..models import User
from ..rate_limiter import create_rate_limiter
from ..schemas import MessageResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Authentication"])

login_rate_limit = create_rate_limiter(
    limit=LOGIN_RATE_LIMIT, window_seconds=LOGIN_RATE_WINDOW, key_prefix="login"
)
register_rate_limit = create_rate_limiter(
    limit=REGISTER_RATE_LIMIT, window_seconds=REGISTER_RATE_WINDOW, key_prefix="register"
)


@router.post("/register", response_model=UserResponse, status_code=201)
async def register(
    data: RegisterRequest,
    response: Response,
    db: Session = Depends(get_db),
    _: None = Depends(register_rate_limit),
):
    """Create an account and log the new user in"""
    user = UserService(db).register(data)
    start_session(response, user)
    return UserResponse.from_user(user)


@router.post("/login", response_model=UserResponse)
async def login(
    data: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
    _: None = Depends(login_rate_limit),
):
    user = UserService(db).authenticate(data.username, data.password)
    start_session(response, user)
    logger.info(f"✅ User logged in: {user.username}")
    return UserResponse.from_user(user)


@router.post("/logout", response_model=MessageResponse)
async def logout(response: Response, current_user: User = Depends(get_current_user)):
    end_session(response)
    logger.info(f"👋 User logged out: {current_user.username}")
    return MessageResponse(message="Logged out")


@router.get("/user", response_model=UserResponse)
async def current_user_profile(current_user: User = Depends(get_current_user)):
    """Return the authenticated user"""
    return UserResponse.from_user(current_user)
