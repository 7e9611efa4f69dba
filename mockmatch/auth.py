import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, Response
from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from .config import (
    BCRYPT_ROUNDS,
    IS_PRODUCTION,
    SECRET_KEY,
    SESSION_COOKIE_NAME,
    SESSION_MAX_AGE,
)
from .database import get_db
from .models import User

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)

session_serializer = URLSafeTimedSerializer(SECRET_KEY, salt="mockmatch-session")


def hash_password(password: str) -> str:
    """Hash password using bcrypt"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against bcrypt hash"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        logger.error(f"Password verification error: {e}")
        return False


def create_session_token(user_id: int) -> str:
    """Sign the user id into a time-limited session token"""
    return session_serializer.dumps({"uid": user_id})


def read_session_token(token: str, max_age: int = SESSION_MAX_AGE) -> Optional[int]:
    """Return the user id from a session token, or None if it is invalid or expired"""
    try:
        data = session_serializer.loads(token, max_age=max_age)
    except SignatureExpired:
        logger.info("ℹ️ Session token expired")
        return None
    except BadSignature:
        logger.warning("⚠️ Session token with bad signature received")
        return None

    user_id = data.get("uid") if isinstance(data, dict) else None
    return user_id if isinstance(user_id, int) else None


def start_session(response: Response, user: User) -> None:
    """Attach a signed session cookie for the user to the response"""
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=create_session_token(user.id),
        max_age=SESSION_MAX_AGE,
        httponly=True,
        secure=IS_PRODUCTION,
        samesite="lax",
        path="/",
    )


def end_session(response: Response) -> None:
    response.delete_cookie(key=SESSION_COOKIE_NAME, path="/")


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """Resolve the authenticated user from the session cookie"""
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token:
        raise HTTPException(status_code=401, detail="Not authenticated")

    user_id = read_session_token(token)
    if user_id is None:
        raise HTTPException(status_code=401, detail="Not authenticated")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        logger.warning(f"⚠️ Session references unknown user {user_id}")
        raise HTTPException(status_code=401, detail="Not authenticated")

    return user
