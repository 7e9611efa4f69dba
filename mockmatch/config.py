import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

# SQLite is the dev/test default; production points this at PostgreSQL
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./mockmatch.db")

ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()
IS_PRODUCTION = ENVIRONMENT == "production"

# Security - CRITICAL: No default secret key in production
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    import warnings

    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only

# Session cookie
SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "mockmatch_session")
SESSION_MAX_AGE = int(os.getenv("SESSION_MAX_AGE", str(60 * 60 * 24)))  # 1 day

# Password hashing cost (lower it in tests only)
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

# Matching / scheduling
BEST_MATCH_LIMIT = int(os.getenv("BEST_MATCH_LIMIT", "5"))
DEFAULT_INTERVIEW_MINUTES = int(os.getenv("DEFAULT_INTERVIEW_MINUTES", "60"))
MEETING_LINK_BASE = os.getenv("MEETING_LINK_BASE", "https://meet.jit.si/mock-interview-")

# Rate limiting for login/register (per client IP)
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
LOGIN_RATE_LIMIT = int(os.getenv("LOGIN_RATE_LIMIT", "10"))
LOGIN_RATE_WINDOW = int(os.getenv("LOGIN_RATE_WINDOW", "60"))
REGISTER_RATE_LIMIT = int(os.getenv("REGISTER_RATE_LIMIT", "5"))
REGISTER_RATE_WINDOW = int(os.getenv("REGISTER_RATE_WINDOW", "3600"))

# Frontend origins allowed by CORS
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")
ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    f"{FRONTEND_URL},http://localhost:3000",
).split(",")

SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"

# Background sweep that marks elapsed booked slots as completed
SLOT_SWEEP_MINUTES = int(os.getenv("SLOT_SWEEP_MINUTES", "15"))
