"""Shared validation utilities"""

import re
from typing import Optional

from ..models import ANY_EXPERIENCE_LEVEL, EXPERIENCE_LEVELS


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if email is None:
        return email

    email = email.strip().lower()
    if not email:
        raise ValueError("Email is required")

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def validate_experience_level(level: Optional[str], allow_any: bool = False) -> Optional[str]:
    """
    Normalize an experience level to its lowercase canonical form.

    Raises:
        ValueError: If the level is not beginner/intermediate/advanced
            (or "any" when allow_any is set)
    """
    if level is None:
        return level

    normalized = level.strip().lower()
    allowed = EXPERIENCE_LEVELS + ((ANY_EXPERIENCE_LEVEL,) if allow_any else ())
    if normalized not in allowed:
        raise ValueError(f"Experience level must be one of: {', '.join(allowed)}")

    return normalized


def normalize_skills(skills: Optional[list[str]]) -> list[str]:
    """Trim skill tags and drop blanks and case-insensitive duplicates, keeping order"""
    result = []
    seen = set()
    for skill in skills or []:
        if not isinstance(skill, str):
            continue
        tag = skill.strip()
        if not tag or tag.lower() in seen:
            continue
        seen.add(tag.lower())
        result.append(tag)
    return result
