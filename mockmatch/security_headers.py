"""
Security Headers Middleware for FastAPI

Adds security headers to every JSON API response:
- X-Frame-Options, X-Content-Type-Options, Referrer-Policy
- Content-Security-Policy locked down for a JSON-only API
- Strict-Transport-Security in production
- Permissions-Policy and Cache-Control for authenticated data
"""

import logging
from typing import Callable, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from .config import IS_PRODUCTION

logger = logging.getLogger(__name__)


def get_csp_policy() -> str:
    """The API only serves JSON, so nothing needs to load or frame it"""
    directives = [
        "default-src 'none'",
        "frame-ancestors 'none'",
        "base-uri 'none'",
        "form-action 'self'",
    ]
    return "; ".join(directives)


def get_permissions_policy() -> str:
    """Disable browser features that aren't needed for an API"""
    features = [
        "accelerometer=()",
        "camera=()",
        "geolocation=()",
        "gyroscope=()",
        "microphone=()",
        "payment=()",
        "usb=()",
    ]
    return ", ".join(features)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware that adds security headers to all responses except excluded paths."""

    def __init__(self, app, exclude_paths: Optional[list[str]] = None):
        super().__init__(app)
        self.exclude_paths = exclude_paths or []

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        path = request.url.path
        if any(path.startswith(excluded) for excluded in self.exclude_paths):
            return response

        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Content-Security-Policy"] = get_csp_policy()
        response.headers["Permissions-Policy"] = get_permissions_policy()

        if IS_PRODUCTION:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        # Responses carry per-user data
        if "Cache-Control" not in response.headers:
            response.headers["Cache-Control"] = "no-store"

        return response
