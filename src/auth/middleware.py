"""
Authentication middleware for role-based route protection.
"""

import logging
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from src.auth.jwt import get_token_from_cookie, verify_token

logger = logging.getLogger(__name__)

# Routes that don't require authentication
PUBLIC_ROUTES = {
    "/",
    "/api/auth/login",
    "/api/health",
    "/api/health/ready",
    "/api/health/live",
    "/favicon.ico",
}

# Route prefixes that don't require authentication
PUBLIC_PREFIXES = (
    "/docs",
    "/redoc",
    "/openapi.json",
)


def _json_error(detail: str, status_code: int) -> Response:
    return Response(
        content=f'{{"detail": "{detail}"}}',
        status_code=status_code,
        media_type="application/json",
    )


class AuthMiddleware(BaseHTTPMiddleware):
    """
    Coarse role check in front of the routers.

    - /admin/* requires the owner role
    - /panel/* requires owner or operator

    Route dependencies still load and verify the user; this only
    rejects requests early.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        path = request.url.path

        if path in PUBLIC_ROUTES or path.startswith(PUBLIC_PREFIXES):
            return await call_next(request)

        requires_auth = path.startswith("/admin") or path.startswith("/panel")
        if not requires_auth:
            return await call_next(request)

        token = get_token_from_cookie(request)
        payload = verify_token(token) if token else None

        if not payload:
            return _json_error("Not authenticated", 401)

        role = payload.get("role")

        if path.startswith("/admin") and role != "owner":
            logger.warning(f"Rejected {role} access to {path}")
            return _json_error("Owner access required", 403)

        if path.startswith("/panel") and role not in ("owner", "operator"):
            return _json_error("Access denied", 403)

        return await call_next(request)
