"""
Access-token helpers.

Login issues a short-lived HS256 JWT whose subject is the user's email.
Endpoints that change account state require `Authorization: Bearer <jwt>`.
"""
import logging
from datetime import datetime, timezone, timedelta
from typing import Optional

import jwt
from fastapi import Header

from config import settings
from domain.errors import UnauthorizedError, ServiceUnavailableError

logger = logging.getLogger(__name__)


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _parse_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        return None
    token = parts[1].strip()
    return token or None


def _require_secret() -> str:
    if not settings.jwt_secret:
        raise ServiceUnavailableError("Server auth misconfigured (JWT secret missing).")
    return settings.jwt_secret


def issue_access_token(*, email: str) -> str:
    now = _now_utc()
    exp = now.replace(microsecond=0) + timedelta(minutes=settings.jwt_access_ttl_minutes)
    payload = {
        "iss": settings.jwt_issuer,
        "sub": email,
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, _require_secret(), algorithm="HS256")


def decode_access_token(token: str) -> dict:
    secret = _require_secret()
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=["HS256"],
            issuer=settings.jwt_issuer,
            options={"require": ["exp", "iat", "iss", "sub"]},
        )
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Access token expired.")
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Invalid access token.")


async def require_authenticated_email(
    authorization: Optional[str] = Header(default=None),
) -> str:
    """FastAPI dependency — returns the email carried by a valid bearer token."""
    token = _parse_bearer_token(authorization)
    if not token:
        raise UnauthorizedError("Missing bearer token.")
    payload = decode_access_token(token)
    return payload["sub"]
