"""JWT bearer verification and the session context handed to the core."""

from __future__ import annotations

import logging
import os
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from backend.settings import Settings
from core.session import SessionContext


DEFAULT_SECRET = "stockwise-dev-secret-change-me-in-production"
DEFAULT_ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("JWT_ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))

logger = logging.getLogger(__name__)


bearer_scheme = HTTPBearer(auto_error=False)


class AuthenticatedUser(BaseModel):
    """User context extracted from a JWT access token."""

    id: int
    username: str


@lru_cache(maxsize=1)
def _secret_keys() -> tuple[str, ...]:
    settings = Settings.load()
    secrets = list(settings.jwt_secret_keys or [])

    if not secrets:
        if settings.is_production and not settings.allow_insecure_jwt_default:
            raise RuntimeError("JWT_SECRET_KEY missing: refusing to start in a sensitive environment")
        logger.warning("Using default JWT secret; set JWT_SECRET_KEY/JWT_SECRET_KEYS in production")
        secrets = [DEFAULT_SECRET]

    for value in secrets:
        if len(value) < 32:
            raise RuntimeError("JWT secret too short (<32 characters).")
    return tuple(secrets)


def _get_algorithm() -> str:
    return os.getenv("JWT_ALGORITHM", DEFAULT_ALGORITHM)


def create_access_token(claims: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """Sign claims with the current (first) secret.

    Tokens are issued by the external authentication service; this helper is
    the contract it shares with the API.
    """

    payload = claims.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    payload.update({"exp": expire})
    return jwt.encode(payload, _secret_keys()[0], algorithm=_get_algorithm())


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _decode_token(token: str) -> dict[str, Any]:
    last_error: Exception | None = None
    # Any configured secret verifies, which lets keys rotate without logging users out.
    for secret in _secret_keys():
        try:
            return jwt.decode(token, secret, algorithms=[_get_algorithm()])
        except jwt.ExpiredSignatureError as exc:
            raise _unauthorized("Token expired") from exc
        except jwt.InvalidTokenError as exc:
            last_error = exc
            continue

    raise _unauthorized("Invalid token") from last_error


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> AuthenticatedUser:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise _unauthorized("Not authenticated")

    payload = _decode_token(credentials.credentials)
    try:
        user_id = int(payload["sub"])
        username = str(payload.get("username") or payload.get("email") or payload["sub"])
    except (KeyError, TypeError, ValueError) as exc:
        raise _unauthorized("Token is missing required claims") from exc

    return AuthenticatedUser(id=user_id, username=username)


def get_session_context(user: AuthenticatedUser = Depends(get_current_user)) -> SessionContext:
    return SessionContext(user_id=user.id, username=user.username)
