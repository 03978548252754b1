from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from .config import DEFAULT_AUTH_CONFIG, AuthConfig


class InvalidTokenError(Exception):
    """Bearer token is malformed, badly signed, expired or lacks a user id."""


def issue_token(user_id: str, email: str | None, config: AuthConfig = DEFAULT_AUTH_CONFIG) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "userId": user_id,
        "email": email,
        "iat": now,
        "exp": now + timedelta(days=config.token_expires_days),
    }
    return jwt.encode(payload, config.jwt_secret, algorithm=config.jwt_algorithm)


def decode_token(token: str, config: AuthConfig = DEFAULT_AUTH_CONFIG) -> dict[str, Any]:
    """Verify the signature and expiry. Returns the payload with a ``userId``."""
    if not token or token.count(".") != 2:
        raise InvalidTokenError("Malformed token")
    try:
        payload = jwt.decode(token, config.jwt_secret, algorithms=[config.jwt_algorithm])
    except jwt.PyJWTError as exc:
        raise InvalidTokenError(str(exc)) from exc
    if not payload.get("userId"):
        raise InvalidTokenError("Token has no userId")
    return payload
