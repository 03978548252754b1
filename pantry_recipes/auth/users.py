from __future__ import annotations

import logging
import secrets
import time
from typing import Any

from fastapi import HTTPException

from ..store.base import GraphStore
from ..store.records import UserRecord, new_id
from .config import DEFAULT_AUTH_CONFIG, AuthConfig
from .models import UserOut
from .passwords import hash_password, verify_password

logger = logging.getLogger(__name__)


def user_out(user: UserRecord) -> UserOut:
    return UserOut(**user.public())


def validate_password(password: str, config: AuthConfig = DEFAULT_AUTH_CONFIG) -> None:
    if len(password) < config.min_password_length:
        raise HTTPException(
            status_code=400,
            detail=f"Password must be at least {config.min_password_length} characters",
        )


def register_user(
    store: GraphStore,
    email: str,
    password: str,
    name: str | None = None,
    config: AuthConfig = DEFAULT_AUTH_CONFIG,
) -> UserRecord:
    """Create a user with a hashed password. Emails are stored lower-cased."""
    validate_password(password, config)
    email = email.strip().lower()
    if store.get_user_by_email(email) is not None:
        raise HTTPException(status_code=400, detail="User with this email already exists")

    user = UserRecord(
        id=new_id("user"),
        email=email,
        password=hash_password(password, config),
        name=(name or "").strip() or email.split("@")[0],
        dietary_preferences=[],
        allergies=[],
    )
    created = store.create_user(user)
    logger.info("Created user %s", created.id)
    return created


def authenticate(store: GraphStore, email: str, password: str) -> UserRecord | None:
    """Verify credentials. Returns the user or ``None``."""
    user = store.get_user_by_email(email.strip().lower())
    if user and verify_password(password, user.password):
        return user
    return None


def request_password_reset(
    store: GraphStore, email: str, config: AuthConfig = DEFAULT_AUTH_CONFIG
) -> str | None:
    """Store a one-hour reset token on the user. ``None`` if the email is unknown."""
    user = store.get_user_by_email(email.strip().lower())
    if user is None:
        return None
    token = f"reset-{secrets.token_urlsafe(24)}"
    expiry = int(time.time() * 1000) + config.reset_token_ttl_seconds * 1000
    store.update_user(user.id, reset_token=token, reset_token_expiry=expiry)
    return token


def reset_password(
    store: GraphStore, token: str, new_password: str, config: AuthConfig = DEFAULT_AUTH_CONFIG
) -> None:
    validate_password(new_password, config)
    user = store.find_user_by_reset_token(token, int(time.time() * 1000))
    if user is None:
        raise HTTPException(status_code=400, detail="Invalid or expired reset token")
    store.update_user(
        user.id,
        password=hash_password(new_password, config),
        reset_token=None,
        reset_token_expiry=None,
    )


# ── Development-only helpers ─────────────────────────────────────────────


def check_password(store: GraphStore, email: str, password: str) -> dict[str, Any]:
    user = store.get_user_by_email(email.strip().lower())
    if user is None:
        return {"found": False, "message": "User not found"}
    return {
        "found": True,
        "userId": user.id,
        "email": user.email,
        "passwordMatch": verify_password(password, user.password),
        "hasPassword": bool(user.password),
    }


def force_reset_password(
    store: GraphStore, email: str, new_password: str, config: AuthConfig = DEFAULT_AUTH_CONFIG
) -> str:
    validate_password(new_password, config)
    email = email.strip().lower()
    user = store.get_user_by_email(email)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    store.update_user(
        user.id,
        password=hash_password(new_password, config),
        reset_token=None,
        reset_token_expiry=None,
    )
    logger.warning("Password for %s reset through debug endpoint", email)
    return email
