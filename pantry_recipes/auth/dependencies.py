from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import AuthConfig
from .tokens import InvalidTokenError, decode_token

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_auth_config(request: Request) -> AuthConfig:
    return request.app.state.auth_config


def require_user_id(
    credentials: HTTPAuthorizationCredentials | None = Security(security),
    config: AuthConfig = Depends(get_auth_config),
) -> str:
    """Raise 401 if no bearer token is sent, 403 if it does not verify."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        payload = decode_token(credentials.credentials, config)
    except InvalidTokenError:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid or expired token")
    return payload["userId"]


def optional_user_id(
    credentials: HTTPAuthorizationCredentials | None = Security(security),
    config: AuthConfig = Depends(get_auth_config),
) -> str | None:
    """Return the caller's user id, or ``None`` for missing or unusable tokens."""
    if not credentials:
        return None
    try:
        payload = decode_token(credentials.credentials, config)
    except InvalidTokenError as exc:
        logger.debug("Ignoring bearer token: %s", exc)
        return None
    return payload["userId"]


def require_self(user_id: str, current_user_id: str = Depends(require_user_id)) -> str:
    """Raise 403 unless the ``user_id`` path parameter is the caller."""
    if user_id != current_user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Unauthorized")
    return current_user_id
