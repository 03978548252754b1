from __future__ import annotations

import bcrypt

from .config import DEFAULT_AUTH_CONFIG, AuthConfig


def hash_password(plain: str, config: AuthConfig = DEFAULT_AUTH_CONFIG) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt(rounds=config.bcrypt_rounds)).decode()


def verify_password(plain: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(plain.encode(), hashed.encode())
    except ValueError:
        # malformed hash
        return False
