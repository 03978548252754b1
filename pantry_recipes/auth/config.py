from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class AuthConfig:
    jwt_secret: str = os.getenv("JWT_SECRET", "your-secret-key-change-in-production")
    jwt_algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
    token_expires_days: int = int(os.getenv("JWT_EXPIRES_DAYS", "30"))
    reset_token_ttl_seconds: int = int(os.getenv("RESET_TOKEN_TTL_SECONDS", "3600"))
    bcrypt_rounds: int = int(os.getenv("BCRYPT_ROUNDS", "10"))
    min_password_length: int = 6


DEFAULT_AUTH_CONFIG = AuthConfig()
