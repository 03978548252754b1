from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class StoreConfig:
    backend: str = os.getenv("STORE_BACKEND", "neo4j").lower()
    neo4j_uri: str = os.getenv("NEO4J_URI", "bolt://localhost:7687")
    neo4j_user: str = os.getenv("NEO4J_USER", "neo4j")
    neo4j_password: str = os.getenv("NEO4J_PASSWORD", "password")
    neo4j_database: str | None = os.getenv("NEO4J_DATABASE") or None
    seed_data: bool = os.getenv("SEED_DATA", "true").lower() in ("true", "1", "yes")


DEFAULT_STORE_CONFIG = StoreConfig()
