from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")


@dataclass(frozen=True)
class MealDBConfig:
    base_url: str = os.getenv("MEALDB_BASE_URL", "https://www.themealdb.com/api/json/v1/1")
    timeout: float = float(os.getenv("MEALDB_TIMEOUT", "10"))
    random_count: int = int(os.getenv("MEALDB_RANDOM_COUNT", "10"))
    max_ingredients: int = 20


DEFAULT_MEALDB_CONFIG = MealDBConfig()
