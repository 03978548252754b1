from __future__ import annotations

import logging
from typing import Any

import requests

from .config import DEFAULT_MEALDB_CONFIG, MealDBConfig

logger = logging.getLogger(__name__)


class MealDBError(Exception):
    """TheMealDB could not be reached or answered with something unusable."""


class MealDBClient:
    """Thin wrapper over TheMealDB's public JSON API. No retries."""

    def __init__(self, config: MealDBConfig = DEFAULT_MEALDB_CONFIG):
        self.config = config

    def _get(self, endpoint: str, **params: str) -> dict[str, Any]:
        url = f"{self.config.base_url.rstrip('/')}/{endpoint}"
        try:
            response = requests.get(url, params=params or None, timeout=self.config.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.error("TheMealDB request to %s failed: %s", endpoint, exc, exc_info=True)
            raise MealDBError(str(exc)) from exc
        if not isinstance(data, dict):
            raise MealDBError(f"Unexpected response from {endpoint}")
        return data

    def _meals(self, endpoint: str, **params: str) -> list[dict[str, Any]]:
        # TheMealDB answers {"meals": null} when nothing matches
        meals = self._get(endpoint, **params).get("meals") or []
        return [m for m in meals if isinstance(m, dict)]

    def search(self, term: str) -> list[dict[str, Any]]:
        return self._meals("search.php", s=term)

    def filter_by_category(self, category: str) -> list[dict[str, Any]]:
        """Meals in a category. Entries only carry id, name and thumbnail."""
        return self._meals("filter.php", c=category)

    def lookup(self, meal_id: str) -> dict[str, Any] | None:
        meals = self._meals("lookup.php", i=meal_id)
        return meals[0] if meals else None

    def random_meal(self) -> dict[str, Any] | None:
        meals = self._meals("random.php")
        return meals[0] if meals else None

    def categories(self) -> list[str]:
        return [m["strCategory"] for m in self._meals("list.php", c="list") if m.get("strCategory")]
