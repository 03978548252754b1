from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence


@dataclass(frozen=True)
class MatchResult:
    matching_ingredients: int
    total_ingredients: int

    @property
    def match_ratio(self) -> float:
        if self.total_ingredients == 0:
            return 0.0
        return self.matching_ingredients / self.total_ingredients


def match_ingredients(pantry_items: Iterable[str], recipe_ingredients: Sequence[str]) -> MatchResult:
    """Count recipe ingredients present in the pantry.

    Names are compared exactly as stored, so "tomato" does not match "Tomato".
    """
    pantry = set(pantry_items)
    matching = sum(1 for name in recipe_ingredients if name in pantry)
    return MatchResult(matching_ingredients=matching, total_ingredients=len(recipe_ingredients))


def clean_pantry_items(items: Iterable[str | None] | None) -> list[str]:
    """Drop empty entries; order and case are preserved."""
    return [item for item in items or [] if isinstance(item, str) and item]
