from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Iterable, Sequence, TypeVar

from .preferences import Allergy

logger = logging.getLogger(__name__)

R = TypeVar("R")


@lru_cache(maxsize=256)
def _singular_pattern(term: str) -> re.Pattern[str] | None:
    # "peanuts" should also catch "Peanut Butter", but "eggs" must not catch "Eggplant"
    if len(term) > 3 and term.endswith("s"):
        return re.compile(rf"\b{re.escape(term[:-1])}\b")
    return None


def matches_allergy(ingredient: str, allergies: Iterable[Allergy]) -> bool:
    """Loose, bidirectional substring match between an ingredient and any allergy."""
    if not ingredient:
        return False
    ingredient_lower = ingredient.strip().lower()
    if not ingredient_lower:
        return False

    for allergy in allergies:
        term = allergy.term.strip().lower()
        if not term:
            continue
        if ingredient_lower == term or term in ingredient_lower or ingredient_lower in term:
            return True
        singular = _singular_pattern(term)
        if singular is not None and singular.search(ingredient_lower):
            return True
    return False


def filter_by_allergies(recipes: list[R], allergies: Sequence[Allergy]) -> list[R]:
    if not allergies:
        return list(recipes)

    kept: list[R] = []
    for recipe in recipes:
        offending = next((ing for ing in recipe.ingredients if matches_allergy(ing, allergies)), None)
        if offending is None:
            kept.append(recipe)
        else:
            logger.debug(
                "Filtering %r: ingredient %r matches allergies %s",
                recipe.name, offending, [a.term for a in allergies],
            )
    return kept
