"""
Dietary preference filtering.

Each preference maps to a set of forbidden ingredient terms.  An ingredient
violates a preference when, lower-cased and trimmed, it equals a forbidden term
or contains the term as a whole word ("Chicken Breast" contains "chicken",
"Pepperoni Pizza" does not contain "pepper").
"""
from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Iterable, Sequence, TypeVar

from .preferences import DietaryPreference

logger = logging.getLogger(__name__)

_LAND_MEATS = (
    "chicken", "beef", "pork", "lamb", "turkey", "duck", "meat",
    "bacon", "sausage", "ham", "pepperoni", "salami",
)
_SEAFOOD = ("fish", "seafood", "shrimp", "crab", "lobster", "tuna", "salmon")
_DAIRY = ("milk", "cheese", "butter", "yogurt", "cream", "dairy")
_EGGS = ("eggs", "egg")

DIETARY_RESTRICTIONS: dict[DietaryPreference, frozenset[str]] = {
    DietaryPreference.vegetarian: frozenset(_LAND_MEATS + _SEAFOOD),
    DietaryPreference.vegan: frozenset(_LAND_MEATS + _SEAFOOD + _EGGS + _DAIRY),
    DietaryPreference.pescatarian: frozenset(_LAND_MEATS),
    DietaryPreference.gluten_free: frozenset(
        ("wheat", "flour", "bread", "pasta", "noodles", "barley", "rye", "gluten")
    ),
    DietaryPreference.dairy_free: frozenset(_DAIRY + ("whey",)),
    DietaryPreference.nut_free: frozenset((
        "peanuts", "peanut", "almonds", "almond", "walnuts", "walnut",
        "cashews", "cashew", "pecans", "pecan", "hazelnuts", "hazelnut",
        "pistachios", "pistachio",
    )),
    DietaryPreference.keto: frozenset(),
    DietaryPreference.paleo: frozenset(),
    DietaryPreference.low_carb: frozenset(),
}

R = TypeVar("R")


@lru_cache(maxsize=256)
def _word_pattern(term: str) -> re.Pattern[str]:
    return re.compile(rf"\b{re.escape(term)}\b", re.IGNORECASE)


def forbidden_terms(preference: DietaryPreference) -> frozenset[str]:
    return DIETARY_RESTRICTIONS.get(preference, frozenset())


def _term_matches(ingredient_lower: str, term: str) -> bool:
    if ingredient_lower == term:
        return True
    return _word_pattern(term).search(ingredient_lower) is not None


def find_violation(ingredient: str, preferences: Iterable[DietaryPreference]) -> DietaryPreference | None:
    """Return the first preference the ingredient breaks, or ``None``."""
    if not ingredient:
        return None
    ingredient_lower = ingredient.strip().lower()
    for preference in preferences:
        if any(_term_matches(ingredient_lower, term) for term in forbidden_terms(preference)):
            return preference
    return None


def violates_dietary_preference(ingredient: str, preferences: Iterable[DietaryPreference]) -> bool:
    return find_violation(ingredient, preferences) is not None


def filter_by_dietary_preferences(recipes: list[R], preferences: Sequence[DietaryPreference]) -> list[R]:
    """Drop every recipe containing an ingredient forbidden by any preference."""
    if not preferences:
        return list(recipes)

    kept: list[R] = []
    for recipe in recipes:
        offending = next(
            (ing for ing in recipe.ingredients if violates_dietary_preference(ing, preferences)),
            None,
        )
        if offending is None:
            kept.append(recipe)
        else:
            logger.debug(
                "Filtering %r: ingredient %r violates preferences %s",
                recipe.name, offending, [p.value for p in preferences],
            )
    return kept


def has_matching_tag(dietary_tags: Iterable[str], preferences: Iterable[DietaryPreference]) -> bool:
    tags = {t.strip().lower() for t in dietary_tags or [] if isinstance(t, str)}
    return any(p.value in tags for p in preferences)


def prioritize_by_dietary_tags(recipes: list[R], preferences: Sequence[DietaryPreference]) -> list[R]:
    """Stable partition: recipes tagged with a selected preference come first."""
    if not preferences:
        return list(recipes)
    tagged = [r for r in recipes if has_matching_tag(r.dietary_tags, preferences)]
    untagged = [r for r in recipes if not has_matching_tag(r.dietary_tags, preferences)]
    return tagged + untagged
