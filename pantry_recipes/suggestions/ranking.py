from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Sequence

from ..store.base import GraphStore
from ..store.records import RecipeRecord
from .allergies import filter_by_allergies
from .dietary import filter_by_dietary_preferences, prioritize_by_dietary_tags
from .matcher import MatchResult, clean_pantry_items, match_ingredients
from .models import SuggestedRecipe, SuggestionResponse
from .preferences import Allergy, DietaryPreference, parse_allergies, parse_dietary_preferences

logger = logging.getLogger(__name__)

LIKED_BOOST = 0.3
MAX_SUGGESTIONS = 20


@dataclass
class ScoredRecipe:
    recipe: RecipeRecord
    match: MatchResult
    score: float

    @property
    def name(self) -> str:
        return self.recipe.name

    @property
    def ingredients(self) -> list[str]:
        return self.recipe.ingredients

    @property
    def dietary_tags(self) -> list[str]:
        return self.recipe.dietary_tags


def score_candidates(
    candidates: Sequence[RecipeRecord],
    pantry_items: Sequence[str],
    authenticated: bool = False,
) -> list[ScoredRecipe]:
    """Score candidates and drop those sharing no ingredient with the pantry."""
    scored: list[ScoredRecipe] = []
    for recipe in candidates:
        match = match_ingredients(pantry_items, recipe.ingredients)
        if match.matching_ingredients == 0:
            continue
        boost = LIKED_BOOST if authenticated and recipe.is_liked else 0.0
        scored.append(ScoredRecipe(recipe=recipe, match=match, score=match.match_ratio + boost))
    return scored


def rank(scored: list[ScoredRecipe], limit: int = MAX_SUGGESTIONS) -> list[ScoredRecipe]:
    ordered = sorted(
        scored,
        key=lambda s: (s.score, s.match.match_ratio, s.match.matching_ingredients),
        reverse=True,
    )
    return ordered[:limit]


def apply_filters(
    ranked: list[ScoredRecipe],
    preferences: Sequence[DietaryPreference],
    allergies: Sequence[Allergy],
) -> list[ScoredRecipe]:
    before = len(ranked)

    survivors = filter_by_dietary_preferences(ranked, preferences)
    if preferences:
        logger.info("Dietary filtering: %d -> %d recipes", before, len(survivors))

    after_dietary = len(survivors)
    survivors = filter_by_allergies(survivors, allergies)
    if allergies:
        logger.info("Allergy filtering: %d -> %d recipes", after_dietary, len(survivors))

    return prioritize_by_dietary_tags(survivors, preferences)


def _to_suggestion(item: ScoredRecipe, authenticated: bool) -> SuggestedRecipe:
    recipe = item.recipe
    return SuggestedRecipe(
        id=recipe.id,
        name=recipe.name or "Unnamed Recipe",
        description=recipe.description or "",
        prep_time=recipe.prep_time or 0,
        cook_time=recipe.cook_time or 0,
        servings=recipe.servings or 0,
        difficulty=recipe.difficulty or "Unknown",
        dietary_tags=list(recipe.dietary_tags or []),
        matching_ingredients=item.match.matching_ingredients,
        total_ingredients=item.match.total_ingredients,
        match_ratio=item.match.match_ratio,
        all_ingredients=list(recipe.ingredients),
        is_liked=authenticated and recipe.is_liked,
        source_url=recipe.source_url or None,
        image_url=recipe.image_url or None,
    )


def suggest_recipes(
    store: GraphStore,
    pantry_items: Sequence[str | None] | None,
    user_id: str | None = None,
) -> SuggestionResponse:
    start_time = time.time()

    items = clean_pantry_items(pantry_items)
    if not items:
        return SuggestionResponse(recipes=[])

    preferences: list[DietaryPreference] = []
    allergies: list[Allergy] = []
    if user_id:
        user = store.get_user(user_id)
        if user is None:
            logger.info("User %s not found, suggestions will not be personalised", user_id)
        else:
            preferences = parse_dietary_preferences(user.dietary_preferences)
            allergies = parse_allergies(user.allergies)

    authenticated = user_id is not None
    candidates = store.find_candidate_recipes(items, user_id=user_id)
    ranked = rank(score_candidates(candidates, items, authenticated=authenticated))
    survivors = apply_filters(ranked, preferences, allergies)

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    logger.info(
        "Suggestions: %d candidates, %d ranked, %d returned (authenticated=%s, %.1f ms)",
        len(candidates), len(ranked), len(survivors), authenticated, elapsed_ms,
    )

    return SuggestionResponse(recipes=[_to_suggestion(s, authenticated) for s in survivors])
