from __future__ import annotations

import logging
import re
import time
from typing import Any, Iterable

from ..store.base import GraphStore
from ..store.records import NewRecipe
from ..suggestions.models import ImportedRecipe
from .client import MealDBClient

logger = logging.getLogger(__name__)

MEAL_PAGE_URL = "https://www.themealdb.com/meal.php?c={meal_id}"

_MEAT = re.compile(
    r"\b(chicken|beef|pork|lamb|turkey|duck|fish|seafood|meat|bacon|sausage|ham|pepperoni|salami)\b"
)
_ANIMAL_PRODUCTS = re.compile(r"\b(eggs|egg|milk|cheese|butter|yogurt|cream|dairy)\b")


def meal_ingredients(meal: dict[str, Any], limit: int = 20) -> list[str]:
    """Non-blank ``strIngredient1..N`` values, trimmed, first occurrence kept."""
    names: list[str] = []
    for i in range(1, limit + 1):
        value = meal.get(f"strIngredient{i}")
        if isinstance(value, str) and value.strip() and value.strip() not in names:
            names.append(value.strip())
    return names


def _meal_text(meal: dict[str, Any]) -> str:
    return " ".join(str(v) for v in meal.values() if isinstance(v, str)).lower()


def infer_dietary_tags(meal: dict[str, Any]) -> list[str]:
    text = _meal_text(meal)
    tags: list[str] = []
    if not _MEAT.search(text):
        tags.append("vegetarian")
        if not _ANIMAL_PRODUCTS.search(text):
            tags.append("vegan")
    return tags


def meal_source_url(meal: dict[str, Any]) -> str:
    return (meal.get("strSource") or "").strip() or MEAL_PAGE_URL.format(meal_id=meal.get("idMeal"))


def meal_to_recipe(meal: dict[str, Any], created_by: str | None = None, limit: int = 20) -> NewRecipe:
    instructions = meal.get("strInstructions") or ""
    return NewRecipe(
        name=meal.get("strMeal") or "Untitled Recipe",
        ingredients=meal_ingredients(meal, limit),
        description=instructions[:200],
        prep_time=0,
        cook_time=0,
        servings=4,
        difficulty="Medium",
        dietary_tags=infer_dietary_tags(meal),
        source_url=meal_source_url(meal),
        image_url=meal.get("strMealThumb") or "",
        instructions=instructions,
        source="themealdb",
        created_by=created_by,
    )


def fetch_meals(
    client: MealDBClient,
    search_term: str | None = None,
    category: str | None = None,
) -> list[dict[str, Any]]:
    """
    Full meal records for a name search, a category, or a random batch.

    Category listings only carry ids, so each entry is looked up in turn.
    """
    if search_term and search_term.strip():
        return client.search(search_term.strip())
    if category and category.strip():
        meals = []
        for summary in client.filter_by_category(category.strip()):
            meal_id = summary.get("idMeal")
            if not meal_id:
                continue
            meal = client.lookup(str(meal_id))
            if meal:
                meals.append(meal)
        return meals
    randoms = (client.random_meal() for _ in range(client.config.random_count))
    return [m for m in randoms if m]


def import_meals(
    store: GraphStore,
    meals: Iterable[dict[str, Any]],
    user_id: str | None = None,
    limit: int = 20,
) -> list[ImportedRecipe]:
    """Store each new meal as a recipe with its ingredient links."""
    imported: list[ImportedRecipe] = []
    skipped = 0
    for meal in meals:
        recipe = meal_to_recipe(meal, created_by=user_id, limit=limit)
        if not recipe.ingredients or store.find_recipe_by_source_url(recipe.source_url):
            skipped += 1
            continue
        recipe_id = f"web-recipe-{meal.get('idMeal')}-{int(time.time() * 1000)}"
        store.create_recipe(recipe_id, recipe)
        imported.append(
            ImportedRecipe(
                id=recipe_id,
                name=recipe.name,
                source_url=recipe.source_url,
                image_url=recipe.image_url or None,
            )
        )
    logger.info("Imported %d meals from TheMealDB, skipped %d", len(imported), skipped)
    return imported
