from __future__ import annotations

import logging

from ..store.base import GraphStore
from .models import IngredientOut, IngredientsResponse, PantryResponse

logger = logging.getLogger(__name__)


def get_pantry(store: GraphStore, user_id: str) -> PantryResponse:
    return PantryResponse(
        pantry=[IngredientOut(name=i.name, category=i.category) for i in store.get_pantry(user_id)]
    )


def add_items(store: GraphStore, user_id: str, items: list[str]) -> PantryResponse:
    """Link each item to the user's pantry, creating unknown ingredients."""
    store.add_to_pantry(user_id, items)
    logger.info("Added %d items to pantry of %s", len(items), user_id)
    return get_pantry(store, user_id)


def remove_items(store: GraphStore, user_id: str, items: list[str]) -> PantryResponse:
    store.remove_from_pantry(user_id, items)
    logger.info("Removed %d items from pantry of %s", len(items), user_id)
    return get_pantry(store, user_id)


def all_ingredients(store: GraphStore) -> IngredientsResponse:
    return IngredientsResponse(
        ingredients=[IngredientOut(name=i.name, category=i.category) for i in store.list_ingredients()]
    )
