from __future__ import annotations

import logging

from fastapi import HTTPException

from ..store.base import GraphStore
from ..store.records import NewRecipe, RecipeRecord, new_id
from .models import (
    CreateRecipeRequest,
    LikeResponse,
    RecipeDetail,
    RecipeIngredientOut,
    RecipeListResponse,
    RecipeSummary,
)

logger = logging.getLogger(__name__)


def _summary(recipe: RecipeRecord, include_liked: bool = False) -> RecipeSummary:
    return RecipeSummary(
        id=recipe.id,
        name=recipe.name,
        description=recipe.description or "",
        prep_time=recipe.prep_time or 0,
        cook_time=recipe.cook_time or 0,
        servings=recipe.servings or 0,
        difficulty=recipe.difficulty or "Unknown",
        dietary_tags=list(recipe.dietary_tags or []),
        ingredients=list(recipe.ingredients),
        is_liked=recipe.is_liked if include_liked else None,
        created_by=recipe.created_by,
    )


def list_recipes(store: GraphStore) -> RecipeListResponse:
    return RecipeListResponse(recipes=[_summary(r) for r in store.list_recipes()])


def get_recipe_detail(store: GraphStore, recipe_id: str) -> RecipeDetail:
    found = store.get_recipe(recipe_id)
    if found is None:
        raise HTTPException(status_code=404, detail="Recipe not found")
    recipe, ingredients = found
    return RecipeDetail(
        id=recipe.id,
        name=recipe.name,
        description=recipe.description or "",
        prep_time=recipe.prep_time or 0,
        cook_time=recipe.cook_time or 0,
        servings=recipe.servings or 0,
        difficulty=recipe.difficulty or "Unknown",
        dietary_tags=list(recipe.dietary_tags or []),
        ingredients=[
            RecipeIngredientOut(
                name=i.name, category=i.category, amount=i.amount or "", unit=i.unit or ""
            )
            for i in ingredients
        ],
        source_url=recipe.source_url,
        image_url=recipe.image_url,
        instructions=recipe.instructions,
        source=recipe.source,
        created_by=recipe.created_by,
    )


def create_recipe(store: GraphStore, body: CreateRecipeRequest, user_id: str) -> RecipeSummary:
    """Write the recipe and its ingredient links in a single transaction."""
    recipe = NewRecipe(
        name=body.name,
        ingredients=body.ingredients,
        description=(body.description or "").strip(),
        prep_time=body.prep_time or 0,
        cook_time=body.cook_time or 0,
        servings=body.servings or 4,
        difficulty=body.difficulty or "Easy",
        dietary_tags=[t.strip() for t in body.dietary_tags if t and t.strip()],
        source="user",
        created_by=user_id,
    )
    created = store.create_recipe(new_id("recipe"), recipe)
    logger.info("User %s created recipe %s (%d ingredients)", user_id, created.id, len(body.ingredients))
    return _summary(created)


def like_recipe(store: GraphStore, user_id: str, recipe_id: str) -> LikeResponse:
    if not store.recipe_exists(recipe_id):
        raise HTTPException(status_code=404, detail="Recipe not found")
    if store.like_recipe(user_id, recipe_id):
        return LikeResponse(message="Recipe liked", liked=True)
    return LikeResponse(message="Recipe already liked", liked=True)


def unlike_recipe(store: GraphStore, user_id: str, recipe_id: str) -> LikeResponse:
    store.unlike_recipe(user_id, recipe_id)
    return LikeResponse(message="Recipe unliked", liked=False)


def liked_recipes(store: GraphStore, user_id: str) -> RecipeListResponse:
    return RecipeListResponse(
        recipes=[_summary(r, include_liked=True) for r in store.liked_recipes(user_id)]
    )
