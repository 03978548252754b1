from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Any, Iterable, Protocol

from .records import (
    IngredientRecord,
    NewRecipe,
    RecipeIngredientRecord,
    RecipeRecord,
    UserRecord,
)


class StoreError(RuntimeError):
    """The graph store failed to execute a query."""


class GraphStore(Protocol):
    """Operations available inside one request-scoped store session."""

    # users
    def get_user(self, user_id: str) -> UserRecord | None: ...
    def get_user_by_email(self, email: str) -> UserRecord | None: ...
    def find_user_by_reset_token(self, token: str, now_ms: int) -> UserRecord | None: ...
    def create_user(self, user: UserRecord) -> UserRecord: ...
    def update_user(self, user_id: str, **fields: Any) -> UserRecord | None: ...
    def list_users(self) -> list[UserRecord]: ...

    # pantry
    def get_pantry(self, user_id: str) -> list[IngredientRecord]: ...
    def add_to_pantry(self, user_id: str, items: Iterable[str]) -> None: ...
    def remove_from_pantry(self, user_id: str, items: Iterable[str]) -> None: ...
    def list_ingredients(self) -> list[IngredientRecord]: ...

    # recipes
    def find_candidate_recipes(
        self, pantry_items: Iterable[str], user_id: str | None = None
    ) -> list[RecipeRecord]: ...
    def list_recipes(self) -> list[RecipeRecord]: ...
    def get_recipe(self, recipe_id: str) -> tuple[RecipeRecord, list[RecipeIngredientRecord]] | None: ...
    def recipe_exists(self, recipe_id: str) -> bool: ...
    def find_recipe_by_source_url(self, source_url: str) -> str | None: ...
    def create_recipe(self, recipe_id: str, recipe: NewRecipe) -> RecipeRecord: ...
    def like_recipe(self, user_id: str, recipe_id: str) -> bool: ...
    def unlike_recipe(self, user_id: str, recipe_id: str) -> None: ...
    def liked_recipes(self, user_id: str) -> list[RecipeRecord]: ...


class Graph(Protocol):
    """Process-wide connection pool handed to the app factory."""

    def session(self) -> AbstractContextManager[GraphStore]: ...
    def initialize(self, seed: bool = True) -> None: ...
    def close(self) -> None: ...
