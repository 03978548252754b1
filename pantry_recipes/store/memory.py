"""
In-process graph store.

Keeps users, ingredients, recipes and the relationships between them in
dictionaries guarded by a lock.  Used for tests and for running the API
locally without a Neo4j server (``STORE_BACKEND=memory``).
"""
from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import fields, replace
from datetime import datetime, timezone
from typing import Any, Iterable, Iterator

from .base import StoreError
from .records import (
    IngredientRecord,
    NewRecipe,
    RecipeIngredientRecord,
    RecipeRecord,
    UserRecord,
)
from .seed import SEED_INGREDIENTS, SEED_RECIPES

_USER_FIELDS = {f.name for f in fields(UserRecord)} - {"id", "created_at", "updated_at"}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class MemoryGraph:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._users: dict[str, UserRecord] = {}
        self._ingredients: dict[str, IngredientRecord] = {}
        self._recipes: dict[str, RecipeRecord] = {}
        # recipe id -> ingredient name -> (amount, unit)
        self._uses: dict[str, dict[str, tuple[str, str]]] = {}
        self._pantry: dict[str, set[str]] = {}
        self._likes: dict[str, dict[str, str]] = {}

    @classmethod
    def seeded(cls) -> "MemoryGraph":
        graph = cls()
        graph.initialize(seed=True)
        return graph

    # ── Pool interface ───────────────────────────────────────────────────

    @contextmanager
    def session(self) -> Iterator["MemoryGraph"]:
        yield self

    def initialize(self, seed: bool = True) -> None:
        if not seed:
            return
        with self._lock:
            if self._recipes:
                return
            for name, category in SEED_INGREDIENTS:
                self._ingredients[name] = IngredientRecord(name=name, category=category)
            for data in SEED_RECIPES:
                recipe = RecipeRecord(
                    id=data["id"],
                    name=data["name"],
                    description=data["description"],
                    prep_time=data["prep_time"],
                    cook_time=data["cook_time"],
                    servings=data["servings"],
                    difficulty=data["difficulty"],
                    dietary_tags=list(data["dietary_tags"]),
                )
                self._recipes[recipe.id] = recipe
                self._uses[recipe.id] = {name: (amount, unit) for name, amount, unit in data["uses"]}

    def close(self) -> None:
        pass

    # ── Users ────────────────────────────────────────────────────────────

    def get_user(self, user_id: str) -> UserRecord | None:
        with self._lock:
            user = self._users.get(user_id)
            return replace(user) if user else None

    def get_user_by_email(self, email: str) -> UserRecord | None:
        with self._lock:
            for user in self._users.values():
                if user.email == email:
                    return replace(user)
        return None

    def find_user_by_reset_token(self, token: str, now_ms: int) -> UserRecord | None:
        with self._lock:
            for user in self._users.values():
                if (
                    user.reset_token == token
                    and user.reset_token_expiry is not None
                    and user.reset_token_expiry > now_ms
                ):
                    return replace(user)
        return None

    def create_user(self, user: UserRecord) -> UserRecord:
        with self._lock:
            if user.id in self._users:
                raise StoreError(f"User {user.id} already exists")
            if user.email and any(u.email == user.email for u in self._users.values()):
                raise StoreError(f"User with email {user.email} already exists")
            stored = replace(user, created_at=user.created_at or _now())
            self._users[stored.id] = stored
            return replace(stored)

    def update_user(self, user_id: str, **changes: Any) -> UserRecord | None:
        unknown = set(changes) - _USER_FIELDS
        if unknown:
            raise StoreError(f"Unknown user fields: {sorted(unknown)}")
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return None
            updated = replace(user, **changes, updated_at=_now())
            self._users[user_id] = updated
            return replace(updated)

    def list_users(self) -> list[UserRecord]:
        with self._lock:
            users = [replace(u) for u in self._users.values()]
        return sorted(users, key=lambda u: u.created_at or "", reverse=True)

    # ── Pantry ───────────────────────────────────────────────────────────

    def _merge_ingredient(self, name: str) -> None:
        if name not in self._ingredients:
            self._ingredients[name] = IngredientRecord(name=name)

    def get_pantry(self, user_id: str) -> list[IngredientRecord]:
        with self._lock:
            names = self._pantry.get(user_id, set())
            items = [replace(self._ingredients[n]) for n in names if n in self._ingredients]
        return sorted(items, key=lambda i: i.name)

    def add_to_pantry(self, user_id: str, items: Iterable[str]) -> None:
        with self._lock:
            if user_id not in self._users:
                self._users[user_id] = UserRecord(id=user_id, created_at=_now())
            pantry = self._pantry.setdefault(user_id, set())
            for name in items:
                self._merge_ingredient(name)
                pantry.add(name)

    def remove_from_pantry(self, user_id: str, items: Iterable[str]) -> None:
        with self._lock:
            pantry = self._pantry.get(user_id)
            if not pantry:
                return
            for name in items:
                pantry.discard(name)

    def list_ingredients(self) -> list[IngredientRecord]:
        with self._lock:
            items = [replace(i) for i in self._ingredients.values()]
        return sorted(items, key=lambda i: i.name)

    # ── Recipes ──────────────────────────────────────────────────────────

    def _materialize(self, recipe_id: str, liked_by: str | None = None) -> RecipeRecord:
        recipe = self._recipes[recipe_id]
        is_liked = bool(liked_by) and recipe_id in self._likes.get(liked_by, {})
        return replace(
            recipe,
            dietary_tags=list(recipe.dietary_tags),
            ingredients=list(self._uses.get(recipe_id, {})),
            is_liked=is_liked,
        )

    def find_candidate_recipes(
        self, pantry_items: Iterable[str], user_id: str | None = None
    ) -> list[RecipeRecord]:
        pantry = set(pantry_items)
        with self._lock:
            return [
                self._materialize(recipe_id, liked_by=user_id)
                for recipe_id, uses in self._uses.items()
                if recipe_id in self._recipes and pantry.intersection(uses)
            ]

    def list_recipes(self) -> list[RecipeRecord]:
        with self._lock:
            recipes = [self._materialize(rid) for rid in self._recipes if self._uses.get(rid)]
        return sorted(recipes, key=lambda r: r.name)

    def get_recipe(self, recipe_id: str) -> tuple[RecipeRecord, list[RecipeIngredientRecord]] | None:
        with self._lock:
            if recipe_id not in self._recipes:
                return None
            recipe = self._materialize(recipe_id)
            ingredients = [
                RecipeIngredientRecord(
                    name=name,
                    category=self._ingredients[name].category if name in self._ingredients else None,
                    amount=amount,
                    unit=unit,
                )
                for name, (amount, unit) in self._uses.get(recipe_id, {}).items()
            ]
        return recipe, ingredients

    def recipe_exists(self, recipe_id: str) -> bool:
        with self._lock:
            return recipe_id in self._recipes

    def find_recipe_by_source_url(self, source_url: str) -> str | None:
        with self._lock:
            for recipe in self._recipes.values():
                if recipe.source_url == source_url:
                    return recipe.id
        return None

    def create_recipe(self, recipe_id: str, recipe: NewRecipe) -> RecipeRecord:
        with self._lock:
            if recipe_id in self._recipes:
                raise StoreError(f"Recipe {recipe_id} already exists")
            self._recipes[recipe_id] = RecipeRecord(
                id=recipe_id,
                name=recipe.name,
                description=recipe.description,
                prep_time=recipe.prep_time,
                cook_time=recipe.cook_time,
                servings=recipe.servings,
                difficulty=recipe.difficulty,
                dietary_tags=list(recipe.dietary_tags),
                source_url=recipe.source_url,
                image_url=recipe.image_url,
                instructions=recipe.instructions,
                source=recipe.source,
                created_by=recipe.created_by,
            )
            uses: dict[str, tuple[str, str]] = {}
            for name in recipe.ingredients:
                self._merge_ingredient(name)
                uses.setdefault(name, ("", ""))
            self._uses[recipe_id] = uses
            return self._materialize(recipe_id)

    def like_recipe(self, user_id: str, recipe_id: str) -> bool:
        with self._lock:
            if recipe_id not in self._recipes:
                raise StoreError(f"Recipe {recipe_id} does not exist")
            likes = self._likes.setdefault(user_id, {})
            if recipe_id in likes:
                return False
            likes[recipe_id] = _now()
            return True

    def unlike_recipe(self, user_id: str, recipe_id: str) -> None:
        with self._lock:
            self._likes.get(user_id, {}).pop(recipe_id, None)

    def liked_recipes(self, user_id: str) -> list[RecipeRecord]:
        with self._lock:
            recipes = [
                self._materialize(rid, liked_by=user_id)
                for rid in self._likes.get(user_id, {})
                if rid in self._recipes and self._uses.get(rid)
            ]
        return sorted(recipes, key=lambda r: r.name)
