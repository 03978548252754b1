from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Any


@dataclass
class IngredientRecord:
    name: str
    category: str | None = None


@dataclass
class RecipeIngredientRecord:
    name: str
    category: str | None = None
    amount: str = ""
    unit: str = ""


@dataclass
class RecipeRecord:
    id: str
    name: str
    description: str = ""
    prep_time: int = 0
    cook_time: int = 0
    servings: int = 1
    difficulty: str = "Easy"
    dietary_tags: list[str] = field(default_factory=list)
    ingredients: list[str] = field(default_factory=list)
    source_url: str | None = None
    image_url: str | None = None
    instructions: str | None = None
    source: str | None = None
    created_by: str | None = None
    is_liked: bool = False


@dataclass
class NewRecipe:
    """A recipe about to be written together with its ingredient links."""

    name: str
    ingredients: list[str]
    description: str = ""
    prep_time: int = 0
    cook_time: int = 0
    servings: int = 1
    difficulty: str = "Easy"
    dietary_tags: list[str] = field(default_factory=list)
    source_url: str | None = None
    image_url: str | None = None
    instructions: str | None = None
    source: str | None = None
    created_by: str | None = None


@dataclass
class UserRecord:
    id: str
    email: str | None = None
    password: str | None = None
    name: str | None = None
    age: int | None = None
    profile_picture: str | None = None
    dietary_preferences: list[str] = field(default_factory=list)
    allergies: list[str] = field(default_factory=list)
    reset_token: str | None = None
    reset_token_expiry: int | None = None
    created_at: str | None = None
    updated_at: str | None = None

    def public(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "age": self.age,
            "profile_picture": self.profile_picture,
            "dietary_preferences": list(self.dietary_preferences or []),
            "allergies": list(self.allergies or []),
        }


def new_id(prefix: str) -> str:
    return f"{prefix}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:9]}"
