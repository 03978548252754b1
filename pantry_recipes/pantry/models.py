from __future__ import annotations

from pydantic import Field, field_validator

from ..schemas import CamelModel


class PantryItemsRequest(CamelModel):
    items: list[str] = Field(..., min_length=1)

    @field_validator("items")
    @classmethod
    def _clean(cls, value: list[str]) -> list[str]:
        cleaned = list(dict.fromkeys(v.strip() for v in value if v and v.strip()))
        if not cleaned:
            raise ValueError("Items must contain at least one ingredient name")
        return cleaned


class IngredientOut(CamelModel):
    name: str
    category: str | None = None


class PantryResponse(CamelModel):
    pantry: list[IngredientOut]


class IngredientsResponse(CamelModel):
    ingredients: list[IngredientOut]
