from __future__ import annotations

from pydantic import Field, field_validator

from ..schemas import CamelModel


class SuggestionRequest(CamelModel):
    pantry_items: list[str | None] | None = Field(
        default=None,
        description='Ingredient names in the pantry, e.g. ["Tomato", "Pasta"]',
    )


class SuggestedRecipe(CamelModel):
    id: str
    name: str
    description: str
    prep_time: int
    cook_time: int
    servings: int
    difficulty: str
    dietary_tags: list[str]
    matching_ingredients: int
    total_ingredients: int
    match_ratio: float = Field(..., ge=0.0, le=1.0)
    all_ingredients: list[str]
    is_liked: bool = False
    source_url: str | None = None
    image_url: str | None = None


class SuggestionResponse(CamelModel):
    recipes: list[SuggestedRecipe]


class RecipeSummary(CamelModel):
    id: str
    name: str
    description: str
    prep_time: int
    cook_time: int
    servings: int
    difficulty: str
    dietary_tags: list[str]
    ingredients: list[str]
    is_liked: bool | None = None
    created_by: str | None = None


class RecipeListResponse(CamelModel):
    recipes: list[RecipeSummary]


class RecipeIngredientOut(CamelModel):
    name: str
    category: str | None = None
    amount: str = ""
    unit: str = ""


class RecipeDetail(CamelModel):
    id: str
    name: str
    description: str
    prep_time: int
    cook_time: int
    servings: int
    difficulty: str
    dietary_tags: list[str]
    ingredients: list[RecipeIngredientOut]
    source_url: str | None = None
    image_url: str | None = None
    instructions: str | None = None
    source: str | None = None
    created_by: str | None = None


class CreateRecipeRequest(CamelModel):
    name: str = Field(..., min_length=1)
    description: str | None = None
    prep_time: int | None = Field(default=None, ge=0)
    cook_time: int | None = Field(default=None, ge=0)
    servings: int | None = Field(default=None, ge=1)
    difficulty: str | None = None
    dietary_tags: list[str] = Field(default_factory=list)
    ingredients: list[str] = Field(..., min_length=1)

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Recipe name is required")
        return value

    @field_validator("ingredients")
    @classmethod
    def _clean_ingredients(cls, value: list[str]) -> list[str]:
        cleaned: list[str] = []
        for name in value:
            name = name.strip()
            if name and name not in cleaned:
                cleaned.append(name)
        if not cleaned:
            raise ValueError("At least one ingredient is required")
        return cleaned


class CreateRecipeResponse(CamelModel):
    recipe: RecipeSummary


class LikeResponse(CamelModel):
    message: str
    liked: bool


class FetchWebRequest(CamelModel):
    search_term: str | None = None
    category: str | None = None


class ImportedRecipe(CamelModel):
    id: str
    name: str
    source_url: str
    image_url: str | None = None


class FetchWebResponse(CamelModel):
    message: str
    recipes: list[ImportedRecipe]


class CategoriesResponse(CamelModel):
    categories: list[str]
