from types import SimpleNamespace

from pantry_recipes.suggestions.dietary import (
    filter_by_dietary_preferences,
    find_violation,
    prioritize_by_dietary_tags,
    violates_dietary_preference,
)
from pantry_recipes.suggestions.preferences import DietaryPreference as D


def _recipe(name, ingredients, tags=()):
    return SimpleNamespace(name=name, ingredients=list(ingredients), dietary_tags=list(tags))


def test_vegetarian_excludes_chicken_breast():
    assert violates_dietary_preference("Chicken Breast", [D.vegetarian])


def test_exact_match_is_case_and_space_insensitive():
    assert violates_dietary_preference("  BEEF ", [D.vegetarian])


def test_whole_word_only():
    # "pepperoni" is forbidden, "pepper" is not a whole-word hit for it
    assert not violates_dietary_preference("Bell Pepper", [D.vegetarian])
    assert not violates_dietary_preference("Hamburger Bun", [D.vegetarian])
    assert violates_dietary_preference("Smoked Ham", [D.vegetarian])


def test_vegan_forbids_dairy_and_eggs():
    assert violates_dietary_preference("Cheese", [D.vegan])
    assert violates_dietary_preference("Eggs", [D.vegan])
    assert not violates_dietary_preference("Cheese", [D.vegetarian])


def test_pescatarian_allows_fish():
    assert not violates_dietary_preference("Salmon Fillet", [D.pescatarian])
    assert violates_dietary_preference("Pork Belly", [D.pescatarian])


def test_gluten_free_forbids_pasta():
    assert find_violation("Pasta", [D.vegetarian, D.gluten_free]) is D.gluten_free


def test_keto_paleo_low_carb_forbid_nothing():
    for ingredient in ("Bread", "Chicken", "Cheese", "Rice"):
        assert not violates_dietary_preference(ingredient, [D.keto, D.paleo, D.low_carb])


def test_empty_ingredient_never_violates():
    assert find_violation("", [D.vegan]) is None


def test_empty_preferences_exclude_nothing():
    recipes = [_recipe("Chicken Stir Fry", ["Chicken", "Broccoli"])]
    assert filter_by_dietary_preferences(recipes, []) == recipes


def test_filter_drops_recipe_with_any_forbidden_ingredient():
    stir_fry = _recipe("Chicken Stir Fry", ["Chicken Breast", "Broccoli"])
    salad = _recipe("Quinoa Salad", ["Quinoa", "Spinach"])
    assert filter_by_dietary_preferences([stir_fry, salad], [D.vegetarian]) == [salad]


def test_prioritize_is_a_stable_partition():
    a = _recipe("A", ["Tomato"])
    b = _recipe("B", ["Tomato"], tags=["Vegan"])
    c = _recipe("C", ["Tomato"])
    d = _recipe("D", ["Tomato"], tags=["vegan", "gluten-free"])
    assert prioritize_by_dietary_tags([a, b, c, d], [D.vegan]) == [b, d, a, c]
    assert prioritize_by_dietary_tags([a, b, c, d], []) == [a, b, c, d]
