from types import SimpleNamespace

from pantry_recipes.suggestions.allergies import filter_by_allergies, matches_allergy
from pantry_recipes.suggestions.preferences import (
    CustomAllergy,
    KnownAllergy,
    parse_allergies,
    parse_allergy,
)


def test_peanuts_excludes_peanut_butter():
    assert matches_allergy("Peanut Butter", [KnownAllergy.peanuts])


def test_substring_in_both_directions():
    assert matches_allergy("Shellfish Stock", [CustomAllergy("shellfish")])
    assert matches_allergy("Soy", [CustomAllergy("soy sauce")])


def test_singular_form_only_matches_whole_words():
    assert not matches_allergy("Eggplant", [KnownAllergy.eggs])
    assert not matches_allergy("Goat Cheese", [CustomAllergy("oats")])
    assert matches_allergy("Egg Noodles", [KnownAllergy.eggs])
    assert matches_allergy("Rolled Oat Flakes", [CustomAllergy("oats")])


def test_unrelated_ingredient_is_kept():
    assert not matches_allergy("Tomato", [KnownAllergy.dairy, KnownAllergy.eggs])


def test_empty_values_never_match():
    assert not matches_allergy("", [KnownAllergy.soy])
    assert not matches_allergy("   ", [KnownAllergy.soy])
    assert not matches_allergy("Tomato", [CustomAllergy("")])


def test_parse_allergy_known_and_custom():
    assert parse_allergy(" Tree Nuts ") is KnownAllergy.tree_nuts
    assert parse_allergy("Kiwi") == CustomAllergy("kiwi")


def test_parse_allergies_drops_blanks_and_duplicates():
    assert parse_allergies(["Peanuts", "", "peanuts", "kiwi", None]) == [
        KnownAllergy.peanuts,
        CustomAllergy("kiwi"),
    ]


def test_filter_by_allergies():
    toast = SimpleNamespace(name="Peanut Toast", ingredients=["Bread", "Peanut Butter"])
    salad = SimpleNamespace(name="Salad", ingredients=["Spinach", "Tomato"])
    assert filter_by_allergies([toast, salad], [KnownAllergy.peanuts]) == [salad]
    assert filter_by_allergies([toast, salad], []) == [toast, salad]
