from pantry_recipes.store.memory import MemoryGraph
from pantry_recipes.store.records import NewRecipe, RecipeRecord, UserRecord
from pantry_recipes.suggestions.ranking import (
    LIKED_BOOST,
    MAX_SUGGESTIONS,
    rank,
    score_candidates,
    suggest_recipes,
)


def _store_with_user(preferences=(), allergies=()):
    store = MemoryGraph.seeded()
    store.create_user(
        UserRecord(
            id="user-1",
            email="cook@example.com",
            dietary_preferences=list(preferences),
            allergies=list(allergies),
        )
    )
    return store


def _names(response):
    return [r.name for r in response.recipes]


# ── Scoring ──────────────────────────────────────────────────────────────


def test_recipes_without_matches_or_ingredients_are_dropped():
    candidates = [
        RecipeRecord(id="a", name="Empty", ingredients=[]),
        RecipeRecord(id="b", name="Toast", ingredients=["Bread", "Avocado"]),
        RecipeRecord(id="c", name="Rice Bowl", ingredients=["Rice"]),
    ]
    scored = score_candidates(candidates, ["Bread"])
    assert [s.name for s in scored] == ["Toast"]
    assert scored[0].score == 0.5


def test_liked_boost_only_when_authenticated():
    liked = RecipeRecord(id="a", name="Toast", ingredients=["Bread", "Avocado"], is_liked=True)
    assert score_candidates([liked], ["Bread"])[0].score == 0.5
    assert score_candidates([liked], ["Bread"], authenticated=True)[0].score == 0.5 + LIKED_BOOST


def test_rank_orders_by_score_then_ratio_then_matches():
    candidates = [
        RecipeRecord(id="a", name="Quarter", ingredients=["A", "C", "D", "E"]),
        RecipeRecord(id="b", name="Half", ingredients=["A", "X"]),
        RecipeRecord(id="c", name="Half Big", ingredients=["A", "B", "X", "Y"]),
    ]
    ranked = rank(score_candidates(candidates, ["A", "B"]))
    assert [s.name for s in ranked] == ["Half Big", "Half", "Quarter"]


def test_rank_caps_results():
    candidates = [RecipeRecord(id=str(i), name=f"R{i}", ingredients=["A"]) for i in range(30)]
    assert len(rank(score_candidates(candidates, ["A"]))) == MAX_SUGGESTIONS


# ── Pipeline ─────────────────────────────────────────────────────────────


def test_tomato_pasta_scenario():
    store = MemoryGraph.seeded()
    response = suggest_recipes(store, ["Tomato", "Pasta", "Garlic"])
    top = response.recipes[0]
    assert top.name == "Simple Tomato Pasta"
    assert top.matching_ingredients == 3
    assert top.total_ingredients == 6
    assert top.match_ratio == 0.5
    assert _names(response) == ["Simple Tomato Pasta", "Quinoa Salad Bowl"]


def test_empty_pantry_returns_no_recipes():
    store = MemoryGraph.seeded()
    assert suggest_recipes(store, []).recipes == []
    assert suggest_recipes(store, None).recipes == []
    assert suggest_recipes(store, ["", ""]).recipes == []


def test_match_ratio_always_within_bounds():
    store = MemoryGraph.seeded()
    response = suggest_recipes(store, ["Tomato", "Avocado", "Salt", "Chicken", "Bread"])
    assert response.recipes
    assert all(0.0 < r.match_ratio <= 1.0 for r in response.recipes)


def test_vegan_user_excludes_recipe_with_cheese():
    store = _store_with_user(preferences=["vegan"])
    store.create_recipe(
        "recipe-cheese",
        NewRecipe(name="Cheesy Tomato Pasta", ingredients=["Tomato", "Pasta", "Garlic", "Cheese"]),
    )
    names = _names(suggest_recipes(store, ["Tomato", "Pasta", "Garlic"], user_id="user-1"))
    assert "Cheesy Tomato Pasta" not in names
    assert "Quinoa Salad Bowl" in names


def test_vegetarian_user_excludes_chicken():
    store = _store_with_user(preferences=["vegetarian"])
    names = _names(suggest_recipes(store, ["Chicken", "Salt", "Avocado"], user_id="user-1"))
    assert "Chicken Stir Fry" not in names
    assert "Avocado Toast" in names


def test_allergy_filter_applies_after_dietary():
    store = _store_with_user(allergies=["avocado"])
    names = _names(suggest_recipes(store, ["Avocado", "Bread", "Tomato"], user_id="user-1"))
    assert names == ["Simple Tomato Pasta"]


def test_tagged_recipes_move_to_the_front():
    store = _store_with_user(preferences=["vegan"])
    pantry = ["Tomato", "Pasta", "Garlic", "Olive Oil", "Salt", "Pepper"]
    names = _names(suggest_recipes(store, pantry, user_id="user-1"))
    # the pasta matches fully but is only tagged vegetarian, the stir fry is excluded
    assert names == ["Quinoa Salad Bowl", "Simple Tomato Pasta"]


def test_liked_recipe_is_boosted_for_its_user():
    store = _store_with_user()
    store.like_recipe("user-1", "recipe-2")
    pantry = ["Tomato", "Pasta", "Garlic"]

    anonymous = suggest_recipes(store, pantry)
    assert _names(anonymous)[0] == "Simple Tomato Pasta"
    assert not any(r.is_liked for r in anonymous.recipes)

    personal = suggest_recipes(store, pantry, user_id="user-1")
    assert _names(personal)[0] == "Quinoa Salad Bowl"
    assert personal.recipes[0].is_liked is True
    assert personal.recipes[0].match_ratio == 0.25


def test_unknown_user_gets_unfiltered_suggestions():
    store = MemoryGraph.seeded()
    response = suggest_recipes(store, ["Chicken"], user_id="user-missing")
    assert _names(response) == ["Chicken Stir Fry"]


def test_unknown_stored_preference_is_ignored():
    store = _store_with_user(preferences=["carnivore", "vegetarian"])
    names = _names(suggest_recipes(store, ["Chicken", "Avocado"], user_id="user-1"))
    assert "Chicken Stir Fry" not in names
    assert names[0] == "Avocado Toast"
