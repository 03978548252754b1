from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from pantry_recipes.app import create_app
from pantry_recipes.config import AppConfig
from pantry_recipes.store import StoreError, build_graph
from pantry_recipes.store.config import StoreConfig
from pantry_recipes.store.memory import MemoryGraph
from pantry_recipes.store.records import NewRecipe, UserRecord


def test_seed_data():
    graph = MemoryGraph.seeded()
    assert len(graph.list_ingredients()) == 21
    assert [r.id for r in graph.list_recipes()] == ["recipe-4", "recipe-3", "recipe-2", "recipe-1"]


def test_initialize_does_not_reseed():
    graph = MemoryGraph.seeded()
    graph.create_recipe("extra", NewRecipe(name="Extra", ingredients=["Rice"]))
    graph.initialize(seed=True)
    assert len(graph.list_recipes()) == 5


def test_candidates_share_an_ingredient():
    graph = MemoryGraph.seeded()
    ids = {r.id for r in graph.find_candidate_recipes(["Bread"])}
    assert ids == {"recipe-4"}


def test_like_is_idempotent_and_flags_candidates():
    graph = MemoryGraph.seeded()
    assert graph.like_recipe("user-1", "recipe-4") is True
    assert graph.like_recipe("user-1", "recipe-4") is False
    assert [r.id for r in graph.liked_recipes("user-1")] == ["recipe-4"]
    liked = graph.find_candidate_recipes(["Bread"], user_id="user-1")[0]
    assert liked.is_liked is True
    assert graph.find_candidate_recipes(["Bread"])[0].is_liked is False


def test_like_unknown_recipe_raises():
    with pytest.raises(StoreError):
        MemoryGraph.seeded().like_recipe("user-1", "nope")


def test_duplicate_email_raises():
    graph = MemoryGraph()
    graph.create_user(UserRecord(id="u1", email="a@example.com"))
    with pytest.raises(StoreError):
        graph.create_user(UserRecord(id="u2", email="a@example.com"))


def test_update_user_rejects_unknown_fields():
    graph = MemoryGraph()
    graph.create_user(UserRecord(id="u1", email="a@example.com"))
    with pytest.raises(StoreError):
        graph.update_user("u1", role="admin")
    assert graph.update_user("missing", name="x") is None


def test_returned_records_are_copies():
    graph = MemoryGraph()
    graph.create_user(UserRecord(id="u1", email="a@example.com"))
    user = graph.get_user("u1")
    user.name = "changed"
    assert graph.get_user("u1").name is None


def test_reset_token_expiry():
    graph = MemoryGraph()
    graph.create_user(UserRecord(id="u1", email="a@example.com", reset_token="t", reset_token_expiry=1000))
    assert graph.find_user_by_reset_token("t", now_ms=999).id == "u1"
    assert graph.find_user_by_reset_token("t", now_ms=1000) is None


def test_build_graph_backends():
    assert isinstance(build_graph(StoreConfig(backend="memory")), MemoryGraph)
    with pytest.raises(ValueError):
        build_graph(StoreConfig(backend="sqlite"))


class _BrokenGraph(MemoryGraph):
    def list_recipes(self):
        raise StoreError("connection refused")


def test_store_errors_become_500():
    prod = TestClient(create_app(_BrokenGraph(), AppConfig(environment="production")))
    resp = prod.get("/api/recipes")
    assert resp.status_code == 500
    assert resp.json() == {"detail": "Internal server error"}

    dev = TestClient(create_app(_BrokenGraph(), AppConfig(environment="development")))
    assert dev.get("/api/recipes").json()["error"] == "connection refused"


def test_lifespan_seeds_and_closes():
    graph = MemoryGraph()
    with TestClient(create_app(graph, AppConfig(environment="production"))) as c:
        assert len(c.get("/api/recipes").json()["recipes"]) == 4
