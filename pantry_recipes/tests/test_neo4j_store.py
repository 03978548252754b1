from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from neo4j.exceptions import ServiceUnavailable

from pantry_recipes.store.base import StoreError
from pantry_recipes.store.config import StoreConfig
from pantry_recipes.store.neo4j_store import CONSTRAINTS, Neo4jGraph


def _graph(driver: MagicMock) -> Neo4jGraph:
    return Neo4jGraph(StoreConfig(backend="neo4j"), driver=driver)


def test_initialize_applies_constraints_without_seeding():
    driver = MagicMock()
    session = driver.session.return_value.__enter__.return_value
    _graph(driver).initialize(seed=False)
    driver.verify_connectivity.assert_called_once()
    assert [c.args[0] for c in session.run.call_args_list] == CONSTRAINTS


def test_initialize_wraps_connectivity_errors():
    driver = MagicMock()
    driver.verify_connectivity.side_effect = ServiceUnavailable("down")
    with pytest.raises(StoreError):
        _graph(driver).initialize()


def test_initialize_wraps_constraint_errors():
    driver = MagicMock()
    session = driver.session.return_value.__enter__.return_value
    session.run.side_effect = ServiceUnavailable("connection lost")
    with pytest.raises(StoreError, match="connection lost"):
        _graph(driver).initialize()
