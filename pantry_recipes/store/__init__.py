"""
Graph storage layer.

Responsibilities:
- Persist users, pantry contents, ingredients, recipes and likes as a graph.
- Hand out one store session per request and release it afterwards.
- Provide a Neo4j backend and an in-memory backend with the same behaviour.
"""
from __future__ import annotations

from typing import Iterator

from fastapi import Request

from .base import Graph, GraphStore, StoreError
from .config import DEFAULT_STORE_CONFIG, StoreConfig
from .memory import MemoryGraph


def build_graph(config: StoreConfig = DEFAULT_STORE_CONFIG) -> Graph:
    if config.backend == "memory":
        return MemoryGraph()
    if config.backend == "neo4j":
        from .neo4j_store import Neo4jGraph

        return Neo4jGraph(config)
    raise ValueError(f"Unknown STORE_BACKEND {config.backend!r}")


def get_store(request: Request) -> Iterator[GraphStore]:
    """FastAPI dependency: a store session scoped to the current request."""
    graph: Graph = request.app.state.graph
    with graph.session() as store:
        yield store


__all__ = [
    "Graph",
    "GraphStore",
    "MemoryGraph",
    "StoreError",
    "build_graph",
    "get_store",
]
