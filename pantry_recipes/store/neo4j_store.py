"""
Neo4j-backed graph store.

Nodes: ``User``, ``Ingredient``, ``Recipe``.  Relationships:
``(User)-[:HAS_IN_PANTRY]->(Ingredient)``, ``(User)-[:LIKES]->(Recipe)`` and
``(Recipe)-[:USES {amount, unit}]->(Ingredient)``.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterable, Iterator

from neo4j import Driver, GraphDatabase, ManagedTransaction, Record, Session
from neo4j.exceptions import DriverError, Neo4jError

from .base import StoreError
from .config import DEFAULT_STORE_CONFIG, StoreConfig
from .records import (
    IngredientRecord,
    NewRecipe,
    RecipeIngredientRecord,
    RecipeRecord,
    UserRecord,
)
from .seed import SEED_INGREDIENTS, SEED_RECIPES

logger = logging.getLogger(__name__)

CONSTRAINTS = [
    "CREATE CONSTRAINT user_id IF NOT EXISTS FOR (u:User) REQUIRE u.id IS UNIQUE",
    "CREATE CONSTRAINT user_email IF NOT EXISTS FOR (u:User) REQUIRE u.email IS UNIQUE",
    "CREATE CONSTRAINT ingredient_name IF NOT EXISTS FOR (i:Ingredient) REQUIRE i.name IS UNIQUE",
    "CREATE CONSTRAINT recipe_id IF NOT EXISTS FOR (r:Recipe) REQUIRE r.id IS UNIQUE",
]

_USER_PROPS = {
    "email": "email",
    "password": "password",
    "name": "name",
    "age": "age",
    "profile_picture": "profilePicture",
    "dietary_preferences": "dietaryPreferences",
    "allergies": "allergies",
    "reset_token": "resetToken",
    "reset_token_expiry": "resetTokenExpiry",
}

_RECIPE_PROPS = {
    "name": "name",
    "description": "description",
    "prep_time": "prepTime",
    "cook_time": "cookTime",
    "servings": "servings",
    "difficulty": "difficulty",
    "dietary_tags": "dietaryTags",
    "source_url": "sourceUrl",
    "image_url": "imageUrl",
    "instructions": "instructions",
    "source": "source",
    "created_by": "createdBy",
}


def _to_int(value: Any, default: int = 0) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _to_str(value: Any) -> str | None:
    if value is None:
        return None
    if hasattr(value, "iso_format"):
        return value.iso_format()
    return str(value)


def _list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return [str(value)]


def _user_from_node(node: Any) -> UserRecord:
    props = dict(node)
    return UserRecord(
        id=props["id"],
        email=props.get("email"),
        password=props.get("password"),
        name=props.get("name"),
        age=_to_int(props["age"]) if props.get("age") is not None else None,
        profile_picture=props.get("profilePicture"),
        dietary_preferences=_list(props.get("dietaryPreferences")),
        allergies=_list(props.get("allergies")),
        reset_token=props.get("resetToken"),
        reset_token_expiry=props.get("resetTokenExpiry"),
        created_at=_to_str(props.get("createdAt")),
        updated_at=_to_str(props.get("updatedAt")),
    )


def _recipe_from_node(node: Any, ingredients: Iterable[str] = (), is_liked: bool = False) -> RecipeRecord:
    props = dict(node)
    return RecipeRecord(
        id=props.get("id") or "",
        name=props.get("name") or "Unnamed Recipe",
        description=props.get("description") or "",
        prep_time=_to_int(props.get("prepTime")),
        cook_time=_to_int(props.get("cookTime")),
        servings=_to_int(props.get("servings"), default=1),
        difficulty=props.get("difficulty") or "Unknown",
        dietary_tags=_list(props.get("dietaryTags")),
        ingredients=[name for name in ingredients if name],
        source_url=props.get("sourceUrl"),
        image_url=props.get("imageUrl"),
        instructions=props.get("instructions"),
        source=props.get("source"),
        created_by=props.get("createdBy"),
        is_liked=bool(is_liked),
    )


class Neo4jStore:
    """Store operations bound to a single driver session."""

    def __init__(self, session: Session):
        self._session = session

    def _run(self, query: str, **params: Any) -> list[Record]:
        try:
            return list(self._session.run(query, params))
        except (Neo4jError, DriverError) as exc:
            logger.error("Neo4j query failed", exc_info=True)
            raise StoreError(str(exc)) from exc

    def _write(self, work: Callable[[ManagedTransaction], Any]) -> Any:
        try:
            return self._session.execute_write(work)
        except (Neo4jError, DriverError) as exc:
            logger.error("Neo4j write transaction failed", exc_info=True)
            raise StoreError(str(exc)) from exc

    # ── Users ────────────────────────────────────────────────────────────

    def get_user(self, user_id: str) -> UserRecord | None:
        records = self._run("MATCH (u:User {id: $user_id}) RETURN u", user_id=user_id)
        return _user_from_node(records[0]["u"]) if records else None

    def get_user_by_email(self, email: str) -> UserRecord | None:
        records = self._run("MATCH (u:User {email: $email}) RETURN u", email=email)
        return _user_from_node(records[0]["u"]) if records else None

    def find_user_by_reset_token(self, token: str, now_ms: int) -> UserRecord | None:
        records = self._run(
            """
            MATCH (u:User {resetToken: $token})
            WHERE u.resetTokenExpiry > $now
            RETURN u
            """,
            token=token,
            now=now_ms,
        )
        return _user_from_node(records[0]["u"]) if records else None

    def create_user(self, user: UserRecord) -> UserRecord:
        props = {"id": user.id}
        for attr, prop in _USER_PROPS.items():
            value = getattr(user, attr)
            if value is not None:
                props[prop] = value
        records = self._run(
            "CREATE (u:User $props) SET u.createdAt = datetime() RETURN u",
            props=props,
        )
        return _user_from_node(records[0]["u"])

    def update_user(self, user_id: str, **changes: Any) -> UserRecord | None:
        unknown = set(changes) - set(_USER_PROPS)
        if unknown:
            raise StoreError(f"Unknown user fields: {sorted(unknown)}")
        props = {_USER_PROPS[k]: v for k, v in changes.items()}
        records = self._run(
            """
            MATCH (u:User {id: $user_id})
            SET u += $props, u.updatedAt = datetime()
            RETURN u
            """,
            user_id=user_id,
            props=props,
        )
        return _user_from_node(records[0]["u"]) if records else None

    def list_users(self) -> list[UserRecord]:
        records = self._run("MATCH (u:User) RETURN u ORDER BY u.createdAt DESC")
        return [_user_from_node(r["u"]) for r in records]

    # ── Pantry ───────────────────────────────────────────────────────────

    def get_pantry(self, user_id: str) -> list[IngredientRecord]:
        records = self._run(
            """
            MATCH (u:User {id: $user_id})-[:HAS_IN_PANTRY]->(i:Ingredient)
            RETURN i.name AS name, i.category AS category
            ORDER BY i.name
            """,
            user_id=user_id,
        )
        return [IngredientRecord(name=r["name"], category=r["category"]) for r in records]

    def add_to_pantry(self, user_id: str, items: Iterable[str]) -> None:
        names = list(items)

        def work(tx: ManagedTransaction) -> None:
            tx.run(
                """
                MERGE (u:User {id: $user_id})
                ON CREATE SET u.createdAt = datetime()
                WITH u
                UNWIND $items AS item
                MERGE (i:Ingredient {name: item})
                MERGE (u)-[:HAS_IN_PANTRY]->(i)
                """,
                user_id=user_id,
                items=names,
            ).consume()

        self._write(work)

    def remove_from_pantry(self, user_id: str, items: Iterable[str]) -> None:
        names = list(items)

        def work(tx: ManagedTransaction) -> None:
            tx.run(
                """
                MATCH (u:User {id: $user_id})-[r:HAS_IN_PANTRY]->(i:Ingredient)
                WHERE i.name IN $items
                DELETE r
                """,
                user_id=user_id,
                items=names,
            ).consume()

        self._write(work)

    def list_ingredients(self) -> list[IngredientRecord]:
        records = self._run(
            "MATCH (i:Ingredient) RETURN i.name AS name, i.category AS category ORDER BY i.name"
        )
        return [IngredientRecord(name=r["name"], category=r["category"]) for r in records]

    # ── Recipes ──────────────────────────────────────────────────────────

    def find_candidate_recipes(
        self, pantry_items: Iterable[str], user_id: str | None = None
    ) -> list[RecipeRecord]:
        records = self._run(
            """
            MATCH (r:Recipe)-[:USES]->(i:Ingredient)
            WHERE i.name IN $pantry_items
            WITH DISTINCT r
            MATCH (r)-[:USES]->(ingredient:Ingredient)
            WITH r, collect(DISTINCT ingredient.name) AS ingredients
            OPTIONAL MATCH (:User {id: $user_id})-[l:LIKES]->(r)
            RETURN r, ingredients, l IS NOT NULL AS is_liked
            """,
            pantry_items=list(pantry_items),
            user_id=user_id,
        )
        return [_recipe_from_node(r["r"], r["ingredients"], r["is_liked"]) for r in records]

    def list_recipes(self) -> list[RecipeRecord]:
        records = self._run(
            """
            MATCH (r:Recipe)-[:USES]->(i:Ingredient)
            WITH r, collect(i.name) AS ingredients
            RETURN r, ingredients
            ORDER BY r.name
            """
        )
        return [_recipe_from_node(r["r"], r["ingredients"]) for r in records]

    def get_recipe(self, recipe_id: str) -> tuple[RecipeRecord, list[RecipeIngredientRecord]] | None:
        records = self._run(
            """
            MATCH (r:Recipe {id: $recipe_id})
            OPTIONAL MATCH (r)-[u:USES]->(i:Ingredient)
            RETURN r, collect(CASE WHEN i IS NULL THEN null ELSE {
                name: i.name, category: i.category, amount: u.amount, unit: u.unit
            } END) AS ingredients
            """,
            recipe_id=recipe_id,
        )
        if not records:
            return None
        uses = [
            RecipeIngredientRecord(
                name=item["name"],
                category=item.get("category"),
                amount=item.get("amount") or "",
                unit=item.get("unit") or "",
            )
            for item in records[0]["ingredients"]
        ]
        recipe = _recipe_from_node(records[0]["r"], [u.name for u in uses])
        return recipe, uses

    def recipe_exists(self, recipe_id: str) -> bool:
        records = self._run("MATCH (r:Recipe {id: $recipe_id}) RETURN r.id AS id", recipe_id=recipe_id)
        return bool(records)

    def find_recipe_by_source_url(self, source_url: str) -> str | None:
        records = self._run(
            "MATCH (r:Recipe {sourceUrl: $source_url}) RETURN r.id AS id LIMIT 1",
            source_url=source_url,
        )
        return records[0]["id"] if records else None

    def create_recipe(self, recipe_id: str, recipe: NewRecipe) -> RecipeRecord:
        props: dict[str, Any] = {"id": recipe_id}
        for attr, prop in _RECIPE_PROPS.items():
            value = getattr(recipe, attr)
            if value is not None:
                props[prop] = value

        def work(tx: ManagedTransaction) -> RecipeRecord:
            tx.run(
                "CREATE (r:Recipe $props) SET r.createdAt = datetime()",
                props=props,
            ).consume()
            tx.run(
                """
                MATCH (r:Recipe {id: $recipe_id})
                UNWIND $ingredients AS ingredient_name
                MERGE (i:Ingredient {name: ingredient_name})
                MERGE (r)-[:USES {amount: '', unit: ''}]->(i)
                """,
                recipe_id=recipe_id,
                ingredients=list(recipe.ingredients),
            ).consume()
            record = tx.run(
                """
                MATCH (r:Recipe {id: $recipe_id})
                OPTIONAL MATCH (r)-[:USES]->(i:Ingredient)
                RETURN r, collect(i.name) AS ingredients
                """,
                recipe_id=recipe_id,
            ).single()
            return _recipe_from_node(record["r"], record["ingredients"])

        return self._write(work)

    def like_recipe(self, user_id: str, recipe_id: str) -> bool:
        def work(tx: ManagedTransaction) -> bool:
            existing = tx.run(
                "MATCH (:User {id: $user_id})-[l:LIKES]->(:Recipe {id: $recipe_id}) RETURN l",
                user_id=user_id,
                recipe_id=recipe_id,
            ).single()
            if existing is not None:
                return False
            tx.run(
                """
                MATCH (u:User {id: $user_id}), (r:Recipe {id: $recipe_id})
                CREATE (u)-[:LIKES {likedAt: datetime()}]->(r)
                """,
                user_id=user_id,
                recipe_id=recipe_id,
            ).consume()
            return True

        return self._write(work)

    def unlike_recipe(self, user_id: str, recipe_id: str) -> None:
        def work(tx: ManagedTransaction) -> None:
            tx.run(
                "MATCH (:User {id: $user_id})-[l:LIKES]->(:Recipe {id: $recipe_id}) DELETE l",
                user_id=user_id,
                recipe_id=recipe_id,
            ).consume()

        self._write(work)

    def liked_recipes(self, user_id: str) -> list[RecipeRecord]:
        records = self._run(
            """
            MATCH (:User {id: $user_id})-[:LIKES]->(r:Recipe)-[:USES]->(i:Ingredient)
            WITH r, collect(i.name) AS ingredients
            RETURN r, ingredients
            ORDER BY r.name
            """,
            user_id=user_id,
        )
        return [_recipe_from_node(r["r"], r["ingredients"], is_liked=True) for r in records]


class Neo4jGraph:
    """Owns the driver (connection pool); hands out one session per request."""

    def __init__(self, config: StoreConfig = DEFAULT_STORE_CONFIG, driver: Driver | None = None):
        self._config = config
        self._driver = driver or GraphDatabase.driver(
            config.neo4j_uri, auth=(config.neo4j_user, config.neo4j_password)
        )

    @contextmanager
    def session(self) -> Iterator[Neo4jStore]:
        session = self._driver.session(database=self._config.neo4j_database)
        try:
            yield Neo4jStore(session)
        finally:
            session.close()

    def initialize(self, seed: bool = True) -> None:
        try:
            self._driver.verify_connectivity()
        except (Neo4jError, DriverError) as exc:
            logger.error("Failed to connect to Neo4j at %s", self._config.neo4j_uri, exc_info=True)
            raise StoreError(str(exc)) from exc
        logger.info("Connected to Neo4j at %s", self._config.neo4j_uri)

        try:
            with self._driver.session(database=self._config.neo4j_database) as session:
                for statement in CONSTRAINTS:
                    session.run(statement).consume()
                logger.info("Database constraints ensured")
                if seed:
                    self._seed(session)
        except (Neo4jError, DriverError) as exc:
            logger.error("Failed to prepare Neo4j schema and seed data", exc_info=True)
            raise StoreError(str(exc)) from exc

    def _seed(self, session: Session) -> None:
        count = session.run("MATCH (r:Recipe) RETURN count(r) AS count").single()["count"]
        if count > 0:
            logger.info("Database already has data, skipping seed")
            return

        def work(tx: ManagedTransaction) -> None:
            tx.run(
                """
                UNWIND $ingredients AS ing
                MERGE (i:Ingredient {name: ing.name})
                SET i.category = ing.category
                """,
                ingredients=[{"name": n, "category": c} for n, c in SEED_INGREDIENTS],
            ).consume()
            for data in SEED_RECIPES:
                props = {
                    "id": data["id"],
                    "name": data["name"],
                    "description": data["description"],
                    "prepTime": data["prep_time"],
                    "cookTime": data["cook_time"],
                    "servings": data["servings"],
                    "difficulty": data["difficulty"],
                    "dietaryTags": data["dietary_tags"],
                }
                tx.run(
                    """
                    CREATE (r:Recipe $props)
                    WITH r
                    UNWIND $uses AS use
                    MATCH (i:Ingredient {name: use.name})
                    CREATE (r)-[:USES {amount: use.amount, unit: use.unit}]->(i)
                    """,
                    props=props,
                    uses=[{"name": n, "amount": a, "unit": u} for n, a, u in data["uses"]],
                ).consume()

        session.execute_write(work)
        logger.info("Initial data seeded successfully")

    def close(self) -> None:
        self._driver.close()
