"""
Development seeding.

Usage:
    # Runs from the app lifespan when ENV_MODE is "development"
    await run_startup_seed(connection, context_base, timeout_ms=3000)

    # Or seed an already connected database
    await seed_database(context_base)

In production the database is expected to be seeded manually.
"""
from datetime import datetime, timezone

import anyio
import structlog

from gateway.core.database import MongoConnection, mask_uri
from gateway.core.exceptions import DatabaseConnectionError, StartupSeedError
from gateway.graphql.custom import RESTAURANTS_COLLECTION

logger = structlog.get_logger()

RESTAURANTS_SEED = (
    {"name": "The Restaurant at the End of the Universe"},
    {"name": "The Last Supper"},
    {"name": "Shoney's"},
    {"name": "Big Bang Burger"},
    {"name": "Fancy Eats"},
)

LOCAL_MONGO_HINT = "Is the local MongoDB server running?"


async def insert_if_empty(collection, documents) -> int:
    """Insert documents only into an empty collection. Returns the count inserted."""
    if await collection.count_documents({}) != 0:
        return 0
    # insert_many adds _id to the dicts it is given
    await collection.insert_many([dict(document) for document in documents])
    return len(documents)


async def seed_restaurants(database) -> int:
    inserted = await insert_if_empty(database[RESTAURANTS_COLLECTION], RESTAURANTS_SEED)
    logger.info("seed.restaurants", inserted=inserted)
    return inserted


async def seed_models(context: dict) -> dict[str, int]:
    """Insert each model's seed documents into its collection when empty."""
    connection: MongoConnection = context["connection"]
    inserted = {}
    for definition in context["models"].values():
        if not definition.seed_documents:
            continue
        now = datetime.now(timezone.utc)
        documents = [{"created_at": now, **document} for document in definition.seed_documents]
        inserted[definition.name] = await insert_if_empty(
            connection.collection(definition.collection), documents
        )
    logger.info("seed.models", inserted=inserted)
    return inserted


async def seed_database(context: dict) -> None:
    """Seed model data and the demo restaurants independently of each other."""
    database = context["connection"].database
    async with anyio.create_task_group() as tg:
        tg.start_soon(seed_models, context)
        tg.start_soon(seed_restaurants, database)


async def run_startup_seed(
    connection: MongoConnection,
    context: dict,
    timeout_ms: int | None = None,
    local: bool = False,
) -> None:
    """Connect and seed, or raise StartupSeedError so startup aborts."""
    try:
        await connection.ensure_connected(server_selection_timeout_ms=timeout_ms)
    except DatabaseConnectionError as exc:
        logger.error(
            "seed.connection_failed",
            uri=mask_uri(connection.uri),
            hint=LOCAL_MONGO_HINT if local else None,
            error=str(exc.__cause__ or exc),
        )
        raise StartupSeedError(
            f"Could not connect to MongoDB on URI {mask_uri(connection.uri)} during seed step"
        ) from exc

    logger.info("seed.connected", database=connection.db_name)
    await seed_database(context)
