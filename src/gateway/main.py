"""
FastAPI gateway serving one GraphQL endpoint over MongoDB.

The endpoint combines the schema generated from the model registry with the
hand-written custom schema. In development the database is seeded before the
app reports itself started; if MongoDB is unreachable at that point startup
fails and the process exits non-zero.

Usage:
    # Development (default)
    MONGO_URI=mongodb://localhost:27017 uvicorn gateway.main:app

    # Production (via module)
    MONGO_URI=... python -m gateway.main --mode production --host 0.0.0.0 --port 8000
"""
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TypedDict

import structlog
from fastapi import FastAPI

from gateway.core.config import Settings
from gateway.core.cors import StrictCORSMiddleware
from gateway.core.database import MongoConnection, mask_uri
from gateway.core.init_settings import args, settings
from gateway.core.logging import configure_logging
from gateway.db.seed import run_startup_seed
from gateway.graphql.context import build_context_base
from gateway.graphql.router import create_graphql_router
from gateway.graphql.schema import build_schema
from gateway.models import ModelRegistry, default_registry

logger = structlog.get_logger()


class State(TypedDict):
    """Lifespan state."""
    pass


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[State]:
    """Startup and shutdown logic."""
    settings: Settings = app.state.settings
    connection: MongoConnection = app.state.mongo

    if settings.is_development:
        await run_startup_seed(
            connection,
            app.state.context_base,
            timeout_ms=settings.seed_server_selection_timeout_ms,
            local=settings.is_local_mongo,
        )

    logger.info(
        "gateway.started",
        mode=settings.ENV_MODE,
        path=settings.GRAPHQL_PATH,
        database=mask_uri(settings.MONGO_URI),
    )

    yield {}

    connection.close()
    logger.info("gateway.stopped", mode=settings.ENV_MODE)


def create_app(
    settings: Settings,
    connection: MongoConnection | None = None,
    models: ModelRegistry | None = None,
) -> FastAPI:
    configure_logging(settings.DEBUG)

    if connection is None:
        connection = MongoConnection(settings.MONGO_URI, settings.MONGO_DB_NAME)
    if models is None:
        models = default_registry()

    schema = build_schema(models, production=settings.is_production)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        lifespan=lifespan,
        debug=settings.DEBUG,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.mongo = connection
    app.state.models = models
    app.state.schema = schema
    app.state.context_base = build_context_base(connection, models)

    # CORS
    app.add_middleware(
        StrictCORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(
        create_graphql_router(schema, production=settings.is_production),
        prefix=settings.GRAPHQL_PATH,
    )
    return app


app = create_app(settings)


# Allow running as module: python -m gateway.main --mode production
if __name__ == "__main__":
    import uvicorn

    # No reload: a failed development seed must end the process
    uvicorn.run(
        "gateway.main:app",
        host=args.host,
        port=args.port,
    )
