import structlog
from fastapi import Depends, HTTPException, Request
from strawberry.fastapi import GraphQLRouter

from gateway.core.database import MongoConnection
from gateway.core.exceptions import DatabaseConnectionError
from gateway.graphql.context import context_from_request

logger = structlog.get_logger()


async def ensure_database(request: Request) -> MongoConnection:
    """Make sure MongoDB is connected before any resolver runs."""
    connection: MongoConnection = request.app.state.mongo
    try:
        await connection.ensure_connected()
    except DatabaseConnectionError as exc:
        logger.error("graphql.database_unavailable", error=str(exc))
        raise HTTPException(status_code=503, detail="Database unavailable") from exc
    return connection


async def get_context(request: Request, connection: MongoConnection = Depends(ensure_database)):
    return context_from_request(request)


def create_graphql_router(schema, production: bool = False) -> GraphQLRouter:
    return GraphQLRouter(
        schema,
        context_getter=get_context,
        graphql_ide=None if production else "graphiql",
    )
