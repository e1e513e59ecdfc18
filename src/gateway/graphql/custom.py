"""
Hand-written part of the API.

Expects a ``restaurants`` collection of free-form documents; in development
it is filled by the startup seed.
"""
import strawberry
import structlog
from strawberry.types import Info

logger = structlog.get_logger()

RESTAURANTS_COLLECTION = "restaurants"
RESTAURANTS_LIMIT = 5


@strawberry.type
class Restaurant:
    id: strawberry.ID = strawberry.field(name="_id")
    name: str | None = None


def restaurant_from_document(document: dict) -> Restaurant:
    return Restaurant(id=str(document["_id"]), name=document.get("name"))


@strawberry.type
class Query:
    @strawberry.field
    async def restaurants(self, info: Info) -> list[Restaurant | None] | None:
        try:
            collection = info.context["connection"].collection(RESTAURANTS_COLLECTION)
            cursor = collection.find({}).limit(RESTAURANTS_LIMIT)
            documents = await cursor.to_list(length=RESTAURANTS_LIMIT)
        except Exception:
            logger.exception("restaurants.fetch_failed", request_id=info.context.get("request_id"))
            raise
        return [restaurant_from_document(document) for document in documents]
