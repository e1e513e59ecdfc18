"""
Query type generated from the model registry.

For every model the builder exposes, by convention:

    user(id: ID!): User            single document by _id
    users(limit: Int, offset: Int!): [User!]!

Read access, default and maximum page size come from the model definition.
"""
import strawberry
from bson import ObjectId
from strawberry.types import Info

from gateway.graphql.permissions import PERMISSIONS_BY_ACCESS
from gateway.models import ModelDefinition, ModelRegistry


def from_document(graphql_type: type, document: dict):
    """Build a strawberry object from a MongoDB document."""
    values = {}
    for field in graphql_type.__strawberry_definition__.fields:
        if field.base_resolver is not None:
            continue
        key = "_id" if field.python_name == "id" else field.python_name
        value = document.get(key)
        if key == "_id" and value is not None:
            value = str(value)
        values[field.python_name] = value
    return graphql_type(**values)


def id_filter(id: str) -> dict:
    if ObjectId.is_valid(id):
        return {"_id": {"$in": [ObjectId(id), id]}}
    return {"_id": id}


def page_bounds(definition: ModelDefinition, limit: int | None, offset: int) -> tuple[int, int]:
    if limit is None:
        limit = definition.default_limit
    return max(0, min(limit, definition.max_limit)), max(0, offset)


def _single_field(definition: ModelDefinition):
    graphql_type = definition.graphql_type

    async def resolve(info: Info, id: strawberry.ID) -> graphql_type | None:
        collection = info.context["connection"].collection(definition.collection)
        document = await collection.find_one(id_filter(id))
        if document is None:
            return None
        return from_document(graphql_type, document)

    return strawberry.field(
        resolver=resolve,
        description=f"A single {definition.name} by id.",
        permission_classes=PERMISSIONS_BY_ACCESS[definition.read_access],
    )


def _list_field(definition: ModelDefinition):
    graphql_type = definition.graphql_type

    async def resolve(info: Info, limit: int | None = None, offset: int = 0) -> list[graphql_type]:
        limit, offset = page_bounds(definition, limit, offset)
        if limit == 0:
            # limit(0) means "no limit" to MongoDB
            return []
        collection = info.context["connection"].collection(definition.collection)
        cursor = collection.find({}).sort("_id", 1).skip(offset).limit(limit)
        documents = await cursor.to_list(length=limit)
        return [from_document(graphql_type, document) for document in documents]

    return strawberry.field(
        resolver=resolve,
        description=f"{definition.name} documents, at most {definition.max_limit} per page.",
        permission_classes=PERMISSIONS_BY_ACCESS[definition.read_access],
    )


def build_models_query(registry: ModelRegistry, name: str = "Query") -> type:
    """Generate the root query type for every registered model."""
    namespace = {}
    for definition in registry.values():
        for field_name, field in (
            (definition.single_field, _single_field(definition)),
            (definition.list_field, _list_field(definition)),
        ):
            if field_name in namespace:
                raise ValueError(f"Model {definition.name} redefines field {field_name!r}")
            namespace[field_name] = field
    return strawberry.type(type(name, (), namespace))
