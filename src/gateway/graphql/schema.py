"""
Schema composition.

The API is served from one schema merged from two sources: the query type
generated from the model registry and the hand-written custom query. Merging
refuses any type or root field defined by more than one source, so a name
collision fails at startup instead of one resolver silently shadowing another.
"""
from dataclasses import dataclass

import strawberry
from graphql import (
    NoSchemaIntrospectionCustomRule,
    build_schema as build_graphql_schema,
    is_introspection_type,
    is_scalar_type,
    is_specified_scalar_type,
    print_type,
)
from strawberry.extensions import AddValidationRules
from strawberry.tools import merge_types

from gateway.core.exceptions import SchemaConflictError
from gateway.graphql import custom
from gateway.graphql.models_schema import build_models_query
from gateway.models import ModelRegistry


@dataclass(frozen=True)
class SourceSchema:
    """A root query type together with its standalone executable schema."""

    name: str
    query: type
    schema: strawberry.Schema


def make_executable_schema(name: str, query: type) -> SourceSchema:
    return SourceSchema(name=name, query=query, schema=strawberry.Schema(query=query))


def schema_names(source: SourceSchema) -> tuple[dict[str, tuple[str, bool]], set[str]]:
    """Named types (SDL, is_scalar) and root query field names of a source."""
    graphql_schema = build_graphql_schema(str(source.schema))
    root = graphql_schema.query_type

    types = {}
    for type_name, named_type in graphql_schema.type_map.items():
        if named_type is root or is_introspection_type(named_type) or is_specified_scalar_type(named_type):
            continue
        types[type_name] = (print_type(named_type), is_scalar_type(named_type))
    return types, set(root.fields)


def find_conflicts(*sources: SourceSchema) -> list[str]:
    """Every type or root field name defined by more than one source.

    Custom scalars printed identically (e.g. DateTime) are shared, not
    conflicting.
    """
    type_owners: dict[str, tuple[str, str]] = {}
    field_owners: dict[str, str] = {}
    conflicts = []

    for source in sources:
        types, fields = schema_names(source)
        for type_name, (sdl, is_scalar) in sorted(types.items()):
            if type_name not in type_owners:
                type_owners[type_name] = (source.name, sdl)
                continue
            owner, owner_sdl = type_owners[type_name]
            if is_scalar and sdl == owner_sdl:
                continue
            conflicts.append(f"type {type_name} ({owner}, {source.name})")

        for field_name in sorted(fields):
            if field_name in field_owners:
                conflicts.append(f"Query.{field_name} ({field_owners[field_name]}, {source.name})")
            else:
                field_owners[field_name] = source.name

    return conflicts


def merge_schemas(*sources: SourceSchema, production: bool = False) -> strawberry.Schema:
    conflicts = find_conflicts(*sources)
    if conflicts:
        raise SchemaConflictError(conflicts)

    query = merge_types("Query", tuple(source.query for source in sources))
    extensions = []
    if production:
        extensions.append(lambda: AddValidationRules([NoSchemaIntrospectionCustomRule]))
    return strawberry.Schema(query=query, extensions=extensions)


def build_sources(registry: ModelRegistry) -> tuple[SourceSchema, SourceSchema]:
    return (
        make_executable_schema("models", build_models_query(registry)),
        make_executable_schema("custom", custom.Query),
    )


def build_schema(registry: ModelRegistry, production: bool = False) -> strawberry.Schema:
    """Merged schema served by the gateway."""
    return merge_schemas(*build_sources(registry), production=production)
