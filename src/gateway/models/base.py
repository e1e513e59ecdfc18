"""
Declarative model definitions.

A model is a strawberry type whose fields mirror the keys of the documents in
its collection (``id`` maps to ``_id``) plus a few hints telling the schema
builder how to expose it. No resolver code is written per model.
"""
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass

ANYONE = "anyone"
MEMBERS = "members"
ADMINS = "admins"
READ_ACCESS_LEVELS = (ANYONE, MEMBERS, ADMINS)


def snake_case(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


@dataclass(frozen=True)
class ModelDefinition:
    name: str
    graphql_type: type
    collection: str
    plural: str | None = None
    read_access: str = ANYONE
    default_limit: int = 20
    max_limit: int = 100
    seed_documents: tuple[dict, ...] = ()

    def __post_init__(self):
        if self.read_access not in READ_ACCESS_LEVELS:
            raise ValueError(f"{self.name}: unknown read access {self.read_access!r}")
        if not 0 < self.default_limit <= self.max_limit:
            raise ValueError(f"{self.name}: default_limit must be in 1..max_limit")

    @property
    def single_field(self) -> str:
        return snake_case(self.name)

    @property
    def list_field(self) -> str:
        return self.plural or f"{self.single_field}s"


class ModelRegistry(Mapping[str, ModelDefinition]):
    """Model definitions by name."""

    def __init__(self, definitions=()):
        self._definitions: dict[str, ModelDefinition] = {}
        for definition in definitions:
            self.register(definition)

    def register(self, definition: ModelDefinition) -> ModelDefinition:
        if definition.name in self._definitions:
            raise ValueError(f"Model {definition.name!r} is already registered")
        self._definitions[definition.name] = definition
        return definition

    def __getitem__(self, name: str) -> ModelDefinition:
        return self._definitions[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)
