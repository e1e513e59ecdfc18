from datetime import datetime

import strawberry

from gateway.models.base import MEMBERS, ModelDefinition


@strawberry.type
class User:
    id: strawberry.ID
    username: str
    display_name: str | None = None
    is_admin: bool = False
    created_at: datetime | None = None


UserModel = ModelDefinition(
    name="User",
    graphql_type=User,
    collection="users",
    read_access=MEMBERS,
    seed_documents=(
        {"username": "admin", "display_name": "Administrator", "is_admin": True},
    ),
)
