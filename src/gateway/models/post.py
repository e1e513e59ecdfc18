from datetime import datetime

import strawberry

from gateway.models.base import ANYONE, ModelDefinition


@strawberry.type
class Post:
    id: strawberry.ID
    title: str
    body: str | None = None
    author_id: str | None = None
    created_at: datetime | None = None


PostModel = ModelDefinition(
    name="Post",
    graphql_type=Post,
    collection="posts",
    read_access=ANYONE,
    default_limit=10,
    max_limit=50,
    seed_documents=(
        {"title": "Welcome", "body": "This post was created by the development seed."},
    ),
)
