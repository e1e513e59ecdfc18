"""
Execution context handed to resolvers.

Resolvers read ``info.context["connection"]``, ``info.context["models"]``,
``info.context["viewer"]`` and ``info.context["request_id"]``. The same keys
exist in the base context used outside of requests (seeding), with an
anonymous viewer and no request.
"""
import uuid
from dataclasses import dataclass

from starlette.datastructures import Headers
from starlette.requests import Request

from gateway.core.database import MongoConnection
from gateway.models import ADMINS, ModelRegistry

USER_ID_HEADER = "x-user-id"
USER_ROLES_HEADER = "x-user-roles"
REQUEST_ID_HEADER = "x-request-id"


@dataclass(frozen=True)
class Viewer:
    """Caller identity as asserted by the upstream auth proxy."""

    user_id: str | None = None
    roles: frozenset[str] = frozenset()

    @classmethod
    def anonymous(cls) -> "Viewer":
        return cls()

    @classmethod
    def from_headers(cls, headers: Headers) -> "Viewer":
        user_id = headers.get(USER_ID_HEADER) or None
        if user_id is None:
            return cls.anonymous()
        roles = frozenset(
            role.strip() for role in headers.get(USER_ROLES_HEADER, "").split(",") if role.strip()
        )
        return cls(user_id=user_id, roles=roles)

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def is_admin(self) -> bool:
        return self.is_authenticated and ADMINS in self.roles


def context_from_request(request: Request) -> dict:
    """Derive the resolver context from an incoming request. No I/O."""
    state = request.app.state
    return {
        "connection": state.mongo,
        "models": state.models,
        "viewer": Viewer.from_headers(request.headers),
        "request_id": request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex,
    }


def build_context_base(connection: MongoConnection, models: ModelRegistry) -> dict:
    """Context for code that runs without a request, such as the seeder."""
    return {
        "connection": connection,
        "models": models,
        "viewer": Viewer.anonymous(),
        "request_id": None,
        "request": None,
    }
