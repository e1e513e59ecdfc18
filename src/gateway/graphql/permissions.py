from typing import Any

from strawberry.permission import BasePermission
from strawberry.types import Info

from gateway.models import ADMINS, ANYONE, MEMBERS


class IsAuthenticated(BasePermission):
    message = "You must be signed in to read this"

    def has_permission(self, source: Any, info: Info, **kwargs: Any) -> bool:
        return info.context["viewer"].is_authenticated


class IsAdmin(BasePermission):
    message = "Only admins can read this"

    def has_permission(self, source: Any, info: Info, **kwargs: Any) -> bool:
        return info.context["viewer"].is_admin


PERMISSIONS_BY_ACCESS = {
    ANYONE: [],
    MEMBERS: [IsAuthenticated],
    ADMINS: [IsAdmin],
}
