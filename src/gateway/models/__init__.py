from gateway.models.base import (
    ADMINS,
    ANYONE,
    MEMBERS,
    ModelDefinition,
    ModelRegistry,
)
from gateway.models.post import Post, PostModel
from gateway.models.user import User, UserModel


def default_registry() -> ModelRegistry:
    return ModelRegistry([UserModel, PostModel])


__all__ = [
    "ADMINS",
    "ANYONE",
    "MEMBERS",
    "ModelDefinition",
    "ModelRegistry",
    "Post",
    "PostModel",
    "User",
    "UserModel",
    "default_registry",
]
