"""Error taxonomy for the gateway.

Only startup errors are allowed to stop the process; everything raised while
serving a request stays scoped to that request.
"""


class GatewayError(Exception):
    """Base class for gateway errors."""


class ConfigurationError(GatewayError):
    """A required setting is missing or invalid."""


class DatabaseConnectionError(GatewayError):
    """MongoDB could not be reached."""

    def __init__(self, uri: str, message: str = "Could not connect to MongoDB"):
        self.uri = uri
        super().__init__(f"{message} on URI {uri}")


class SchemaConflictError(GatewayError):
    """Two source schemas define the same type or root field."""

    def __init__(self, conflicts: list[str]):
        self.conflicts = conflicts
        super().__init__("Conflicting schema names: " + ", ".join(conflicts))


class StartupSeedError(GatewayError):
    """Development seeding could not run."""
