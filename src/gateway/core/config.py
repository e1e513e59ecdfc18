"""
Environment-based configuration.

Modes:
    development  GraphiQL + introspection, seeds the database on startup
    test         GraphiQL + introspection, no seeding
    production   introspection and GraphiQL disabled, no seeding

Usage:
    APP_ENV=production MONGO_URI=mongodb://db:27017 python -m gateway.main
"""
from typing import ClassVar

from pydantic_settings import BaseSettings, SettingsConfigDict

from gateway.core.database import is_local_uri
from gateway.core.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Base settings shared across environments."""

    # Application
    APP_NAME: str = "GraphQL Gateway"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    ENV_MODE: ClassVar[str] = "development"

    # Database
    MONGO_URI: str = ""
    MONGO_DB_NAME: str = "gateway"
    LOCAL_SERVER_SELECTION_TIMEOUT_MS: int = 3000

    # HTTP
    GRAPHQL_PATH: str = "/api/graphql"
    CORS_ORIGINS: list[str] = []

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.ENV_MODE == "production"

    @property
    def is_development(self) -> bool:
        return self.ENV_MODE == "development"

    @property
    def is_local_mongo(self) -> bool:
        return is_local_uri(self.MONGO_URI)

    @property
    def seed_server_selection_timeout_ms(self) -> int | None:
        """Fail fast against a local server; remote discovery may be slow."""
        if self.is_local_mongo:
            return self.LOCAL_SERVER_SELECTION_TIMEOUT_MS
        return None


class DevelopmentSettings(Settings):
    """Development settings - seeds the database, local front-ends allowed."""

    ENV_MODE: ClassVar[str] = "development"
    DEBUG: bool = True
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]


class TestSettings(Settings):
    """Settings used by the test suite."""

    __test__ = False

    ENV_MODE: ClassVar[str] = "test"
    CORS_ORIGINS: list[str] = ["http://allowed.test"]


class ProductionSettings(Settings):
    """Production settings - origins must be configured explicitly."""

    ENV_MODE: ClassVar[str] = "production"


SETTINGS_BY_MODE: dict[str, type[Settings]] = {
    "development": DevelopmentSettings,
    "test": TestSettings,
    "production": ProductionSettings,
}


def get_settings(env_mode: str = "development", **overrides) -> Settings:
    """Get settings based on environment mode.

    Raises ConfigurationError when MONGO_URI is not set, so the process stops
    before it listens for connections.
    """
    try:
        settings_class = SETTINGS_BY_MODE[env_mode]
    except KeyError:
        raise ConfigurationError(f"Unknown environment mode: {env_mode!r}") from None

    settings = settings_class(**overrides)
    if not settings.MONGO_URI:
        raise ConfigurationError("MONGO_URI environment variable is not defined")
    return settings
