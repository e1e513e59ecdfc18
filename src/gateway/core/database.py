"""
Process-wide MongoDB connection.

The connection is opened lazily by whichever caller needs it first (a request
or the development seeder) and then shared by everyone. Concurrent callers on
a cold start wait on the same lock, so at most one client is ever opened.
"""
from collections.abc import Callable
from typing import Any
from urllib.parse import urlsplit, urlunsplit

import anyio
import structlog
from motor.motor_asyncio import AsyncIOMotorClient

from gateway.core.exceptions import DatabaseConnectionError

logger = structlog.get_logger()

LOCAL_HOSTS = ("localhost", "127.0.0.1", "::1", "[::1]")


def is_local_uri(uri: str) -> bool:
    """True when any host in the URI is the loopback interface."""
    netloc = urlsplit(uri).netloc.rpartition("@")[2]
    for host in netloc.split(","):
        if host.rsplit(":", 1)[0] in LOCAL_HOSTS or host in LOCAL_HOSTS:
            return True
    return False


def mask_uri(uri: str) -> str:
    """Hide the password part of a connection URI before logging it."""
    parts = urlsplit(uri)
    if "@" not in parts.netloc:
        return uri
    userinfo, _, hosts = parts.netloc.rpartition("@")
    user = userinfo.split(":", 1)[0]
    return urlunsplit(parts._replace(netloc=f"{user}:***@{hosts}"))


class MongoConnection:
    """Owns the shared Motor client."""

    def __init__(
        self,
        uri: str,
        db_name: str,
        client_factory: Callable[..., Any] = AsyncIOMotorClient,
    ):
        self.uri = uri
        self.db_name = db_name
        self._client_factory = client_factory
        self._client = None
        self._lock = anyio.Lock()

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    @property
    def client(self):
        if self._client is None:
            raise DatabaseConnectionError(mask_uri(self.uri), "Not connected to MongoDB")
        return self._client

    @property
    def database(self):
        return self.client[self.db_name]

    def collection(self, name: str):
        return self.database[name]

    async def ensure_connected(self, server_selection_timeout_ms: int | None = None):
        """Return the live client, opening it if nobody has yet.

        The timeout only applies if this call is the one that opens the
        client. A failed attempt is not remembered; the next caller retries.
        """
        if self._client is not None:
            return self._client

        async with self._lock:
            if self._client is None:
                self._client = await self._connect(server_selection_timeout_ms)
        return self._client

    async def _connect(self, server_selection_timeout_ms: int | None):
        options = {}
        if server_selection_timeout_ms is not None:
            options["serverSelectionTimeoutMS"] = server_selection_timeout_ms

        client = self._client_factory(self.uri, **options)
        try:
            # Motor connects lazily; ping forces server selection now
            await client.admin.command("ping")
        except Exception as exc:
            client.close()
            logger.warning("mongo.connect_failed", uri=mask_uri(self.uri), error=str(exc))
            raise DatabaseConnectionError(mask_uri(self.uri)) from exc
        except BaseException:
            # cancelled mid-ping: nothing keeps a reference to this client
            client.close()
            logger.warning("mongo.connect_cancelled", uri=mask_uri(self.uri))
            raise

        logger.info("mongo.connected", uri=mask_uri(self.uri), database=self.db_name)
        return client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
            logger.info("mongo.closed")
