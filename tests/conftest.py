import os

# gateway.main builds its module-level app at import time
os.environ.setdefault("MONGO_URI", "mongodb://localhost:27017")
os.environ.setdefault("APP_ENV", "test")

import anyio
import pytest
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient
from pymongo.errors import ServerSelectionTimeoutError

from gateway.core.config import get_settings
from gateway.core.database import MongoConnection
from gateway.graphql.context import Viewer, build_context_base
from gateway.main import create_app
from gateway.models import default_registry

MONGO_URI = "mongodb://localhost:27017"
DB_NAME = "gateway_test"
GRAPHQL_PATH = "/api/graphql"


class FakeAdmin:
    def __init__(self, mongo):
        self.mongo = mongo

    async def command(self, name):
        self.mongo.pings += 1
        await anyio.sleep(self.mongo.delay)
        if self.mongo.fail:
            raise ServerSelectionTimeoutError("localhost:27017: [Errno 111] Connection refused")
        return {"ok": 1.0}


class FakeClient:
    def __init__(self, mongo):
        self.mongo = mongo
        self.admin = FakeAdmin(mongo)

    def __getitem__(self, name):
        return self.mongo.storage[name]

    def close(self):
        self.mongo.closed += 1


class FakeMongo:
    """Client factory over an in-memory mongomock-motor server.

    Counts how many clients were opened so tests can check connect-once, and
    can be told to fail or delay the initial ping.
    """

    def __init__(self):
        self.storage = AsyncMongoMockClient()
        self.opened = 0
        self.closed = 0
        self.pings = 0
        self.fail = False
        self.delay = 0.0
        self.options = None

    def __call__(self, uri, **options):
        self.opened += 1
        self.options = options
        return FakeClient(self)

    @property
    def database(self):
        return self.storage[DB_NAME]


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def mongo():
    return FakeMongo()


@pytest.fixture
def connection(mongo):
    return MongoConnection(MONGO_URI, DB_NAME, client_factory=mongo)


@pytest.fixture
async def connected(connection):
    await connection.ensure_connected()
    return connection


@pytest.fixture
def models():
    return default_registry()


@pytest.fixture
def context_base(connection, models):
    return build_context_base(connection, models)


@pytest.fixture
def member_context(connection, models):
    return {**build_context_base(connection, models), "viewer": Viewer(user_id="u1")}


@pytest.fixture
def settings():
    return get_settings("test", MONGO_URI=MONGO_URI, MONGO_DB_NAME=DB_NAME)


@pytest.fixture
def app(settings, connection, models):
    return create_app(settings, connection=connection, models=models)


@pytest.fixture
async def client(app):
    """Async test client with lifespan support."""
    async with LifespanManager(app) as manager:
        async with AsyncClient(
            transport=ASGITransport(app=manager.app),
            base_url="http://test",
        ) as ac:
            yield ac
