import anyio
import pytest

from gateway.core.database import MongoConnection, is_local_uri, mask_uri
from gateway.core.exceptions import DatabaseConnectionError


@pytest.mark.parametrize(
    "uri,expected",
    [
        ("mongodb://localhost:27017", True),
        ("mongodb://127.0.0.1/app", True),
        ("mongodb://user:pw@localhost:27017/app", True),
        ("mongodb://db1.example.com:27017,localhost:27018/app", True),
        ("mongodb://mongo.internal:27017", False),
        ("mongodb+srv://user:pw@cluster0.example.net/app", False),
    ],
)
def test_is_local_uri(uri, expected):
    assert is_local_uri(uri) is expected


def test_mask_uri_hides_password():
    assert mask_uri("mongodb://admin:s3cret@db:27017/app") == "mongodb://admin:***@db:27017/app"
    assert mask_uri("mongodb://db:27017/app") == "mongodb://db:27017/app"


@pytest.mark.anyio
async def test_ensure_connected_is_idempotent(mongo, connection):
    first = await connection.ensure_connected()
    second = await connection.ensure_connected()
    assert first is second
    assert mongo.opened == 1
    assert connection.is_connected


@pytest.mark.anyio
async def test_concurrent_callers_open_one_client(mongo, connection):
    mongo.delay = 0.05
    clients = []

    async def connect():
        clients.append(await connection.ensure_connected())

    async with anyio.create_task_group() as tg:
        for _ in range(20):
            tg.start_soon(connect)

    assert mongo.opened == 1
    assert mongo.pings == 1
    assert len(clients) == 20
    assert all(client is clients[0] for client in clients)


@pytest.mark.anyio
async def test_timeout_passed_only_when_set(mongo, connection):
    await connection.ensure_connected(server_selection_timeout_ms=3000)
    assert mongo.options == {"serverSelectionTimeoutMS": 3000}

    other = MongoConnection("mongodb://db:27017", "x", client_factory=mongo)
    await other.ensure_connected()
    assert mongo.options == {}


@pytest.mark.anyio
async def test_failed_connect_is_not_memoized(mongo, connection):
    mongo.fail = True
    with pytest.raises(DatabaseConnectionError) as excinfo:
        await connection.ensure_connected()
    assert "localhost:27017" in str(excinfo.value)
    assert not connection.is_connected
    assert mongo.closed == 1

    mongo.fail = False
    await connection.ensure_connected()
    assert connection.is_connected
    assert mongo.opened == 2


def test_database_requires_connection(connection):
    with pytest.raises(DatabaseConnectionError):
        connection.database


@pytest.mark.anyio
async def test_close_releases_client(mongo, connected):
    connected.close()
    assert not connected.is_connected
    assert mongo.closed == 1
    # closing twice is harmless
    connected.close()
    assert mongo.closed == 1


@pytest.mark.anyio
async def test_cancelled_connect_closes_client(mongo, connection):
    mongo.delay = 1.0
    with anyio.move_on_after(0.05) as scope:
        await connection.ensure_connected()
    assert scope.cancelled_caught
    assert mongo.opened == 1
    assert mongo.closed == 1
    assert not connection.is_connected

    # the lock was released, so the next caller connects normally
    mongo.delay = 0.0
    await connection.ensure_connected()
    assert connection.is_connected
    assert mongo.opened == 2
