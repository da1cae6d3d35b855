"""Tests for the Redis link store."""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import fakeredis
import pytest
import pytest_asyncio
from fakeredis import aioredis as fake_aioredis
from redis.exceptions import ConnectionError as RedisConnectionError

from shortlinks.repositories.base import StorageUnavailableError
from shortlinks.repositories.redis_repository import RedisLinkStore
from tests.utils import make_record, random_url


def encoded(id, code, url, created_at="2026-01-02T03:04:05+00:00"):
    return json.dumps({"id": id, "code": code, "original_url": url, "created_at": created_at})


@pytest.fixture
def redis_client():
    client = MagicMock()
    client.hget = AsyncMock()
    client.ping = AsyncMock(return_value=True)
    client.aclose = AsyncMock()
    client.register_script.side_effect = [AsyncMock(name="create"), AsyncMock(name="list")]
    return client


@pytest.fixture
def redis_store(redis_client):
    return RedisLinkStore(redis_client, prefix="test")


@pytest_asyncio.fixture
async def scripted_store():
    """Redis store over an isolated in-process server that runs the Lua scripts."""
    client = fake_aioredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)
    store = RedisLinkStore(client, prefix="test")

    yield store

    await store.close()


@pytest.mark.repository
class TestRedisLinkStore:
    """Test suite for RedisLinkStore against a mocked client."""

    def test_key_schema(self, redis_store):
        assert redis_store.records_key == "test:links"
        assert redis_store.index_key == "test:links:by_created"
        assert redis_store.sequence_key == "test:links:seq"

    @pytest.mark.asyncio
    async def test_create_stored(self, redis_store):
        redis_store._create_script.return_value = 7
        record = make_record(code="redis1", original_url="https://example.com/r")

        assert await redis_store.create_if_absent(record) is True

        assert record.id == 7
        assert record.created_at is not None
        kwargs = redis_store._create_script.await_args.kwargs
        assert kwargs["keys"] == ["test:links", "test:links:by_created", "test:links:seq"]
        assert kwargs["args"][0] == "redis1"
        assert json.loads(kwargs["args"][1])["original_url"] == "https://example.com/r"

    @pytest.mark.asyncio
    async def test_create_collision(self, redis_store):
        redis_store._create_script.return_value = 0
        record = make_record(code="taken")

        assert await redis_store.create_if_absent(record) is False
        assert record.id is None

    @pytest.mark.asyncio
    async def test_get_by_code(self, redis_store, redis_client):
        redis_client.hget.return_value = encoded(3, "abc", "https://example.com/x")

        record = await redis_store.get_by_code("abc")

        assert record.id == 3
        assert record.code == "abc"
        assert record.original_url == "https://example.com/x"
        assert record.created_at.year == 2026
        redis_client.hget.assert_awaited_once_with("test:links", "abc")

    @pytest.mark.asyncio
    async def test_get_missing(self, redis_store, redis_client):
        redis_client.hget.return_value = None
        assert await redis_store.get_by_code("missing") is None

    @pytest.mark.asyncio
    async def test_list_all_skips_missing_entries(self, redis_store):
        redis_store._list_script.return_value = [
            encoded(2, "new", "https://example.com/2"),
            None,
            encoded(1, "old", "https://example.com/1"),
        ]

        records = await redis_store.list_all()

        assert [r.code for r in records] == ["new", "old"]

    @pytest.mark.asyncio
    async def test_connection_error_is_storage_unavailable(self, redis_store, redis_client):
        redis_client.hget.side_effect = RedisConnectionError("refused")
        redis_store._create_script.side_effect = RedisConnectionError("refused")
        redis_store._list_script.side_effect = RedisConnectionError("refused")

        with pytest.raises(StorageUnavailableError):
            await redis_store.get_by_code("abc")
        with pytest.raises(StorageUnavailableError):
            await redis_store.create_if_absent(make_record())
        with pytest.raises(StorageUnavailableError):
            await redis_store.list_all()

    @pytest.mark.asyncio
    async def test_ping(self, redis_store, redis_client):
        assert await redis_store.ping() is True
        redis_client.ping.side_effect = RedisConnectionError("refused")
        assert await redis_store.ping() is False

    @pytest.mark.asyncio
    async def test_close(self, redis_store, redis_client):
        await redis_store.close()
        redis_client.aclose.assert_awaited_once()


@pytest.mark.repository
class TestRedisLinkStoreScripts:
    """RedisLinkStore with its server-side scripts executed."""

    @pytest.mark.asyncio
    async def test_create_and_get(self, scripted_store):
        url = random_url()
        record = make_record(code="lua1", original_url=url)

        assert await scripted_store.create_if_absent(record) is True
        assert record.id == 1

        stored = await scripted_store.get_by_code("lua1")
        assert stored.id == 1
        assert stored.code == "lua1"
        assert stored.original_url == url
        assert stored.created_at == record.created_at
        assert stored.created_at.tzinfo is not None

    @pytest.mark.asyncio
    async def test_url_is_stored_verbatim(self, scripted_store):
        url = 'https://example.com/p?q="quoted"&x=é#frag'
        await scripted_store.create_if_absent(make_record(code="verbatim", original_url=url))

        stored = await scripted_store.get_by_code("verbatim")

        assert stored.original_url == url

    @pytest.mark.asyncio
    async def test_duplicate_code_not_stored(self, scripted_store):
        first_url = random_url()
        assert await scripted_store.create_if_absent(make_record(code="luadup", original_url=first_url)) is True

        second = make_record(code="luadup")
        assert await scripted_store.create_if_absent(second) is False
        assert second.id is None

        stored = await scripted_store.get_by_code("luadup")
        assert stored.original_url == first_url
        assert len(await scripted_store.list_all()) == 1

    @pytest.mark.asyncio
    async def test_get_missing(self, scripted_store):
        assert await scripted_store.get_by_code("nothing") is None

    @pytest.mark.asyncio
    async def test_list_all_newest_first(self, scripted_store):
        codes = [f"lua{i}" for i in range(5)]
        for code in codes:
            await scripted_store.create_if_absent(make_record(code=code))

        records = await scripted_store.list_all()

        assert [r.code for r in records] == list(reversed(codes))
        assert [r.id for r in records] == [5, 4, 3, 2, 1]

    @pytest.mark.asyncio
    async def test_list_all_empty(self, scripted_store):
        assert await scripted_store.list_all() == []

    @pytest.mark.asyncio
    async def test_concurrent_same_code(self, scripted_store):
        results = await asyncio.gather(
            *[scripted_store.create_if_absent(make_record(code="luarace")) for _ in range(20)]
        )

        assert results.count(True) == 1
        assert results.count(False) == 19
        assert [r.code for r in await scripted_store.list_all()] == ["luarace"]

    @pytest.mark.asyncio
    async def test_ping(self, scripted_store):
        assert await scripted_store.ping() is True
