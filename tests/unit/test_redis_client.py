"""Unit tests for RedisKeyValueClient and SET option parsing."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from memstash.providers.kv.redis_client import RedisKeyValueClient, parse_set_options
from memstash.utils.errors import InvalidArgumentError, StoreUnavailableError


@pytest.fixture()
def mock_redis() -> MagicMock:
    mock = MagicMock()
    mock.get = AsyncMock(return_value="value")
    mock.set = AsyncMock(return_value=True)
    mock.delete = AsyncMock(return_value=1)
    mock.keys = AsyncMock(return_value=["a", "b"])
    mock.flushdb = AsyncMock(return_value=True)
    mock.ping = AsyncMock(return_value=True)
    mock.aclose = AsyncMock(return_value=None)
    return mock


class TestParseSetOptions:
    def test_no_options(self) -> None:
        assert parse_set_options(()) == {}

    def test_px(self) -> None:
        assert parse_set_options(("PX", 500)) == {"px": 500}

    def test_ex_and_flags_case_insensitive(self) -> None:
        assert parse_set_options(("ex", "10", "nx")) == {"ex": 10, "nx": True}

    def test_missing_value_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            parse_set_options(("PX",))

    def test_unknown_option_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            parse_set_options(("GET",))


class TestRedisKeyValueClient:
    @pytest.mark.asyncio
    async def test_get(self, mock_redis: MagicMock) -> None:
        client = RedisKeyValueClient(mock_redis)
        assert await client.get("k") == "value"
        mock_redis.get.assert_awaited_once_with("k")

    @pytest.mark.asyncio
    async def test_set_translates_px_to_keyword(self, mock_redis: MagicMock) -> None:
        client = RedisKeyValueClient(mock_redis)
        await client.set("k", '"v"', "PX", 30)
        mock_redis.set.assert_awaited_once_with("k", '"v"', px=30)

    @pytest.mark.asyncio
    async def test_set_without_options(self, mock_redis: MagicMock) -> None:
        client = RedisKeyValueClient(mock_redis)
        await client.set("k", "1")
        mock_redis.set.assert_awaited_once_with("k", "1")

    @pytest.mark.asyncio
    async def test_delete_returns_count(self, mock_redis: MagicMock) -> None:
        client = RedisKeyValueClient(mock_redis)
        assert await client.delete("k") == 1

    @pytest.mark.asyncio
    async def test_keys_by_pattern(self, mock_redis: MagicMock) -> None:
        client = RedisKeyValueClient(mock_redis)
        assert await client.keys("*") == ["a", "b"]
        mock_redis.keys.assert_awaited_once_with("*")

    @pytest.mark.asyncio
    async def test_flush_all_uses_flushdb(self, mock_redis: MagicMock) -> None:
        client = RedisKeyValueClient(mock_redis)
        await client.flush_all()
        mock_redis.flushdb.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_connection_error_wrapped(self, mock_redis: MagicMock) -> None:
        mock_redis.get.side_effect = RedisConnectionError("refused")
        client = RedisKeyValueClient(mock_redis)
        with pytest.raises(StoreUnavailableError) as exc_info:
            await client.get("k")
        assert exc_info.value.store_name == "redis"

    @pytest.mark.asyncio
    async def test_timeout_error_wrapped(self, mock_redis: MagicMock) -> None:
        mock_redis.keys.side_effect = RedisTimeoutError("slow")
        client = RedisKeyValueClient(mock_redis)
        with pytest.raises(StoreUnavailableError):
            await client.keys("*")

    @pytest.mark.asyncio
    async def test_ping_false_when_unreachable(self, mock_redis: MagicMock) -> None:
        mock_redis.ping.side_effect = RedisConnectionError("refused")
        client = RedisKeyValueClient(mock_redis)
        assert await client.ping() is False

    @pytest.mark.asyncio
    async def test_aclose(self, mock_redis: MagicMock) -> None:
        client = RedisKeyValueClient(mock_redis)
        await client.aclose()
        mock_redis.aclose.assert_awaited_once()

    def test_from_url_decodes_responses(self) -> None:
        client = RedisKeyValueClient.from_url("redis://localhost:6379/3")
        pool_kwargs = client._redis.connection_pool.connection_kwargs
        assert pool_kwargs["decode_responses"] is True
        assert pool_kwargs["db"] == 3
