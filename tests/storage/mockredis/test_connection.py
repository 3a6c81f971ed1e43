"""Unit tests for MockConnection lifecycle signals."""

from unittest.mock import MagicMock

import pytest

from kv_mock.storage.mockredis import (
    ConnectionState,
    MockConnection,
    MockConnectionFactory,
    ValueStore,
)


@pytest.mark.lifecycle
class TestConnectionLifecycle:
    @pytest.mark.asyncio
    async def test_connect_is_deferred(self, drain):
        connection = MockConnection(ValueStore())
        on_connect = MagicMock()
        connection.on("connect", on_connect)

        assert connection.state is ConnectionState.CONNECTING
        on_connect.assert_not_called()

        await drain()
        assert connection.state is ConnectionState.CONNECTED
        assert connection.connected
        on_connect.assert_called_once_with()

    @pytest.mark.asyncio
    async def test_destroy_ends_synchronously(self, drain):
        connection = MockConnection(ValueStore())
        await drain()

        on_end = MagicMock()
        connection.on("end", on_end)
        connection.destroy()

        on_end.assert_called_once_with()
        assert connection.state is ConnectionState.ENDED
        assert not connection.connected

    @pytest.mark.asyncio
    async def test_destroy_before_connect_suppresses_connect(self, drain):
        connection = MockConnection(ValueStore())
        on_connect = MagicMock()
        on_end = MagicMock()
        connection.on("connect", on_connect)
        connection.on("end", on_end)

        connection.destroy()
        await drain()

        on_end.assert_called_once_with()
        on_connect.assert_not_called()
        assert connection.state is ConnectionState.ENDED

    @pytest.mark.asyncio
    async def test_destroy_twice_signals_once(self, drain):
        connection = MockConnection(ValueStore())
        on_end = MagicMock()
        connection.on("end", on_end)

        connection.destroy()
        connection.destroy()
        on_end.assert_called_once_with()

    @pytest.mark.asyncio
    async def test_unsubscribe(self, drain):
        connection = MockConnection(ValueStore())
        on_connect = MagicMock()
        unsubscribe = connection.on("connect", on_connect)
        unsubscribe()

        await drain()
        on_connect.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_event(self):
        connection = MockConnection(ValueStore())
        with pytest.raises(ValueError):
            connection.on("error", MagicMock())

    @pytest.mark.asyncio
    async def test_ref_and_unref_are_noops(self, drain):
        connection = MockConnection(ValueStore())
        connection.ref()
        connection.unref()
        await drain()
        assert connection.state is ConnectionState.CONNECTED

    @pytest.mark.asyncio
    async def test_connect_signals_fire_in_creation_order(self, drain):
        store = ValueStore()
        order = []
        for name in ("first", "second", "third"):
            connection = MockConnection(store)
            connection.on("connect", lambda name=name: order.append(name))

        await drain()
        assert order == ["first", "second", "third"]

    def test_needs_running_loop(self):
        with pytest.raises(RuntimeError):
            MockConnection(ValueStore())


class TestConnectionCommands:
    @pytest.mark.asyncio
    async def test_connections_share_the_store(self, drain):
        factory = MockConnectionFactory()
        writer, reader = factory("backend-a"), factory("backend-b")
        await drain()

        await writer.hset("h", "f", "v")
        assert await reader.hget("h", "f") == "v"
        assert writer.store is reader.store is factory.store

    @pytest.mark.asyncio
    async def test_factory_counts_and_backend(self, drain):
        factory = MockConnectionFactory(ValueStore({"k": "v"}))
        connection = factory("127.0.0.1:6379")

        assert factory.created == 1
        assert connection.backend == "127.0.0.1:6379"
        assert await connection.get("k") == "v"

    @pytest.mark.asyncio
    async def test_ended_connection_still_reaches_store(self, drain):
        # Ending only changes lifecycle state; the shared store is untouched
        factory = MockConnectionFactory()
        connection = factory()
        connection.destroy()

        await connection.set("k", "v")
        assert factory.store.get("k") == "v"
