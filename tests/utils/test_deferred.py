"""Unit tests for the deferred completion helpers."""

import asyncio
from unittest.mock import MagicMock

import pytest

from kv_mock.utils.deferred import deferred_reply, deliver, schedule
from kv_mock.utils.error_handling import ArgumentError, TypeMismatchError


class Echo:
    @deferred_reply
    def echo(self, value):
        if value == "boom":
            raise TypeMismatchError("bad type")
        if value is None:
            raise ArgumentError("echo", "value required")
        return value


class TestSchedule:
    @pytest.mark.asyncio
    async def test_result_after_one_turn(self):
        callback = MagicMock()
        future = schedule(callback, result=42)

        assert not future.done()
        callback.assert_not_called()

        assert await future == 42
        callback.assert_called_once_with(None, 42)

    @pytest.mark.asyncio
    async def test_error(self):
        error = TypeMismatchError("nope")
        callback = MagicMock()

        with pytest.raises(TypeMismatchError):
            await schedule(callback, error=error)
        callback.assert_called_once_with(error, None)

    @pytest.mark.asyncio
    async def test_fifo(self, drain):
        order = []
        for i in range(5):
            schedule(lambda err, res: order.append(res), result=i)
        await drain()
        assert order == [0, 1, 2, 3, 4]


class TestDeliver:
    @pytest.mark.asyncio
    async def test_error_marked_retrieved(self):
        future = asyncio.get_running_loop().create_future()
        error = TypeMismatchError("x")
        deliver(future, None, error, None)

        assert future.exception() is error
        # Unawaited failures are not reported as never retrieved
        assert not getattr(future, "_log_traceback", False)

    @pytest.mark.asyncio
    async def test_cancelled_future(self):
        future = asyncio.get_running_loop().create_future()
        future.cancel()
        callback = MagicMock()

        deliver(future, callback, None, "value")
        callback.assert_called_once_with(None, "value")


class TestDeferredReply:
    @pytest.mark.asyncio
    async def test_result(self):
        assert await Echo().echo("hi") == "hi"

    @pytest.mark.asyncio
    async def test_type_mismatch_goes_through_completion(self):
        callback = MagicMock()
        future = Echo().echo("boom", callback=callback)

        with pytest.raises(TypeMismatchError):
            await future
        assert isinstance(callback.call_args.args[0], TypeMismatchError)

    @pytest.mark.asyncio
    async def test_argument_error_raised_immediately(self, drain):
        callback = MagicMock()
        with pytest.raises(ArgumentError):
            Echo().echo(None, callback=callback)
        await drain()
        callback.assert_not_called()

    @pytest.mark.asyncio
    async def test_callback_must_be_callable(self):
        with pytest.raises(ArgumentError):
            Echo().echo("hi", callback=42)

    def test_requires_running_loop(self):
        with pytest.raises(RuntimeError):
            Echo().echo("hi")
