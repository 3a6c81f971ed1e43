"""Deferred completion helpers.

Results are handed back on a later turn of the running event loop through
an ``asyncio.Future`` and, when supplied, a ``callback(error, result)``.
Because everything is scheduled with ``loop.call_soon``, completions fire
in the order their operations were issued.
"""

import asyncio
import functools
from typing import Any, Callable, Optional

from kv_mock.utils.error_handling import ArgumentError, TypeMismatchError

Callback = Callable[[Optional[Exception], Any], None]


def deliver(
    future: asyncio.Future,
    callback: Optional[Callback],
    error: Optional[Exception],
    result: Any,
) -> None:
    """Settle ``future`` and invoke ``callback`` with the same outcome."""
    if not future.cancelled():
        if error is not None:
            future.set_exception(error)
            # Mark retrieved: the error also reaches the callback, or the caller awaits it
            future.exception()
        else:
            future.set_result(result)
    if callback is not None:
        callback(error, result)


def schedule(
    callback: Optional[Callback],
    error: Optional[Exception] = None,
    result: Any = None,
) -> asyncio.Future:
    """Return a future that settles with the given outcome on the next turn."""
    loop = asyncio.get_running_loop()
    future = loop.create_future()
    loop.call_soon(deliver, future, callback, error, result)
    return future


def check_callback(operation: str, callback: Optional[Callback]) -> None:
    if callback is not None and not callable(callback):
        raise ArgumentError(operation, "callback must be callable")


def deferred_reply(func: Callable[..., Any]) -> Callable[..., asyncio.Future]:
    """Decorator turning a synchronous command body into a deferred reply.

    The body returns its result or raises ``TypeMismatchError``; either
    outcome is delivered on the next loop turn. Any other exception,
    ``ArgumentError`` included, propagates to the caller immediately.
    """

    @functools.wraps(func)
    def wrapper(self, *args, callback: Optional[Callback] = None, **kwargs) -> asyncio.Future:
        check_callback(func.__name__, callback)
        # Fail before touching the store when there is no loop to reply on
        asyncio.get_running_loop()

        try:
            result = func(self, *args, **kwargs)
        except TypeMismatchError as e:
            return schedule(callback, error=e)
        return schedule(callback, result=result)

    return wrapper
