"""Error handling utilities for the kv_mock package.

This module defines the exception hierarchy shared by the mock store, the
mock connections and the pooling layer, and the ``command_contract``
decorator that rejects malformed calls before they reach the store.

Two kinds of failure are kept apart:

1. Caller-contract violations (wrong argument types, missing arguments)
   are programming errors. They raise ``ArgumentError`` synchronously at the
   call site and never travel through a command's completion channel.
2. Data-shape conflicts (``TypeMismatchError``) are reported through the
   command's completion channel, leaving the store untouched.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from pydantic import ConfigDict, ValidationError, validate_call
from redis.exceptions import ResponseError

logger = logging.getLogger(__name__)

# Type variable for generic function return
T = TypeVar("T")

# Strict mode: no str -> int coercion, bool is not accepted as an int
_STRICT_CONTRACT = ConfigDict(strict=True, arbitrary_types_allowed=True)


class KVMockError(Exception):
    """Base class for all kv_mock exceptions."""
    pass


class ArgumentError(KVMockError, AssertionError):
    """A command was called with arguments that break its contract."""

    def __init__(self, operation: str, detail: str = ""):
        self.operation = operation
        message = f"Invalid arguments for '{operation}'"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class UnknownCommandError(ArgumentError):
    """A command name with no emulated implementation."""

    def __init__(self, command: str):
        self.command = command
        super().__init__("execute_command", f"command '{command}' is not supported")


class TypeMismatchError(KVMockError, ResponseError):
    """The stored value has the wrong type for the requested operation.

    Derives from redis-py's ``ResponseError`` so that client code catching
    a real ``WRONGTYPE`` reply catches this one as well.
    """
    pass


class StoreAccessError(KVMockError):
    """The value store was touched from a thread other than its owner."""
    pass


class PoolStoppedError(KVMockError):
    """A claim was made against a pool that has been stopped."""
    pass


def command_contract(func: Callable[..., T]) -> Callable[..., T]:
    """Decorator validating a command's arguments against its annotations.

    Arguments are checked with pydantic's ``validate_call`` in strict mode.
    Any validation failure is re-raised as ``ArgumentError`` before the
    command body runs.

    Args:
        func: Command method to guard

    Returns:
        Wrapped method raising ``ArgumentError`` on contract violations
    """
    validated = validate_call(config=_STRICT_CONTRACT)(func)

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        try:
            return validated(*args, **kwargs)
        except ValidationError as e:
            logger.debug("Rejected call to %s: %s", func.__name__, e)
            raise ArgumentError(func.__name__, _summarize(e)) from e

    return wrapper


def _summarize(error: ValidationError) -> str:
    """Condense a pydantic validation error into a single line."""
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ()))
        parts.append(f"{location}: {item.get('msg')}" if location else item.get("msg"))
    return "; ".join(parts)
