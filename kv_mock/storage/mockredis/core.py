"""MockRedis command emulator.

Commands run against a ``ValueStore`` and report their outcome on a later
turn of the running asyncio event loop. Every command returns an
``asyncio.Future`` and also accepts an optional keyword-only ``callback``
invoked as ``callback(error, result)``. Completions are scheduled with
``loop.call_soon`` and so fire in the order the commands were issued.
"""

import asyncio
import fnmatch
from typing import Callable, Dict, List, Mapping, Optional, Union

from kv_mock.storage.mockredis.store import Value, ValueStore
from kv_mock.utils.deferred import Callback, deferred_reply
from kv_mock.utils.error_handling import (
    ArgumentError,
    TypeMismatchError,
    UnknownCommandError,
    command_contract,
)

OK = "OK"


class MockRedis:
    """In-memory stand-in for a Redis connection.

    Supports KEYS, GET, SET, HGET, HSET, LRANGE, LPUSH, RPUSH and LTRIM.
    Client tests rely on a few deviations from real Redis, kept as is:

    - ``hget`` on a key that is not a hash yields ``None``, not an error
    - ``lrange`` and ``ltrim`` use half-open ``[start, stop)`` ranges
    - ``lpush`` prepends its values as a block, in the order given

    Attributes:
        store: The ``ValueStore`` all commands operate on
        commands: Map of lower-case command names to their methods
    """

    def __init__(self, db: Union[ValueStore, Mapping[str, Value], None] = None):
        """Initialize the mock.

        Args:
            db: A ``ValueStore`` to share, or a mapping to seed a new one
        """
        self.store = db if isinstance(db, ValueStore) else ValueStore(db)

        # Map of commands to their implementation methods
        self.commands: Dict[str, Callable[..., asyncio.Future]] = {
            'keys': self.keys,
            'get': self.get,
            'set': self.set,
            'hget': self.hget,
            'hset': self.hset,
            'lrange': self.lrange,
            'lpush': self.lpush,
            'rpush': self.rpush,
            'ltrim': self.ltrim,
        }

    @classmethod
    def create_pool(cls, config=None, store=None, **overrides):
        """Create a connection pool of mock connections sharing one store.

        See ``MockPoolFactory.create_pool`` for the arguments.
        """
        from kv_mock.storage.pool_factory import MockPoolFactory

        return MockPoolFactory.create_pool(config=config, store=store, **overrides)

    # Key operations
    @deferred_reply
    @command_contract
    def keys(self, pattern: str) -> List[str]:
        return [key for key in self.store.keys() if fnmatch.fnmatchcase(key, pattern)]

    # String operations
    @deferred_reply
    @command_contract
    def get(self, key: str) -> Optional[str]:
        value = self.store.get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise TypeMismatchError("key is not a string")
        return value

    @deferred_reply
    @command_contract
    def set(self, key: str, value: str) -> str:
        self.store.set(key, value)
        return OK

    # Hash operations
    @deferred_reply
    @command_contract
    def hget(self, key: str, field: str) -> Optional[str]:
        """Return a hash field, or ``None``.

        A key holding some other type reads as "no value" rather than
        failing the way ``get`` does.
        """
        value = self.store.get(key)
        if isinstance(value, dict):
            return value.get(field)
        return None

    @deferred_reply
    @command_contract
    def hset(self, key: str, field: str, value: str) -> str:
        mapping = self.store.get(key)
        if mapping is None:
            mapping = {}
        elif not isinstance(mapping, dict):
            raise TypeMismatchError("key is not a hash")
        mapping[field] = value
        self.store.set(key, mapping)
        return OK

    # List operations
    @deferred_reply
    @command_contract
    def lrange(self, key: str, start: int, stop: int) -> List[str]:
        """Return the half-open slice ``[start, stop)`` of a list.

        ``stop`` of -1, or past the end, reads through the last element.
        """
        items = self._list_at(key)
        if stop == -1 or stop >= len(items):
            return items[start:]
        return items[start:stop]

    @deferred_reply
    @command_contract
    def lpush(self, key: str, *values: str) -> str:
        if not values:
            raise ArgumentError("lpush", "at least one value is required")
        items = self._list_at(key)
        self.store.set(key, list(values) + items)
        return OK

    @deferred_reply
    @command_contract
    def rpush(self, key: str, *values: str) -> str:
        if not values:
            raise ArgumentError("rpush", "at least one value is required")
        items = self._list_at(key)
        self.store.set(key, items + list(values))
        return OK

    @deferred_reply
    @command_contract
    def ltrim(self, key: str, start: int, stop: int) -> str:
        """Keep only the half-open slice ``[start, stop)`` of a list.

        Unlike ``lrange``, a ``stop`` of -1 is a plain slice bound and drops
        the last element.
        """
        items = self._list_at(key)
        self.store.set(key, items[start:stop])
        return OK

    def _list_at(self, key: str) -> List[str]:
        items = self.store.get(key)
        if items is None:
            return []
        if not isinstance(items, list):
            raise TypeMismatchError("key is not an array")
        return items

    # Advanced Client Features
    def execute_command(self, command: str, *args, callback: Optional[Callback] = None) -> asyncio.Future:
        """
        Execute a command by its wire name, e.g. ``execute_command("LPUSH", "q", "a")``.
        """
        if not isinstance(command, str) or command.lower() not in self.commands:
            raise UnknownCommandError(str(command))
        return self.commands[command.lower()](*args, callback=callback)
