"""kv_mock MockRedis Module

This module provides a Redis mock for testing code that talks to Redis
through a connection pool, without an actual Redis server.

Key components:

1. ValueStore: The in-memory mapping from keys to typed values (strings,
   hashes and lists). One store can back any number of connections.

2. MockRedis: The command emulator. KEYS, GET, SET, HGET, HSET, LRANGE,
   LPUSH, RPUSH and LTRIM run against a ValueStore and complete on a later
   turn of the asyncio event loop, through a returned future and an
   optional ``callback(error, result)``.

3. MockConnection: A MockRedis with a connection lifecycle
   (connecting -> connected -> ended), as minted by a connection pool.

Usage example:
```python
from kv_mock.storage.mockredis import MockRedis

async def main():
    redis = MockRedis({"greeting": "hello"})

    assert await redis.get("greeting") == "hello"

    await redis.hset("user:1", "name", "Alice")
    name = await redis.hget("user:1", "name")

    await redis.rpush("queue", "job1", "job2")
    jobs = await redis.lrange("queue", 0, -1)

    # Callback style
    redis.get("greeting", callback=lambda err, value: print(value))
```
"""

from .connection import ConnectionState, MockConnection, MockConnectionFactory
from .core import OK, MockRedis
from .store import ValueStore, ValueType

__all__ = [
    "ConnectionState",
    "MockConnection",
    "MockConnectionFactory",
    "MockRedis",
    "OK",
    "ValueStore",
    "ValueType",
]
