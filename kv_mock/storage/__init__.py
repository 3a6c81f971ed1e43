"""Storage layer of kv_mock: the mock Redis, its pool and the pool factory."""

from kv_mock.storage.mockredis import MockConnection, MockRedis, ValueStore
from kv_mock.storage.pool_factory import MockConnectionPool, MockPoolFactory

__all__ = [
    "MockConnection",
    "MockConnectionPool",
    "MockPoolFactory",
    "MockRedis",
    "ValueStore",
]
