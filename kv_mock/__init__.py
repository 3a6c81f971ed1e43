"""kv_mock: an in-memory Redis stand-in for testing pooled Redis clients.

The package emulates a small Redis command surface against a shared
in-memory store, and mints mock connections through a connection pool
with the usual connect/end lifecycle.

Main components:
- MockRedis: Command emulator over a ValueStore
- MockConnection: MockRedis with a connection lifecycle
- MockPoolFactory: Builds pools of mock connections sharing one store
"""

from kv_mock.config import PoolConfigModel, RecoveryPolicyModel
from kv_mock.storage.mockredis import (
    ConnectionState,
    MockConnection,
    MockRedis,
    ValueStore,
    ValueType,
)
from kv_mock.storage.pool_factory import MockConnectionPool, MockPoolFactory
from kv_mock.utils.error_handling import (
    ArgumentError,
    KVMockError,
    PoolStoppedError,
    StoreAccessError,
    TypeMismatchError,
    UnknownCommandError,
)

__version__ = "0.1.0"

__all__ = [
    "ArgumentError",
    "ConnectionState",
    "KVMockError",
    "MockConnection",
    "MockConnectionPool",
    "MockPoolFactory",
    "MockRedis",
    "PoolConfigModel",
    "PoolStoppedError",
    "RecoveryPolicyModel",
    "StoreAccessError",
    "TypeMismatchError",
    "UnknownCommandError",
    "ValueStore",
    "ValueType",
]
