"""Pool factory for mock connections.

This module builds connection pools whose connections are ``MockConnection``
objects sharing a single in-memory store, so code written against a pooled
Redis client can be exercised without a Redis server.
"""

import logging
from typing import Any, Mapping, Union

from kv_mock.config.models import PoolConfigModel
from kv_mock.storage.mockredis.connection import MockConnectionFactory
from kv_mock.storage.mockredis.store import Value, ValueStore
from kv_mock.storage.pooling.pool import ConnectionPool
from kv_mock.storage.pooling.resolver import resolver_for_ip_or_domain

logger = logging.getLogger(__name__)


class MockConnectionPool(ConnectionPool):
    """ConnectionPool over mock connections.

    Attributes:
        config: Pool options exactly as given, defaults filled in
        store: Store shared by every connection of this pool
        connection_factory: Constructor minting the pool's connections
    """

    def __init__(self, config: PoolConfigModel, connection_factory: MockConnectionFactory, resolver):
        super().__init__(
            domain=config.domain,
            resolver=resolver,
            constructor=connection_factory,
            service=config.service,
            default_port=config.default_port,
            spares=config.spares,
            maximum=config.maximum,
            recovery=config.recovery,
        )
        self.config = config
        self.connection_factory = connection_factory
        self.store = connection_factory.store


class MockPoolFactory:
    """Factory for creating pools of mock connections.

    Pool options are kept exactly as given. The mock never exercises
    resolver failover, timeouts or backoff, so nothing is rejected.
    """

    @staticmethod
    def create_pool(
        config: Union[PoolConfigModel, Mapping[str, Any], None] = None,
        store: Union[ValueStore, Mapping[str, Value], None] = None,
        **overrides: Any,
    ) -> MockConnectionPool:
        """Create a connection pool backed by one shared store.

        Must be called while an event loop is running. The resolver is
        started before this returns; connections follow on later loop turns.

        Args:
            config: Pool options (domain, resolver, service, default_port,
                spares, maximum, recovery); defaults fill missing fields
            store: A ``ValueStore`` to share, or a mapping to seed a new one
            **overrides: Individual options taking precedence over ``config``

        Returns:
            The started ``MockConnectionPool``
        """
        pool_config = PoolConfigModel.from_options(config, **overrides)
        shared = store if isinstance(store, ValueStore) else ValueStore(store)
        factory = MockConnectionFactory(shared)

        resolver = resolver_for_ip_or_domain(
            str(pool_config.resolver),
            default_port=pool_config.default_port,
            service=pool_config.service,
        )
        pool = MockConnectionPool(pool_config, factory, resolver)

        resolver.start()
        logger.info(
            f"Created mock pool for {pool_config.domain} "
            f"(resolver={pool_config.resolver}, spares={pool_config.spares}, "
            f"maximum={pool_config.maximum})"
        )
        return pool

    @staticmethod
    def create_connection_factory(
        store: Union[ValueStore, Mapping[str, Value], None] = None,
    ) -> MockConnectionFactory:
        """Create a standalone connection constructor over one store.

        Useful when a test wires its own pool, or needs connections without
        a pool at all: call the returned factory with a backend.
        """
        shared = store if isinstance(store, ValueStore) else ValueStore(store)
        logger.info("Creating standalone mock connection factory")
        return MockConnectionFactory(shared)
