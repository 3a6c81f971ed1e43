"""Resolver and connection pool for mock connections.

This package provides the pooling side of the mock: resolvers that announce
backends without any network lookup, and a ``ConnectionPool`` that builds
connections through a constructor and hands them out with ``claim()``.
"""

from kv_mock.storage.pooling.pool import ConnectionPool, PoolState
from kv_mock.storage.pooling.resolver import (
    Backend,
    DomainResolver,
    Resolver,
    ResolverState,
    StaticIpResolver,
    resolver_for_ip_or_domain,
)

__all__ = [
    "Backend",
    "ConnectionPool",
    "DomainResolver",
    "PoolState",
    "Resolver",
    "ResolverState",
    "StaticIpResolver",
    "resolver_for_ip_or_domain",
]
