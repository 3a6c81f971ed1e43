"""Unit tests for the mock resolvers."""

import unittest
from unittest.mock import MagicMock

import pytest

from kv_mock.storage.pooling.resolver import (
    Backend,
    DomainResolver,
    ResolverState,
    StaticIpResolver,
    parse_target,
    resolver_for_ip_or_domain,
)


class TestParseTarget(unittest.TestCase):
    """Test splitting of resolver targets."""

    def test_ipv4(self):
        self.assertEqual(parse_target("127.0.0.1:6379"), ("127.0.0.1", 6379, True))
        self.assertEqual(parse_target("10.0.0.1"), ("10.0.0.1", None, True))

    def test_ipv6(self):
        self.assertEqual(parse_target("::1"), ("::1", None, True))
        self.assertEqual(parse_target("[::1]:7000"), ("::1", 7000, True))

    def test_names(self):
        self.assertEqual(parse_target("redis.example.com"), ("redis.example.com", None, False))
        self.assertEqual(parse_target("localhost:6380"), ("localhost", 6380, False))

    def test_unparseable_port_kept_as_name(self):
        self.assertEqual(parse_target("host:port"), ("host:port", None, False))


class TestResolverFactory(unittest.TestCase):
    """Test resolver selection."""

    def test_ip_target(self):
        resolver = resolver_for_ip_or_domain("127.0.0.1:6379")
        self.assertIsInstance(resolver, StaticIpResolver)
        self.assertEqual(resolver.state, ResolverState.STOPPED)

    def test_domain_target(self):
        resolver = resolver_for_ip_or_domain("redis.local", default_port=7000, service="_kv._tcp")
        self.assertIsInstance(resolver, DomainResolver)
        self.assertEqual(resolver.domain, "redis.local")
        self.assertEqual(resolver.default_port, 7000)
        self.assertEqual(resolver.service, "_kv._tcp")


class TestResolverLifecycle:
    @pytest.mark.asyncio
    async def test_start_announces_on_next_turn(self, drain):
        resolver = resolver_for_ip_or_domain("127.0.0.1:6379")
        added = MagicMock()
        resolver.on("added", added)

        resolver.start()
        assert resolver.state is ResolverState.RUNNING
        added.assert_not_called()

        await drain()
        backend = Backend(key="127.0.0.1:6379", address="127.0.0.1", port=6379)
        added.assert_called_once_with("127.0.0.1:6379", backend)
        assert resolver.list() == {"127.0.0.1:6379": backend}

    @pytest.mark.asyncio
    async def test_default_port_for_bare_address(self, drain):
        resolver = resolver_for_ip_or_domain("10.1.2.3", default_port=6390)
        resolver.start()
        await drain()
        assert list(resolver.list()) == ["10.1.2.3:6390"]

    @pytest.mark.asyncio
    async def test_start_twice_announces_once(self, drain):
        resolver = StaticIpResolver([("10.0.0.1", 6379), ("10.0.0.2", 6379)])
        added = MagicMock()
        resolver.on("added", added)

        resolver.start()
        resolver.start()
        await drain()
        assert added.call_count == 2

    @pytest.mark.asyncio
    async def test_stop_removes_backends(self, drain):
        resolver = DomainResolver("redis.local")
        removed = MagicMock()
        resolver.on("removed", removed)

        resolver.start()
        await drain()
        resolver.stop()

        removed.assert_called_once_with("redis.local:6379")
        assert resolver.state is ResolverState.STOPPED
        assert resolver.list() == {}

    @pytest.mark.asyncio
    async def test_stop_before_announcement(self, drain):
        resolver = resolver_for_ip_or_domain("127.0.0.1")
        added = MagicMock()
        resolver.on("added", added)

        resolver.start()
        resolver.stop()
        await drain()
        added.assert_not_called()
