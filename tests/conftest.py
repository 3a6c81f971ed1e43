"""Pytest configuration for kv_mock tests.

This module contains shared fixtures and setup for all tests in the kv_mock package.
"""

import asyncio
import logging

import pytest


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "lifecycle: mark a test as exercising connection lifecycle signals"
    )


@pytest.fixture(autouse=True)
def disable_logging():
    """Disable logging during tests to keep the test output clean."""
    logging.disable(logging.CRITICAL)
    yield
    logging.disable(logging.NOTSET)


@pytest.fixture
def drain():
    """Return a coroutine that lets pending loop callbacks run.

    Each turn yields to the event loop once, so callbacks scheduled with
    ``call_soon`` during the previous turn get to run.
    """
    async def _drain(turns: int = 5):
        for _ in range(turns):
            await asyncio.sleep(0)

    return _drain


@pytest.fixture
def seed_data():
    """Sample store contents covering every value type."""
    return {
        "foo": "bar",
        "foo:hash": {"name": "Alice", "role": "admin"},
        "foo:list": ["a", "b", "c", "d"],
        "other": "value",
    }
