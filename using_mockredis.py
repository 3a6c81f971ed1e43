"""Example demonstrating a pool of MockRedis connections.

This example shows how to create a connection pool whose connections share
one in-memory store, so code written against a pooled Redis client can run
locally without a Redis server.
"""

import asyncio
import logging

from kv_mock import MockPoolFactory, TypeMismatchError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def store_session(connection, session_id: str, user: str) -> None:
    """Write a session hash and append it to the recent sessions list."""
    await connection.hset(f"session:{session_id}", "user", user)
    await connection.hset(f"session:{session_id}", "state", "active")
    await connection.lpush("sessions:recent", session_id)
    # Keep the five most recent sessions
    await connection.ltrim("sessions:recent", 0, 5)


async def main() -> None:
    pool = MockPoolFactory.create_pool(
        {"domain": "cache.local", "spares": 2},
        store={"greeting": "hello"},
    )

    writer = await pool.claim()
    reader = await pool.claim()
    logger.info("Claimed two connections, pool stats: %s", pool.stats())

    for i, user in enumerate(["alice", "bob", "carol"]):
        await store_session(writer, f"s{i}", user)

    # Writes through one connection are visible through every other
    recent = await reader.lrange("sessions:recent", 0, -1)
    logger.info("Recent sessions: %s", recent)
    for session_id in recent:
        user = await reader.hget(f"session:{session_id}", "user")
        logger.info("Session %s belongs to %s", session_id, user)

    logger.info("Session keys: %s", await reader.keys("session:*"))

    # Callback style works alongside awaiting the returned future
    done = asyncio.get_running_loop().create_future()

    def on_greeting(error, result):
        logger.info("Greeting via callback: %s", result)
        done.set_result(result)

    reader.get("greeting", callback=on_greeting)
    await done

    try:
        await reader.get("sessions:recent")
    except TypeMismatchError as e:
        logger.info("Reading a list as a string fails: %s", e)

    pool.release(writer)
    pool.release(reader)
    pool.stop()


if __name__ == "__main__":
    asyncio.run(main())
