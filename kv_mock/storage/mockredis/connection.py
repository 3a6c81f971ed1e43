"""Mock connections handed out by a connection pool."""

import asyncio
import enum
import logging
import uuid
from typing import Any, Callable, Optional

from kv_mock.storage.mockredis.core import MockRedis
from kv_mock.storage.mockredis.store import ValueStore
from kv_mock.utils.events import Observers

logger = logging.getLogger(__name__)


class ConnectionState(enum.Enum):
    """Connection lifecycle states."""
    CONNECTING = "connecting"  # Created, connect signal not yet delivered
    CONNECTED = "connected"    # Ready for commands
    ENDED = "ended"            # Destroyed; terminal


class MockConnection(MockRedis):
    """A MockRedis bound to a shared store, with a connection lifecycle.

    The connection moves ``CONNECTING -> CONNECTED -> ENDED`` and never goes
    back. ``connect`` is signalled on a later event loop turn, so listeners
    attached right after construction still see it. ``destroy()`` signals
    ``end`` synchronously.

    Attributes:
        store: Store shared with every other connection of the same pool
        backend: The backend this connection was created for, if any
        connection_id: Unique identifier for log messages
        state: Current lifecycle state
    """

    def __init__(self, store: ValueStore, backend: Any = None):
        """Initialize the connection and schedule its connect signal.

        Must be called while an event loop is running.

        Args:
            store: Shared value store
            backend: Backend the pool asked for; kept for reference only
        """
        super().__init__(store)
        self.backend = backend
        self.connection_id = uuid.uuid4().hex[:8]
        self.state = ConnectionState.CONNECTING
        self._observers = Observers("connect", "end")

        asyncio.get_running_loop().call_soon(self._mark_connected)
        logger.debug("Connection %s created for backend %s", self.connection_id, backend)

    def on(self, event: str, listener: Callable[..., Any]) -> Callable[[], None]:
        """Subscribe to ``"connect"`` or ``"end"``.

        Returns:
            A callable that cancels the subscription
        """
        return self._observers.subscribe(event, listener)

    @property
    def connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED

    def destroy(self) -> None:
        """End the connection, notifying ``end`` listeners immediately."""
        if self.state is ConnectionState.ENDED:
            return
        self.state = ConnectionState.ENDED
        logger.debug("Connection %s ended", self.connection_id)
        self._observers.notify("end")

    def ref(self) -> None:
        """No-op; a mock connection holds no OS resource."""

    def unref(self) -> None:
        """No-op; a mock connection holds no OS resource."""

    def _mark_connected(self) -> None:
        # Destroyed before the deferred connect ran
        if self.state is not ConnectionState.CONNECTING:
            return
        self.state = ConnectionState.CONNECTED
        logger.debug("Connection %s connected", self.connection_id)
        self._observers.notify("connect")

    def __repr__(self) -> str:
        return f"MockConnection(id={self.connection_id}, state={self.state.value})"


class MockConnectionFactory:
    """Connection constructor handed to a ``ConnectionPool``.

    Every connection it builds shares the factory's single ``ValueStore``.

    Attributes:
        store: The shared store
        created: Number of connections built so far
    """

    def __init__(self, store: Optional[ValueStore] = None):
        self.store = store if store is not None else ValueStore()
        self.created = 0

    def __call__(self, backend: Any = None) -> MockConnection:
        self.created += 1
        return MockConnection(self.store, backend)
