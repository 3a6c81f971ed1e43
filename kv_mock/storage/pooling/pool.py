"""Connection pool driving constructor-built connections.

The pool keeps ``spares`` unclaimed connections open per known backend set,
never exceeds ``maximum`` open connections, and hands connections out with
``claim()``. Connections only need ``on(event, listener)`` for the
``"connect"``/``"end"`` signals and ``destroy()``.

Recovery settings are retained for callers to inspect; the mock never
times out, retries or backs off.
"""

import asyncio
import enum
import functools
import logging
from collections import deque
from typing import Any, Callable, Deque, Dict, List, Mapping, Optional, Set, Tuple

from kv_mock.config.models import DEFAULT_PORT, DEFAULT_SERVICE
from kv_mock.storage.pooling.resolver import Backend, Resolver
from kv_mock.utils.deferred import Callback, check_callback, deliver, schedule
from kv_mock.utils.error_handling import ArgumentError, PoolStoppedError

logger = logging.getLogger(__name__)


class PoolState(enum.Enum):
    """Pool states."""
    RUNNING = "running"
    STOPPED = "stopped"


def _as_count(value: Any, fallback: int, name: str) -> int:
    """Read a sizing option, falling back when it is not a usable count."""
    try:
        count = int(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring %s=%r, using %d", name, value, fallback)
        return fallback
    return max(count, 0)


class ConnectionPool:
    """Pool of connections built by ``constructor(backend)``.

    Attributes:
        domain: Domain the pool serves
        resolver: Resolver announcing backends
        constructor: Callable building a connection for a backend
        service: Service record name
        default_port: Port used for targets without one
        spares: Unclaimed connections to keep open
        maximum: Upper bound on open connections
        recovery: Recovery policies, kept but not acted on
        state: Current pool state
    """

    def __init__(
        self,
        domain: str,
        resolver: Resolver,
        constructor: Callable[[Backend], Any],
        service: str = DEFAULT_SERVICE,
        default_port: int = DEFAULT_PORT,
        spares: int = 4,
        maximum: int = 100,
        recovery: Optional[Mapping[str, Any]] = None,
    ):
        self.domain = domain
        self.resolver = resolver
        self.constructor = constructor
        self.service = service
        self.default_port = default_port
        self.spares = _as_count(spares, 4, "spares")
        self.maximum = max(_as_count(maximum, 100, "maximum"), 1)
        self.recovery = recovery if recovery is not None else {}
        self.state = PoolState.RUNNING

        self.backends: Dict[str, Backend] = {}
        self.connections: List[Any] = []
        self._connecting: Set[int] = set()
        self._idle: Deque[Any] = deque()
        self._claimed: Set[int] = set()
        self._waiters: Deque[Tuple[asyncio.Future, Optional[Callback]]] = deque()
        self._next_backend = 0
        self._grow_pending = False

        self._unsubscribe = [
            resolver.on("added", self._on_backend_added),
            resolver.on("removed", self._on_backend_removed),
        ]

    def claim(self, callback: Optional[Callback] = None) -> asyncio.Future:
        """Claim a connected connection.

        An idle connection is handed out on the next loop turn. Otherwise the
        claim waits, in FIFO order, for a new connection or a ``release()``.

        Args:
            callback: Optional ``callback(error, connection)``

        Returns:
            Future resolving to the claimed connection
        """
        check_callback("claim", callback)
        if self.state is PoolState.STOPPED:
            return schedule(callback, error=PoolStoppedError(f"Pool for {self.domain} is stopped"))

        if self._idle:
            connection = self._idle.popleft()
            self._claimed.add(id(connection))
            logger.debug("Claimed idle connection %r", connection)
            future = schedule(callback, result=connection)
            self._grow()
            return future

        future = asyncio.get_running_loop().create_future()
        self._waiters.append((future, callback))
        logger.debug("Claim queued (%d waiting)", len(self._waiters))
        self._grow()
        return future

    def release(self, connection: Any) -> None:
        """Return a claimed connection to the pool."""
        if id(connection) not in self._claimed:
            raise ArgumentError("release", f"{connection!r} is not claimed from this pool")
        self._claimed.discard(id(connection))
        if self.state is PoolState.STOPPED or connection not in self.connections:
            return

        waiter = self._next_waiter()
        if waiter is not None:
            self._claimed.add(id(connection))
            future, callback = waiter
            asyncio.get_running_loop().call_soon(deliver, future, callback, None, connection)
        else:
            self._idle.append(connection)

    def stop(self) -> None:
        """Stop the pool, destroying every connection and failing pending claims."""
        if self.state is PoolState.STOPPED:
            return
        self.state = PoolState.STOPPED
        for unsubscribe in self._unsubscribe:
            unsubscribe()
        self.resolver.stop()

        for connection in list(self.connections):
            connection.destroy()

        waiters, self._waiters = self._waiters, deque()
        for future, callback in waiters:
            error = PoolStoppedError(f"Pool for {self.domain} stopped before claim was served")
            asyncio.get_running_loop().call_soon(deliver, future, callback, error, None)
        logger.info("Stopped pool for %s", self.domain)

    def stats(self) -> Dict[str, int]:
        """Return connection counts by pool-side status."""
        return {
            "open": len(self.connections),
            "connecting": len(self._connecting),
            "idle": len(self._idle),
            "claimed": len(self._claimed),
            "waiting": len(self._waiters),
        }

    def _on_backend_added(self, key: str, backend: Backend) -> None:
        self.backends[key] = backend
        logger.debug("Pool for %s learned backend %s", self.domain, key)
        # Grow once per batch of announcements so connections spread over all of them
        if not self._grow_pending:
            self._grow_pending = True
            asyncio.get_running_loop().call_soon(self._grow_after_announcements)

    def _grow_after_announcements(self) -> None:
        self._grow_pending = False
        self._grow()

    def _on_backend_removed(self, key: str) -> None:
        self.backends.pop(key, None)

    def _grow(self) -> None:
        """Open connections until spares and queued claims are covered."""
        while self.state is PoolState.RUNNING and self.backends:
            if len(self.connections) >= self.maximum:
                return
            spare = len(self._idle) + len(self._connecting)
            if spare >= self.spares + len(self._waiters):
                return
            self._open()

    def _open(self) -> Any:
        keys = sorted(self.backends)
        backend = self.backends[keys[self._next_backend % len(keys)]]
        self._next_backend += 1

        connection = self.constructor(backend)
        self.connections.append(connection)
        self._connecting.add(id(connection))
        connection.on("connect", functools.partial(self._on_connect, connection))
        connection.on("end", functools.partial(self._on_end, connection))
        return connection

    def _on_connect(self, connection: Any) -> None:
        self._connecting.discard(id(connection))
        waiter = self._next_waiter()
        if waiter is None:
            self._idle.append(connection)
            return
        self._claimed.add(id(connection))
        future, callback = waiter
        deliver(future, callback, None, connection)
        self._grow()

    def _on_end(self, connection: Any) -> None:
        if connection in self.connections:
            self.connections.remove(connection)
        if connection in self._idle:
            self._idle.remove(connection)
        self._connecting.discard(id(connection))
        self._claimed.discard(id(connection))

        if self.state is PoolState.RUNNING:
            logger.warning("Connection %r left the pool for %s", connection, self.domain)
            self._grow()

    def _next_waiter(self) -> Optional[Tuple[asyncio.Future, Optional[Callback]]]:
        while self._waiters:
            future, callback = self._waiters.popleft()
            # Nobody is left to receive a cancelled claim without a callback
            if future.cancelled() and callback is None:
                continue
            return future, callback
        return None

    def __repr__(self) -> str:
        return f"ConnectionPool(domain={self.domain}, state={self.state.value}, {self.stats()})"
