"""Backend resolvers for the mock connection pool.

A resolver turns a target into backends and announces them to its
listeners with ``"added"`` events. Nothing here touches the network:
IP targets resolve to themselves, and names resolve to a single backend
carrying the name as its address.
"""

import asyncio
import enum
import ipaddress
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from kv_mock.config.models import DEFAULT_PORT, DEFAULT_SERVICE
from kv_mock.utils.events import Observers

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Backend:
    """A host the pool may open connections to."""

    key: str
    address: str
    port: int


class ResolverState(enum.Enum):
    """Resolver states."""
    STOPPED = "stopped"
    RUNNING = "running"


class Resolver:
    """Base resolver announcing a fixed set of backends once started.

    Attributes:
        state: Current resolver state
    """

    def __init__(self, backends: List[Backend]):
        self._backends: Dict[str, Backend] = {b.key: b for b in backends}
        self._announced: Dict[str, Backend] = {}
        self._observers = Observers("added", "removed")
        self.state = ResolverState.STOPPED

    def on(self, event: str, listener: Callable[..., Any]) -> Callable[[], None]:
        """Subscribe to ``"added"`` or ``"removed"`` backend events."""
        return self._observers.subscribe(event, listener)

    def start(self) -> None:
        """Start resolving; backends are announced on the next loop turn."""
        if self.state is ResolverState.RUNNING:
            return
        self.state = ResolverState.RUNNING
        logger.debug("Resolver %s started", self)
        asyncio.get_running_loop().call_soon(self._announce)

    def stop(self) -> None:
        """Stop resolving and announce every known backend as removed."""
        if self.state is ResolverState.STOPPED:
            return
        self.state = ResolverState.STOPPED
        announced, self._announced = self._announced, {}
        for key in announced:
            self._observers.notify("removed", key)
        logger.debug("Resolver %s stopped", self)

    def list(self) -> Dict[str, Backend]:
        """Return the backends announced so far, keyed by backend key."""
        return dict(self._announced)

    def _announce(self) -> None:
        # Stopped before the deferred announcement ran
        if self.state is not ResolverState.RUNNING:
            return
        for key, backend in self._backends.items():
            if key in self._announced:
                continue
            self._announced[key] = backend
            logger.debug("Resolver announcing backend %s", key)
            self._observers.notify("added", key, backend)


class StaticIpResolver(Resolver):
    """Resolver for literal IP addresses."""

    def __init__(self, backends: List[Tuple[str, int]]):
        super().__init__([_backend(address, port) for address, port in backends])

    def __repr__(self) -> str:
        return f"StaticIpResolver({sorted(self._backends)})"


class DomainResolver(Resolver):
    """Resolver for a service discovery name.

    The mock performs no lookup; the name becomes the address of a single
    backend on ``default_port``.

    Attributes:
        domain: Name being resolved
        service: Service record the real resolver would query
        default_port: Port used for the synthesised backend
    """

    def __init__(self, domain: str, service: str = DEFAULT_SERVICE, default_port: int = DEFAULT_PORT):
        self.domain = domain
        self.service = service
        self.default_port = default_port
        super().__init__([_backend(domain, default_port)])

    def __repr__(self) -> str:
        return f"DomainResolver({self.service}.{self.domain}:{self.default_port})"


def _backend(address: str, port: int) -> Backend:
    return Backend(key=f"{address}:{port}", address=address, port=port)


def parse_target(target: str) -> Tuple[str, Optional[int], bool]:
    """Split a resolver target into host, port and whether host is an IP.

    Accepts ``host``, ``host:port``, bare IPv6 addresses and ``[v6]:port``.

    Returns:
        Tuple of (host, port or None, is_ip)
    """
    host, port_text = target, ""
    if target.startswith("["):
        host, _, rest = target[1:].partition("]")
        port_text = rest[1:] if rest.startswith(":") else ""
    elif target.count(":") == 1:
        host, port_text = target.split(":")

    # A target the mock cannot parse is kept whole as a name
    port = None
    if port_text:
        if port_text.isdigit():
            port = int(port_text)
        else:
            host = target

    try:
        ipaddress.ip_address(host)
        is_ip = True
    except ValueError:
        is_ip = False
    return host, port, is_ip


def resolver_for_ip_or_domain(
    target: str,
    default_port: int = DEFAULT_PORT,
    service: str = DEFAULT_SERVICE,
) -> Resolver:
    """Create a resolver for a static address or a service name.

    Args:
        target: ``"127.0.0.1:6379"``, ``"[::1]"``, ``"redis.example.com"``...
        default_port: Port used when the target names none
        service: Service record name for name targets

    Returns:
        A ``StaticIpResolver`` for IP targets, else a ``DomainResolver``
    """
    host, port, is_ip = parse_target(target)
    if port is None:
        port = default_port
    if is_ip:
        return StaticIpResolver([(host, port)])
    return DomainResolver(host, service=service, default_port=port)
