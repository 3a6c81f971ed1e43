"""Listener registry used for lifecycle and resolver notifications."""

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


class Observers:
    """Explicit subscription list keyed by event name.

    Objects that publish lifecycle signals own an ``Observers`` instance
    instead of inheriting from an emitter base class.

    Attributes:
        events: Event names that may be subscribed to and notified
    """

    def __init__(self, *events: str):
        """Initialize the registry.

        Args:
            *events: Event names accepted by ``subscribe`` and ``notify``
        """
        self.events = frozenset(events)
        self._listeners: Dict[str, List[Callable[..., Any]]] = {
            event: [] for event in events
        }

    def subscribe(self, event: str, listener: Callable[..., Any]) -> Callable[[], None]:
        """Register ``listener`` for ``event``.

        Returns:
            A callable that removes the subscription again
        """
        self._check_event(event)
        if not callable(listener):
            raise TypeError("listener must be callable")
        self._listeners[event].append(listener)

        def unsubscribe() -> None:
            try:
                self._listeners[event].remove(listener)
            except ValueError:
                pass

        return unsubscribe

    def notify(self, event: str, *args: Any) -> None:
        """Call every listener of ``event`` in subscription order."""
        self._check_event(event)
        # Snapshot so listeners may unsubscribe while being notified
        for listener in list(self._listeners[event]):
            listener(*args)

    def count(self, event: str) -> int:
        self._check_event(event)
        return len(self._listeners[event])

    def _check_event(self, event: str) -> None:
        if event not in self.events:
            raise ValueError(
                f"Unknown event '{event}', expected one of {sorted(self.events)}"
            )
