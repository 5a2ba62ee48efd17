"""
Change notification fan-out for sheet observers.

Notifications carry no payload: a listener that needs the new state
re-reads it from the manager.
"""

from typing import Callable, Dict

from loguru import logger

Listener = Callable[[], None]
Unsubscribe = Callable[[], None]


class SubscriptionHub:
    """Registry of change listeners.

    Listeners are keyed by identity, so subscribing the same callable twice
    keeps a single registration. notify() calls listeners synchronously in
    registration order.
    """

    def __init__(self) -> None:
        # dict preserves registration order
        self._listeners: Dict[Listener, None] = {}

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """Register a listener and return a handle that removes it."""
        self._listeners.setdefault(listener, None)

        def unsubscribe() -> None:
            self._listeners.pop(listener, None)

        return unsubscribe

    def notify(self) -> None:
        """Invoke every registered listener once."""
        # Snapshot so listeners may unsubscribe while being notified
        for listener in list(self._listeners):
            try:
                listener()
            except Exception:
                logger.exception(f"Sheet listener {listener!r} failed")

    def __len__(self) -> int:
        return len(self._listeners)
