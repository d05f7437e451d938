"""
services/invalidation.py
------------------------
Change notifications for cached views.

After each successful mutation the profile service publishes an event
naming the view keys that are now stale. Whoever renders or caches those
views subscribes here; the core itself keeps no cache.
"""

from dataclasses import dataclass
from typing import Callable

from utils.logger import get_logger

logger = get_logger(__name__)

LISTING_KEY = "profiles"


def detail_key(profile_id: int) -> str:
    """Key of the detail view for one profile, e.g. 'profiles/42'."""
    return f"{LISTING_KEY}/{profile_id}"


@dataclass(frozen=True)
class InvalidationEvent:
    """Stale view keys plus the mutation that caused them ('create', 'update', 'delete')."""
    keys: tuple[str, ...]
    reason: str


Subscriber = Callable[[InvalidationEvent], None]


class InvalidationBus:
    """Synchronous publish/subscribe for InvalidationEvents."""

    def __init__(self):
        self._subscribers: list[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> None:
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: Subscriber) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def publish(self, event: InvalidationEvent) -> None:
        """
        Deliver an event to every subscriber in registration order.

        A failing subscriber is logged and skipped; the mutation that
        triggered the event has already been committed.
        """
        logger.debug(f"Invalidating {event.keys} after {event.reason}")
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception as e:
                logger.error(f"Invalidation subscriber {callback!r} failed: {e}")
