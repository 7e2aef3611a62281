"""
In-process change feed for the notes table

Mutating routes publish a NoteChange after they commit. Subscribers register
a predicate over changes and a no-argument callback; they are expected to
refetch whatever they display rather than apply the change themselves.
"""
import logging
import threading
import uuid
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

INSERT = "INSERT"
UPDATE = "UPDATE"
DELETE = "DELETE"


@dataclass(frozen=True)
class NoteChange:
    kind: str
    note_id: str
    replying_to_id: Optional[str] = None


Predicate = Callable[[NoteChange], bool]


def replies_to(parent_id: str) -> Predicate:
    """Predicate matching changes to direct replies of parent_id"""
    return lambda change: change.replying_to_id == parent_id


def top_level(change: NoteChange) -> bool:
    return change.replying_to_id is None


class Subscription:
    """Handle returned by ChangeFeed.subscribe"""

    def __init__(self, feed: "ChangeFeed", key: str):
        self._feed = feed
        self.key = key

    def unsubscribe(self) -> None:
        # Safe to call any number of times
        self._feed.remove(self.key)


class ChangeFeed:
    """
    Fan-out of note changes to independent subscribers

    Publishing happens from FastAPI worker threads, so the subscriber table
    is guarded by a lock. Callbacks run outside the lock.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: Dict[str, Tuple[Optional[Predicate], Callable[[], None]]] = {}

    def subscribe(self, predicate: Optional[Predicate], on_change: Callable[[], None]) -> Subscription:
        key = str(uuid.uuid4())
        with self._lock:
            self._subscribers[key] = (predicate, on_change)
        return Subscription(self, key)

    def remove(self, key: str) -> None:
        with self._lock:
            self._subscribers.pop(key, None)

    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def publish(self, change: NoteChange) -> int:
        """
        Notify every subscriber whose predicate accepts the change

        Returns:
            Number of callbacks invoked
        """
        with self._lock:
            targets = list(self._subscribers.values())

        notified = 0
        for predicate, on_change in targets:
            if predicate is not None and not predicate(change):
                continue
            try:
                on_change()
            except Exception:
                logger.exception("Change feed subscriber failed for %s %s", change.kind, change.note_id)
                continue
            notified += 1
        return notified
