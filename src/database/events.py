"""
In-memory event log used when ``EVENT_STORE=memory``.

Keeps only the last ``capacity`` connection events in a ring buffer. Nothing
is written to disk, so the feed starts empty on every restart.
"""

from __future__ import annotations

import json
import logging
import threading
from collections import deque
from typing import Any, Deque, Dict, List

from src.integrations.contracts.interfaces import ConnectionEvent, EventStore

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 10


def emit_to_console(event: Dict[str, Any]) -> None:
    """Live sink shared by every store: one INFO line per recorded event."""
    logger.info("event %s", json.dumps(event, default=str))


class InMemoryEventStore(EventStore):
    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._events: Deque[Dict[str, Any]] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    @property
    def kind(self) -> str:
        return "memory"

    def record(self, event: ConnectionEvent) -> None:
        data = event.to_dict()
        with self._lock:
            # deque(maxlen=...) drops the oldest entry on overflow.
            self._events.append(data)
        emit_to_console(data)

    def recent(self, limit: int) -> List[Dict[str, Any]]:
        if limit <= 0:
            return []
        with self._lock:
            snapshot = list(self._events)
        snapshot.reverse()
        return [dict(item) for item in snapshot[:limit]]
