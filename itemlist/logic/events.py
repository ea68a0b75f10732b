"""Domain event constants and publisher.

Defines event type constants and a simple publish() callable used by the
reorder, selection and reset flows.
"""

from __future__ import annotations

from collections import deque
from typing import Any, Deque, Dict, List
import logging

logger = logging.getLogger(__name__)

ITEMS_REORDERED = "items.reordered"
ITEM_MOVED = "item.moved"
SELECTION_CHANGED = "selection.changed"
SESSION_RESET = "session.reset"

# Bounded so a long-running process does not accumulate events
EVENT_BUFFER_SIZE = 1000
EVENT_BUFFER: Deque[Dict[str, Any]] = deque(maxlen=EVENT_BUFFER_SIZE)


def publish(event_type: str, payload: Dict[str, Any]) -> None:
    """Publish a domain event.

    Events are logged for observability and buffered in-memory so tests can
    observe them.
    """
    logger.info("event_publish type=%s payload=%s", event_type, payload)
    EVENT_BUFFER.append({"type": event_type, "payload": payload})


def get_buffered_events(clear: bool = True) -> List[Dict[str, Any]]:
    """Return buffered domain events; optionally clear the buffer."""
    events = list(EVENT_BUFFER)
    if clear:
        EVENT_BUFFER.clear()
    return events


__all__ = [
    "ITEMS_REORDERED",
    "ITEM_MOVED",
    "SELECTION_CHANGED",
    "SESSION_RESET",
    "publish",
    "get_buffered_events",
    "EVENT_BUFFER",
]
