"""Per-caller in-memory state and the registry that owns it.

Each caller (identified by an opaque session reference issued by the
transport) gets one :class:`SessionState`. Nothing is shared between
sessions, so requests for different callers need no coordination; requests
for the same caller are serialized on ``SessionState.lock``. State lives for
the lifetime of the process unless reset or discarded.
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from itemlist.logic.priority_store import PriorityStore
from itemlist.logic.selection import SelectionSet

logger = logging.getLogger(__name__)


@dataclass
class SessionState:
    session_id: str
    store: PriorityStore
    selection: SelectionSet
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    @classmethod
    def create(cls, session_id: str, size: int) -> "SessionState":
        return cls(session_id=session_id, store=PriorityStore(), selection=SelectionSet(size))

    @property
    def epoch(self) -> int:
        return self.store.epoch

    def reset(self) -> None:
        """Drop every override and selection and rewind the batch counter."""
        with self.lock:
            self.store.clear()
            self.selection.clear()


def new_session_id() -> str:
    return uuid.uuid4().hex


class SessionRegistry:
    """Session reference -> :class:`SessionState`, created on first use."""

    def __init__(self, size: int) -> None:
        self.size = size
        self._sessions: Dict[str, SessionState] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def get(self, session_id: str) -> Optional[SessionState]:
        return self._sessions.get(session_id)

    def get_or_create(self, session_id: Optional[str]) -> Tuple[SessionState, bool]:
        """Return the state for ``session_id`` and whether it was just created.

        A missing reference gets a freshly generated one.
        """
        sid = session_id or new_session_id()
        state = self._sessions.get(sid)
        if state is not None:
            return state, False
        with self._lock:
            state = self._sessions.get(sid)
            if state is not None:
                return state, False
            state = SessionState.create(sid, self.size)
            self._sessions[sid] = state
        logger.info("session.created total=%s", len(self._sessions))
        return state, True

    def discard(self, session_id: str) -> bool:
        with self._lock:
            removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.info("session.discarded total=%s", len(self._sessions))
        return removed

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()


__all__ = ["SessionState", "SessionRegistry", "new_session_id"]
