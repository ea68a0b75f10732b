"""Sparse priority overrides for one session.

Only identifiers whose position was changed by a reorder are stored; every
other identifier keeps its default priority, which is the identifier itself.
Alongside the mapping the store keeps a list of ``(priority, identifier)``
tuples sorted on write, so reading the override order never re-sorts.
"""

from __future__ import annotations

import bisect
import math
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

Entry = Tuple[float, int]


class PriorityStore:
    """Identifier -> priority overrides plus the batch counter (epoch)."""

    def __init__(self) -> None:
        self._priorities: Dict[int, float] = {}
        self._index: List[Entry] = []  # (priority, ident), ascending
        self.epoch = 0

    def __len__(self) -> int:
        return len(self._priorities)

    def __contains__(self, ident: object) -> bool:
        return ident in self._priorities

    def get(self, ident: int) -> Optional[float]:
        return self._priorities.get(ident)

    def effective(self, ident: int) -> float:
        """Stored priority, or the identifier itself when never overridden."""
        return self._priorities.get(ident, float(ident))

    def set(self, ident: int, priority: float) -> None:
        priority = float(priority)
        if not math.isfinite(priority):
            raise ValueError(f"priority for {ident} must be finite, got {priority!r}")
        old = self._priorities.get(ident)
        if old is not None:
            if old == priority:
                return
            pos = bisect.bisect_left(self._index, (old, ident))
            del self._index[pos]
        bisect.insort(self._index, (priority, ident))
        self._priorities[ident] = priority

    def set_many(self, assignments: Iterable[Tuple[int, float]]) -> int:
        count = 0
        for ident, priority in assignments:
            self.set(ident, priority)
            count += 1
        return count

    def entries(self, start: Optional[float] = None) -> Iterator[Entry]:
        """Yield overrides in ``(priority, identifier)`` order.

        With ``start`` the walk begins at the first entry whose priority is
        ``>= start``. The store must not be written while a walk is open.
        """
        lo = 0
        if start is not None:
            lo = bisect.bisect_left(self._index, (start, -math.inf))
        for pos in range(lo, len(self._index)):
            yield self._index[pos]

    def min_priority(self) -> Optional[float]:
        return self._index[0][0] if self._index else None

    def snapshot(self) -> Dict[int, float]:
        return dict(self._priorities)

    def clear(self) -> None:
        self._priorities.clear()
        self._index.clear()
        self.epoch = 0


__all__ = ["PriorityStore", "Entry"]
