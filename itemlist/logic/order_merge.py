"""Lazy merge of the override index with the natural identifier range.

The collection order is ascending ``(priority, identifier)`` over every
identifier in ``[1, size]``. Identifiers without an override sort at their
own value, so the natural stream ``1..size`` is already ordered; the only
explicit structure is the store's sorted override index. Walking both in
step yields the full order while touching only what the page window needs.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional, Tuple

from itemlist.logic.priority_store import PriorityStore
from itemlist.logic.selection import SelectionSet
from itemlist.logic.validation import normalize_limit, normalize_offset, normalize_query

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageItem:
    id: int
    selected: bool


@dataclass(frozen=True)
class Page:
    items: List[PageItem] = field(default_factory=list)
    has_more: bool = False
    next_offset: int = 0

    @property
    def ids(self) -> List[int]:
        return [item.id for item in self.items]


def iter_order(store: PriorityStore, size: int, start: Optional[float] = None) -> Iterator[Tuple[int, float]]:
    """Yield ``(identifier, priority)`` pairs in collection order.

    ``start`` skips straight to the first element whose priority is
    ``>= start``; without it the walk covers the whole collection.
    """
    overrides = store.entries(start)
    pending = next(overrides, None)
    natural = 1 if start is None else max(1, math.ceil(start))
    while pending is not None or natural <= size:
        if pending is not None and (natural > size or pending <= (natural, natural)):
            priority, ident = pending
            yield ident, priority
            pending = next(overrides, None)
            continue
        if natural in store:
            # Emitted at its override position
            natural += 1
            continue
        yield natural, float(natural)
        natural += 1


def matches(ident: int, query: Optional[str]) -> bool:
    return not query or query in str(ident)


def page(
    store: PriorityStore,
    selection: SelectionSet,
    offset: Any = 0,
    limit: Any = None,
    query: Any = None,
    *,
    size: int,
    default_limit: int = 20,
    max_limit: int = 100,
) -> Page:
    """Return one offset page of the filtered collection order.

    ``offset``, ``limit`` and ``query`` may be raw transport values; they are
    normalized here (offset floored at 0, limit clamped, query trimmed).
    """
    offset = normalize_offset(offset)
    limit = normalize_limit(limit, default=default_limit, maximum=max_limit)
    query = normalize_query(query)

    out: List[int] = []
    skipped = 0
    for ident, _priority in iter_order(store, size):
        if not matches(ident, query):
            continue
        if skipped < offset:
            skipped += 1
            continue
        out.append(ident)
        if len(out) > limit:
            break

    has_more = len(out) > limit
    if has_more:
        out.pop()
    logger.debug(
        "page offset=%s limit=%s query=%r returned=%s has_more=%s overrides=%s",
        offset,
        limit,
        query,
        len(out),
        has_more,
        len(store),
    )
    return Page(
        items=[PageItem(id=ident, selected=selection.contains(ident)) for ident in out],
        has_more=has_more,
        next_offset=offset + len(out),
    )


__all__ = ["Page", "PageItem", "iter_order", "matches", "page"]
