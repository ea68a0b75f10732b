"""Priority assignment for user reorders.

Two entry points write into a session's :class:`PriorityStore`:

- ``apply_batch`` moves an explicit list of identifiers, in the given order,
  to the very top of the collection as one contiguous block. Each batch lands
  above every earlier one.
- ``insert_between`` places a single identifier between two neighbors using
  midpoint (fractional) insertion, or next to one neighbor when only one is
  known.

Repeated midpoint insertion between the same pair halves the gap each time.
Once the gap drops below ``rebalance_min_gap`` a short run of the order
starting at the lower neighbor is respaced evenly before the midpoint is
taken, so the precision loss never turns into an accidental tie.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from itemlist.logic.order_merge import iter_order
from itemlist.logic.priority_store import PriorityStore
from itemlist.logic.validation import InvalidIdentifierError, coerce_identifier, valid_identifiers

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReorderSettings:
    batch_step: float = 1e-6
    insert_epsilon: float = 1e-6
    rebalance_min_gap: float = 1e-9
    rebalance_max_window: int = 1024


def batch_span(count: int, step: float) -> int:
    """Units of priority space a batch of ``count`` entries occupies.

    One unit holds ``1/step`` entries; longer batches reserve more so two
    batches can never interleave.
    """
    return max(1, math.ceil(count * step))


class ReorderPlanner:
    def __init__(self, size: int, settings: Optional[ReorderSettings] = None) -> None:
        self.size = size
        self.settings = settings or ReorderSettings()

    # Batch mode -----------------------------------------------------------

    def apply_batch(self, store: PriorityStore, ordered_ids: Sequence[Any]) -> int:
        """Move ``ordered_ids`` to the top as a block; return how many applied.

        Invalid identifiers and repeats are dropped without taking a slot.
        The epoch always moves down, even when nothing valid was sent.
        """
        idents = valid_identifiers(ordered_ids, self.size, unique=True)
        step = self.settings.batch_step

        ceiling = store.epoch
        lowest = store.min_priority()
        if lowest is not None and lowest < ceiling:
            # A single insertion can sit below the last epoch
            ceiling = math.floor(lowest)
        store.epoch = ceiling - batch_span(len(idents), step)
        base = store.epoch

        assignments: List[Tuple[int, float]] = [
            (ident, base + index * step) for index, ident in enumerate(idents)
        ]
        store.set_many(assignments)
        logger.info(
            "reorder.batch epoch=%s requested=%s applied=%s overrides=%s",
            base,
            len(ordered_ids),
            len(assignments),
            len(store),
        )
        return len(assignments)

    # Single insertion -----------------------------------------------------

    def insert_between(
        self,
        store: PriorityStore,
        ident: Any,
        before_id: Any = None,
        after_id: Any = None,
    ) -> float:
        """Place ``ident`` between ``before_id`` and ``after_id``.

        ``before_id`` is the element that should end up directly above,
        ``after_id`` the one directly below. Neighbors that are missing or
        invalid are ignored; with neither, the current priority is kept.
        """
        target = coerce_identifier(ident, self.size)
        if target is None:
            raise InvalidIdentifierError("bad id", field="id")
        before = coerce_identifier(before_id, self.size) if before_id is not None else None
        after = coerce_identifier(after_id, self.size) if after_id is not None else None

        eps = self.settings.insert_epsilon
        if before is not None and after is not None:
            p_before, p_after = store.effective(before), store.effective(after)
            if before != after and self._crowded(p_before, p_after):
                self.rebalance(store, min(p_before, p_after), max(p_before, p_after))
                p_before, p_after = store.effective(before), store.effective(after)
            new_priority = (p_before + p_after) / 2
        elif after is not None:
            new_priority = store.effective(after) - eps
        elif before is not None:
            new_priority = store.effective(before) + eps
        else:
            new_priority = store.effective(target)

        store.set(target, new_priority)
        logger.info(
            "reorder.single id=%s before=%s after=%s priority=%r",
            target,
            before,
            after,
            new_priority,
        )
        return new_priority

    def _crowded(self, p_low: float, p_high: float) -> bool:
        min_gap = self.settings.rebalance_min_gap
        if min_gap <= 0:
            return False
        mid = (p_low + p_high) / 2
        return abs(p_high - p_low) < min_gap or mid == p_low or mid == p_high

    # Rebalance ------------------------------------------------------------

    def rebalance(self, store: PriorityStore, low: float, high: float) -> int:
        """Respace the run of the order starting at priority ``low``.

        The run covers every element up to ``high`` and then grows until the
        next element leaves at least ``target`` of room per element (or the
        window limit is hit). Elements are reassigned evenly spaced
        priorities between the first element's priority and that next
        element, keeping their relative order. Returns the run length.
        """
        target = max(self.settings.insert_epsilon, self.settings.rebalance_min_gap * 2)
        max_window = self.settings.rebalance_max_window

        window: List[int] = []
        anchor = low
        upper: Optional[float] = None
        for ident, priority in iter_order(store, self.size, start=low):
            if not window:
                anchor = priority
            elif priority > high:
                room = (priority - anchor) / len(window)
                if room >= target or len(window) >= max_window:
                    upper = priority
                    break
            window.append(ident)

        if len(window) < 2:
            return 0
        if upper is None:
            # Ran off the end of the collection; nothing above to collide with
            upper = anchor + len(window) * target

        spacing = (upper - anchor) / len(window)
        store.set_many((ident, anchor + index * spacing) for index, ident in enumerate(window))
        logger.info(
            "reorder.rebalance low=%r high=%r window=%s spacing=%r",
            low,
            high,
            len(window),
            spacing,
        )
        return len(window)


__all__ = ["ReorderPlanner", "ReorderSettings", "batch_span"]
