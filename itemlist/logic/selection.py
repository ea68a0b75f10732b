"""Selected-identifier set for one session."""

from __future__ import annotations

from typing import Any, Iterable, Set, Tuple

from itemlist.logic.validation import coerce_identifier


class SelectionSet:
    def __init__(self, size: int) -> None:
        self.size = size
        self._ids: Set[int] = set()

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, ident: object) -> bool:
        return ident in self._ids

    def contains(self, ident: int) -> bool:
        return ident in self._ids

    def set_many(self, ids: Iterable[Any], want: bool) -> Tuple[int, int]:
        """Select or deselect ``ids``; return ``(changed, total_selected)``.

        Identifiers already in the wanted state and invalid identifiers do
        not count as changes.
        """
        changed = 0
        for raw in ids:
            ident = coerce_identifier(raw, self.size)
            if ident is None:
                continue
            if want:
                if ident not in self._ids:
                    self._ids.add(ident)
                    changed += 1
            elif ident in self._ids:
                self._ids.discard(ident)
                changed += 1
        return changed, len(self._ids)

    def clear(self) -> None:
        self._ids.clear()


__all__ = ["SelectionSet"]
