"""Input coercion for element identifiers and paging parameters.

Route handlers pass raw JSON/query values straight through; everything that
decides whether a value is a usable identifier lives here so the ordering
logic only ever sees integers in ``[1, N]``.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, List, Optional


class ItemListError(ValueError):
    """Base class for request errors raised by the ordering logic."""

    code = "ITEMLIST_ERROR"


class MalformedInputError(ItemListError):
    """The request shape is unusable; raised before any state is touched."""

    code = "MALFORMED_INPUT"

    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class InvalidIdentifierError(MalformedInputError):
    code = "INVALID_IDENTIFIER"


def _to_number(raw: Any) -> Optional[float]:
    # bool is an int subclass; a checkbox flag is never an identifier
    if isinstance(raw, bool) or raw is None:
        return None
    if isinstance(raw, int):
        try:
            return float(raw)
        except OverflowError:
            return math.copysign(math.inf, raw)
    if isinstance(raw, float):
        return raw
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        try:
            return float(text)
        except ValueError:
            return None
    return None


def coerce_identifier(raw: Any, size: int) -> Optional[int]:
    """Return ``raw`` as an identifier in ``[1, size]`` or None.

    Accepts ints, integral floats and numeric strings. Anything else,
    including non-finite and fractional numbers, is rejected.
    """
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw if 1 <= raw <= size else None
    num = _to_number(raw)
    if num is None or not math.isfinite(num) or not num.is_integer():
        return None
    value = int(num)
    if value < 1 or value > size:
        return None
    return value


def require_list(value: Any, field: str) -> list:
    """Reject anything but a JSON array for ``field``."""
    if not isinstance(value, list):
        raise MalformedInputError(f"{field} must be an array", field=field)
    return value


def valid_identifiers(raw_ids: Iterable[Any], size: int, *, unique: bool = False) -> List[int]:
    """Filter ``raw_ids`` down to usable identifiers, preserving order.

    With ``unique`` only the first occurrence of each identifier is kept.
    """
    out: List[int] = []
    seen: set[int] = set()
    for raw in raw_ids:
        ident = coerce_identifier(raw, size)
        if ident is None:
            continue
        if unique:
            if ident in seen:
                continue
            seen.add(ident)
        out.append(ident)
    return out


def _truncate(raw: Any) -> int:
    num = _to_number(raw)
    if num is None or not math.isfinite(num):
        return 0
    return int(num)


def normalize_offset(raw: Any) -> int:
    """Offsets are truncated to an integer and floored at zero."""
    return max(0, _truncate(raw))


def normalize_limit(raw: Any, default: int = 20, maximum: int = 100) -> int:
    """Clamp ``raw`` into ``[1, maximum]``; zero or garbage means ``default``."""
    value = _truncate(raw)
    if value == 0:
        value = default
    return max(1, min(maximum, value))


def normalize_query(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    text = str(raw).strip()
    return text or None


__all__ = [
    "ItemListError",
    "MalformedInputError",
    "InvalidIdentifierError",
    "coerce_identifier",
    "require_list",
    "valid_identifiers",
    "normalize_offset",
    "normalize_limit",
    "normalize_query",
]
