"""Centralised construction of problem+json payloads.

Route and handler modules build error bodies through these helpers instead
of embedding titles, codes and statuses inline.
"""

from __future__ import annotations

from typing import Dict, Optional
import logging

from itemlist.logic.validation import ItemListError


logger = logging.getLogger(__name__)


def _problem(title: str, status: int, detail: str, code: str, **extra: object) -> Dict[str, object]:
    problem: Dict[str, object] = {
        "title": title,
        "status": status,
        "detail": detail,
        "code": code,
    }
    problem.update({k: v for k, v in extra.items() if v is not None})
    logger.info("error_handler.handle code=%s status=%s", code, status)
    return problem


def problem_from_error(exc: ItemListError) -> Dict[str, object]:
    """Return a 400 problem describing a rejected request."""
    return _problem(
        "Bad Request",
        400,
        str(exc),
        exc.code,
        field=getattr(exc, "field", None),
    )


def problem_invalid_request(errors: Optional[list] = None) -> Dict[str, object]:
    return _problem(
        "Invalid Request",
        422,
        "Request validation failed",
        "REQUEST_VALIDATION_FAILED",
        errors=errors,
    )


def problem_http(status: int, detail: str) -> Dict[str, object]:
    return _problem("Error", status, detail, f"HTTP_{status}")


def problem_internal() -> Dict[str, object]:
    # Traceback is logged, never returned
    return {"title": "Internal Server Error", "status": 500, "code": "INTERNAL_ERROR"}


__all__ = [
    "problem_from_error",
    "problem_invalid_request",
    "problem_http",
    "problem_internal",
]
