"""Problem+JSON utilities and global exception handlers.

Defines the RFC7807 media type and handler callables that produce
application/problem+json responses for every error path.
"""

from __future__ import annotations

import logging
from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from itemlist.logic.problem_factory import (
    problem_from_error,
    problem_http,
    problem_internal,
    problem_invalid_request,
)
from itemlist.logic.validation import ItemListError

PROBLEM_MEDIA_TYPE = "application/problem+json"

logger = logging.getLogger(__name__)


def problem_response(problem: dict, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        problem,
        status_code=int(problem.get("status", 500)),
        media_type=PROBLEM_MEDIA_TYPE,
        headers=headers,
    )


async def handle_itemlist_error(request: Request, exc: ItemListError) -> JSONResponse:  # noqa: D401
    logger.info("request_rejected path=%s reason=%s", request.url.path, exc)
    return problem_response(problem_from_error(exc))


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:  # noqa: D401
    status = int(getattr(exc, "status_code", 500) or 500)
    if isinstance(exc.detail, dict):
        problem = {"status": status, **exc.detail}
    else:
        problem = problem_http(status, str(exc.detail or ""))
    headers = {str(k): str(v) for k, v in (exc.headers or {}).items()}
    return problem_response(problem, headers=headers or None)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: D401
    # Pydantic error dicts may carry exception objects under "ctx"
    errors = [
        {k: v for k, v in err.items() if k in ("type", "loc", "msg")}
        for err in exc.errors()
    ]
    return problem_response(problem_invalid_request(errors))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:  # noqa: D401
    logger.error("unexpected_error path=%s", request.url.path, exc_info=exc)
    return problem_response(problem_internal())


__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "problem_response",
    "handle_itemlist_error",
    "handle_http_exception",
    "handle_request_validation_error",
    "handle_unexpected_error",
]
