"""Session cookie handling.

Issues an opaque httpOnly cookie to callers that do not present one and
resolves the cookie to a :class:`SessionState` from the app's registry on
every API request. Route handlers receive the state through the
``current_session`` dependency and never see the cookie itself.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from fastapi import FastAPI, HTTPException, Request, Response

from itemlist.logic.session_state import SessionRegistry, SessionState

logger = logging.getLogger(__name__)

API_PATH_PREFIX = "/api"


def install_session_middleware(
    app: FastAPI,
    registry: SessionRegistry,
    *,
    cookie_name: str = "sid",
    secure: bool = False,
) -> None:
    @app.middleware("http")
    async def session_cookie(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        if not request.url.path.startswith(API_PATH_PREFIX):
            return await call_next(request)
        presented = request.cookies.get(cookie_name) or None
        state, created = registry.get_or_create(presented)
        request.state.session = state
        if created and presented:
            logger.info("session.recreated_for_unknown_cookie")
        response = await call_next(request)
        if presented is None:
            response.set_cookie(
                cookie_name,
                state.session_id,
                httponly=True,
                samesite="lax",
                secure=secure,
            )
        return response


def current_session(request: Request) -> SessionState:
    """FastAPI dependency returning the caller's session state."""
    state = getattr(request.state, "session", None)
    if state is None:
        # Only reachable when a route is mounted outside the API prefix
        raise HTTPException(status_code=500, detail="session middleware not installed")
    return state


__all__ = ["install_session_middleware", "current_session", "API_PATH_PREFIX"]
