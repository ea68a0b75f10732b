"""CORS configuration helpers.

Development builds of the client run on a separate origin and send the
session cookie, so CORS must allow credentials for an explicit origin list.
Production serves the client from the same origin and skips CORS entirely.
"""

from __future__ import annotations

from typing import Iterable
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware


EXPOSE_HEADERS: list[str] = [
    "X-Request-Id",
]


def apply_cors(app: FastAPI, *, origins: Iterable[str]) -> None:
    app.add_middleware(
        CORSMiddleware,
        # Credentialed requests cannot use a wildcard origin
        allow_origins=[o for o in origins if o != "*"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-Id"],
        expose_headers=EXPOSE_HEADERS,
    )


__all__ = ["apply_cors", "EXPOSE_HEADERS"]
