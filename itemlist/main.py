from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from itemlist.config import AppConfig, load_config
from itemlist.http.problem import (
    handle_http_exception,
    handle_itemlist_error,
    handle_request_validation_error,
    handle_unexpected_error,
)
from itemlist.http.request_id import RequestIdMiddleware
from itemlist.http.session import API_PATH_PREFIX, install_session_middleware
from itemlist.logging_setup import configure_logging
from itemlist.logic.reorder import ReorderPlanner, ReorderSettings
from itemlist.logic.session_state import SessionRegistry
from itemlist.logic.validation import ItemListError
from itemlist.middleware.cors import apply_cors
from itemlist.routes import api_router

logger = logging.getLogger(__name__)


def _planner_for(config: AppConfig) -> ReorderPlanner:
    r = config.reorder
    return ReorderPlanner(
        config.collection.size,
        ReorderSettings(
            batch_step=r.batch_step,
            insert_epsilon=r.insert_epsilon,
            rebalance_min_gap=r.rebalance_min_gap,
            rebalance_max_window=r.rebalance_max_window,
        ),
    )


def _mount_client(app: FastAPI, config: AppConfig) -> None:
    dist = config.server.client_dist
    if dist is None:
        return
    if not dist.is_dir():
        logger.warning("client_dist_missing path=%s; static client not served", dist)
        return
    app.mount("/", StaticFiles(directory=str(dist), html=True), name="client")
    logger.info("client_dist_mounted path=%s", dist)


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    """Build the FastAPI application.

    ``config`` defaults to :func:`load_config`. Each app owns its own
    session registry, so two apps in one process never share state.
    """
    try:
        configure_logging()
    except Exception:
        logging.getLogger(__name__).error("global_logging_configuration_failed", exc_info=True)
    cfg = config or load_config()

    app = FastAPI(title="Item List Service", version="0.1.0")
    app.state.config = cfg
    app.state.sessions = SessionRegistry(cfg.collection.size)
    app.state.planner = _planner_for(cfg)

    app.add_exception_handler(ItemListError, handle_itemlist_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    # Registration order is inside-out: the request-id layer wraps everything
    install_session_middleware(
        app,
        app.state.sessions,
        cookie_name=cfg.server.session_cookie,
        secure=cfg.server.is_production,
    )
    if not cfg.server.is_production:
        apply_cors(app, origins=cfg.server.cors_origins)
    app.add_middleware(RequestIdMiddleware)

    app.include_router(api_router, prefix=API_PATH_PREFIX)

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", "sessions": len(app.state.sessions)}

    if cfg.server.is_production:
        _mount_client(app, cfg)

    logger.info(
        "app_created environment=%s collection_size=%s",
        cfg.server.environment,
        cfg.collection.size,
    )
    return app


__all__ = ["create_app"]
