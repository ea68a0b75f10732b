"""Item list routes: paging, selection, reorder and reset.

Handlers are thin: they resolve the caller's session, hold its lock for the
duration of the call and delegate to ``itemlist.logic``. Malformed bodies
raise ``MalformedInputError`` before any state is touched; the global
handler turns it into a 400 problem response.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request

from itemlist.config import AppConfig
from itemlist.http.session import current_session
from itemlist.logic import order_merge
from itemlist.logic.events import (
    ITEM_MOVED,
    ITEMS_REORDERED,
    SELECTION_CHANGED,
    SESSION_RESET,
    publish,
)
from itemlist.logic.reorder import ReorderPlanner
from itemlist.logic.session_state import SessionState
from itemlist.logic.validation import InvalidIdentifierError, coerce_identifier, require_list
from itemlist.models.items import (
    ItemView,
    PageResponse,
    ReorderRequest,
    ReorderResult,
    ReorderSingleRequest,
    ReorderSingleResult,
    ResetResult,
    SelectRequest,
    SelectResult,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_planner(request: Request) -> ReorderPlanner:
    return request.app.state.planner


@router.get("/items", response_model=PageResponse, summary="Fetch one page of the ordered collection")
def list_items(
    offset: Optional[str] = "0",
    limit: Optional[str] = None,
    q: Optional[str] = None,
    session: SessionState = Depends(current_session),
    config: AppConfig = Depends(get_config),
) -> PageResponse:
    """Return ``limit`` items starting at ``offset`` of the filtered order.

    Paging parameters are coerced rather than validated: a garbage offset
    reads as 0 and a garbage limit as the configured default.
    """
    with session.lock:
        result = order_merge.page(
            session.store,
            session.selection,
            offset,
            limit,
            q,
            size=config.collection.size,
            default_limit=config.paging.default_limit,
            max_limit=config.paging.max_limit,
        )
    return PageResponse(
        items=[ItemView(id=item.id, selected=item.selected) for item in result.items],
        has_more=result.has_more,
        next_offset=result.next_offset,
    )


@router.post("/select", response_model=SelectResult, summary="Select or deselect identifiers")
def select_items(
    payload: Optional[SelectRequest] = None,
    session: SessionState = Depends(current_session),
) -> SelectResult:
    body = payload or SelectRequest()
    ids = require_list(body.ids, "ids")
    want = bool(body.selected)
    with session.lock:
        changed, total = session.selection.set_many(ids, want)
    if changed:
        publish(SELECTION_CHANGED, {"selected": want, "changed": changed, "total": total})
    return SelectResult(changed=changed, selected_count=total)


@router.post("/reorder", response_model=ReorderResult, summary="Move a list of identifiers to the top")
def reorder_batch(
    payload: Optional[ReorderRequest] = None,
    session: SessionState = Depends(current_session),
    planner: ReorderPlanner = Depends(get_planner),
) -> ReorderResult:
    body = payload or ReorderRequest()
    ordered = require_list(body.ordered_ids, "orderedIds")
    with session.lock:
        applied = planner.apply_batch(session.store, ordered)
        epoch = session.epoch
    publish(ITEMS_REORDERED, {"applied": applied, "epoch": epoch})
    return ReorderResult(applied=applied)


@router.post(
    "/reorderSingle",
    response_model=ReorderSingleResult,
    summary="Insert one identifier between two neighbors",
)
def reorder_single(
    payload: Optional[ReorderSingleRequest] = None,
    session: SessionState = Depends(current_session),
    planner: ReorderPlanner = Depends(get_planner),
) -> ReorderSingleResult:
    body = payload or ReorderSingleRequest()
    ident = coerce_identifier(body.id, planner.size)
    if ident is None:
        raise InvalidIdentifierError("bad id", field="id")
    with session.lock:
        priority = planner.insert_between(session.store, ident, body.before_id, body.after_id)
    publish(ITEM_MOVED, {"id": ident, "priority": priority})
    return ReorderSingleResult(id=ident, priority=priority)


@router.post("/reset", response_model=ResetResult, summary="Clear overrides and selection")
def reset_session(session: SessionState = Depends(current_session)) -> ResetResult:
    session.reset()
    publish(SESSION_RESET, {})
    return ResetResult()


__all__ = ["router", "list_items", "select_items", "reorder_batch", "reorder_single", "reset_session"]
