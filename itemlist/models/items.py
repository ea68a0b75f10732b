"""Pydantic models for item list request and response bodies.

Wire names are camelCase to match the browser client; Python attributes are
snake_case. Request fields are typed ``Any`` on purpose: element validation
happens in ``itemlist.logic.validation`` so that a bad element is dropped
instead of failing the whole request.
"""

from __future__ import annotations

from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SelectRequest(_WireModel):
    ids: Any = None
    selected: Any = False


class ReorderRequest(_WireModel):
    ordered_ids: Any = Field(default=None, alias="orderedIds")


class ReorderSingleRequest(_WireModel):
    id: Any = None
    before_id: Any = Field(default=None, alias="beforeId")
    after_id: Any = Field(default=None, alias="afterId")


class ItemView(_WireModel):
    id: int
    selected: bool


class PageResponse(_WireModel):
    items: List[ItemView]
    has_more: bool = Field(alias="hasMore")
    next_offset: int = Field(alias="nextOffset")


class SelectResult(_WireModel):
    ok: bool = True
    changed: int
    selected_count: int = Field(alias="selectedCount")


class ReorderResult(_WireModel):
    ok: bool = True
    applied: int


class ReorderSingleResult(_WireModel):
    ok: bool = True
    id: int
    priority: float


class ResetResult(_WireModel):
    ok: bool = True


__all__ = [
    "SelectRequest",
    "ReorderRequest",
    "ReorderSingleRequest",
    "ItemView",
    "PageResponse",
    "SelectResult",
    "ReorderResult",
    "ReorderSingleResult",
    "ResetResult",
]
