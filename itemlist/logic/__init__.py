"""Ordering engine: priorities, selection, page merge and reorder planning."""

from itemlist.logic.order_merge import Page, PageItem, iter_order, page
from itemlist.logic.priority_store import PriorityStore
from itemlist.logic.reorder import ReorderPlanner, ReorderSettings
from itemlist.logic.selection import SelectionSet
from itemlist.logic.session_state import SessionRegistry, SessionState

__all__ = [
    "Page",
    "PageItem",
    "PriorityStore",
    "ReorderPlanner",
    "ReorderSettings",
    "SelectionSet",
    "SessionRegistry",
    "SessionState",
    "iter_order",
    "page",
]
