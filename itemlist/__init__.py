"""FastAPI application package for the Item List Service.

Exposes the application factory. The ordering engine (priorities, selection,
page merge and reorder planning) lives in `itemlist/logic/`; route handlers in
`itemlist/routes/` are thin adapters over it.
"""

from __future__ import annotations

from itemlist.main import create_app

__all__ = ["create_app"]
