"""Functional test bootstrap.

Builds apps from explicit ``AppConfig`` objects so tests never depend on the
developer's environment or a local ``itemlist_config.json``. Every client
fixture gets a fresh app, hence a fresh session registry.
"""

from __future__ import annotations

import json
import pathlib
import typing as t

import pytest
from fastapi.testclient import TestClient
from jsonschema import Draft202012Validator

from itemlist.config import AppConfig, CollectionConfig, ReorderConfig, ServerConfig
from itemlist.logic.events import get_buffered_events
from itemlist.main import create_app

_ROOT = pathlib.Path(__file__).resolve().parents[2]
SCHEMAS_DIR = _ROOT / "schemas"


def make_config(size: int = 1_000_000, **reorder: t.Any) -> AppConfig:
    return AppConfig(
        collection=CollectionConfig(size=size),
        reorder=ReorderConfig(**reorder),
        server=ServerConfig(environment="test"),
    )


@pytest.fixture
def config_factory() -> t.Callable[..., AppConfig]:
    return make_config


@pytest.fixture
def app():
    return create_app(make_config())


@pytest.fixture
def client(app) -> t.Iterator[TestClient]:
    with TestClient(app) as c:
        yield c


@pytest.fixture
def small_client() -> t.Iterator[TestClient]:
    """Client over a 300-element collection, small enough to enumerate."""
    with TestClient(create_app(make_config(size=300))) as c:
        yield c


@pytest.fixture(autouse=True)
def _drain_events() -> t.Iterator[None]:
    get_buffered_events(clear=True)
    yield
    get_buffered_events(clear=True)


def _load_schema(name: str) -> dict:
    return json.loads((SCHEMAS_DIR / f"{name}.schema.json").read_text(encoding="utf-8"))


@pytest.fixture(scope="session")
def assert_schema() -> t.Callable[[str, t.Any], None]:
    """Return a callable validating a JSON body against ``schemas/<name>``."""
    cache: dict[str, Draft202012Validator] = {}

    def _check(name: str, body: t.Any) -> None:
        if name not in cache:
            cache[name] = Draft202012Validator(_load_schema(name))
        errors = sorted(cache[name].iter_errors(body), key=lambda e: list(e.path))
        assert not errors, f"{name} schema violations: {[e.message for e in errors]}"

    return _check
