"""Configuration utilities for the Item List Service.

This module loads application configuration with the following rules:
- Primary source: `itemlist_config.json` at the project root (optional).
- Overrides: optional text files under `config/`, then environment variables.
- Validation: Pydantic models enforce value constraints.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator, model_validator


CONFIG_DIR = Path("config")
ROOT_CONFIG_FILE = Path("itemlist_config.json")
logger = logging.getLogger(__name__)

DEFAULT_COLLECTION_SIZE = 1_000_000
DEFAULT_CORS_ORIGINS = ["http://localhost:5173", "http://127.0.0.1:5173"]


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        # Recoverable: log and ignore unreadable override
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


class CollectionConfig(BaseModel):
    size: int = Field(default=DEFAULT_COLLECTION_SIZE, gt=0)


class PagingConfig(BaseModel):
    default_limit: int = Field(default=20, gt=0)
    max_limit: int = Field(default=100, gt=0)

    @model_validator(mode="after")
    def default_within_max(self) -> "PagingConfig":
        if self.default_limit > self.max_limit:
            raise ValueError("paging.default_limit must not exceed paging.max_limit")
        return self


class ReorderConfig(BaseModel):
    batch_step: float = Field(default=1e-6, gt=0)
    insert_epsilon: float = Field(default=1e-6, gt=0)
    # 0 disables rebalancing of crowded neighbors
    rebalance_min_gap: float = Field(default=1e-9, ge=0)
    rebalance_max_window: int = Field(default=1024, ge=2)


class ServerConfig(BaseModel):
    environment: str = "development"
    host: str = "0.0.0.0"
    port: int = Field(default=3001, gt=0, lt=65536)
    cors_origins: List[str] = Field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    session_cookie: str = "sid"
    client_dist: Optional[Path] = None

    @field_validator("environment")
    @classmethod
    def environment_must_be_allowed(cls, v: str) -> str:
        v = (v or "").strip().lower()
        allowed = {"development", "production", "test"}
        if v not in allowed:
            raise ValueError(f"server.environment must be one of {sorted(allowed)}")
        return v

    @field_validator("session_cookie")
    @classmethod
    def cookie_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("server.session_cookie must be a non-empty string")
        return v.strip()

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


class AppConfig(BaseModel):
    collection: CollectionConfig = Field(default_factory=CollectionConfig)
    paging: PagingConfig = Field(default_factory=PagingConfig)
    reorder: ReorderConfig = Field(default_factory=ReorderConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def _split_origins(text: Optional[str]) -> Optional[List[str]]:
    if text is None:
        return None
    return [o.strip() for o in str(text).split(",") if o.strip()]


def load_config() -> AppConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables
    2) Text files in `config/` (optional)
    3) itemlist_config.json at project root
    4) Defaults
    """

    base = _read_json_file(ROOT_CONFIG_FILE)

    def _base(path: str, default: Optional[str] = None) -> Optional[str]:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        if isinstance(cur, list):
            return ",".join(str(x) for x in cur)
        return str(cur) if cur is not None else default

    def _pick(env_key: str, file_key: str, base_key: str, default: Optional[str] = None) -> Optional[str]:
        return _env(env_key) or _read_config_file(file_key) or _base(base_key, default)

    size = _pick("ITEMLIST_COLLECTION_SIZE", "collection.size", "collection.size", str(DEFAULT_COLLECTION_SIZE))
    default_limit = _pick("ITEMLIST_PAGE_DEFAULT_LIMIT", "paging.default_limit", "paging.default_limit", "20")
    max_limit = _pick("ITEMLIST_PAGE_MAX_LIMIT", "paging.max_limit", "paging.max_limit", "100")

    batch_step = _pick("ITEMLIST_BATCH_STEP", "reorder.batch_step", "reorder.batch_step", "1e-6")
    insert_epsilon = _pick("ITEMLIST_INSERT_EPSILON", "reorder.insert_epsilon", "reorder.insert_epsilon", "1e-6")
    min_gap = _pick("ITEMLIST_REBALANCE_MIN_GAP", "reorder.rebalance_min_gap", "reorder.rebalance_min_gap", "1e-9")
    max_window = _pick(
        "ITEMLIST_REBALANCE_MAX_WINDOW", "reorder.rebalance_max_window", "reorder.rebalance_max_window", "1024"
    )

    environment = _env("APP_ENV") or _read_config_file("server.environment") or _base("server.environment", "development")
    host = _env("HOST") or _base("server.host", "0.0.0.0")
    port = _env("PORT") or _base("server.port", "3001")
    origins = _split_origins(_pick("ITEMLIST_CORS_ORIGINS", "server.cors_origins", "server.cors_origins"))
    cookie = _pick("ITEMLIST_SESSION_COOKIE", "server.session_cookie", "server.session_cookie", "sid")
    client_dist = _pick("ITEMLIST_CLIENT_DIST", "server.client_dist", "server.client_dist")

    try:
        server_kwargs: dict = {
            "environment": str(environment),
            "host": str(host),
            "port": int(str(port).strip()),
            "session_cookie": str(cookie),
            "client_dist": Path(client_dist) if client_dist else None,
        }
        if origins is not None:
            server_kwargs["cors_origins"] = origins
        cfg = AppConfig(
            collection=CollectionConfig(size=int(str(size).strip())),
            paging=PagingConfig(
                default_limit=int(str(default_limit).strip()),
                max_limit=int(str(max_limit).strip()),
            ),
            reorder=ReorderConfig(
                batch_step=float(str(batch_step).strip()),
                insert_epsilon=float(str(insert_epsilon).strip()),
                rebalance_min_gap=float(str(min_gap).strip()),
                rebalance_max_window=int(str(max_window).strip()),
            ),
            server=ServerConfig(**server_kwargs),
        )
        return cfg
    except (PydanticValidationError, ValueError) as e:
        logger.error("Invalid application configuration: %s", e)
        raise


__all__ = [
    "AppConfig",
    "CollectionConfig",
    "PagingConfig",
    "ReorderConfig",
    "ServerConfig",
    "load_config",
]
