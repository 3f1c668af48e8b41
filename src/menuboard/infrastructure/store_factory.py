from __future__ import annotations

import os
from functools import lru_cache

from menuboard.application.ports.store import MenuItemStore

SQL_BACKEND = "sql"
POSTGREST_BACKEND = "postgrest"


def _required(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"{name} is not set")
    return value


def _timeout_seconds() -> float:
    raw_value = os.getenv("STORE_TIMEOUT_SECONDS", "5")
    try:
        return float(raw_value)
    except ValueError as exc:
        raise RuntimeError(f"STORE_TIMEOUT_SECONDS must be a number, got {raw_value!r}") from exc


@lru_cache(maxsize=4)
def _build_store(backend: str, timeout_seconds: float) -> MenuItemStore:
    if backend == SQL_BACKEND:
        from menuboard.infrastructure.db.repositories.menu_item_store import (
            SqlAlchemyMenuItemStore,
        )
        from menuboard.infrastructure.db.session import get_engine

        return SqlAlchemyMenuItemStore(engine=get_engine(timeout_seconds=timeout_seconds))

    if backend == POSTGREST_BACKEND:
        from menuboard.infrastructure.rest.postgrest_store import PostgrestMenuItemStore

        return PostgrestMenuItemStore(
            base_url=_required("POSTGREST_URL"),
            api_key=_required("POSTGREST_API_KEY"),
            timeout_seconds=timeout_seconds,
        )

    raise RuntimeError(
        f"MENU_STORE_BACKEND must be {SQL_BACKEND!r} or {POSTGREST_BACKEND!r}, got {backend!r}"
    )


def get_menu_item_store() -> MenuItemStore:
    backend = os.getenv("MENU_STORE_BACKEND", SQL_BACKEND).strip().lower()
    return _build_store(backend, _timeout_seconds())
