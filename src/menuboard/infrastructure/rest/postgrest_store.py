"""Menu item store backed by a hosted PostgREST table (the backend-as-a-service shape)."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Sequence

import httpx

from menuboard.application.ports.store import MenuItemStore, StoreError
from menuboard.domain.common.ids import MenuItemId
from menuboard.domain.common.money import to_price
from menuboard.domain.menu.entities import MenuItem
from menuboard.infrastructure.observability.otel import store_span

logger = logging.getLogger(__name__)

TABLE = "menu_items"
BACKEND = "postgrest"


class PostgrestMenuItemStore(MenuItemStore):
    """HTTP client for the ``menu_items`` table of a PostgREST endpoint.

    Reads use PostgREST filter and ordering query parameters; writes use ``PATCH``
    filtered by ``id`` and ``POST`` with ``Prefer: return=representation`` so the
    created rows, with their server-assigned ids, come back in the response body.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout_seconds: float = 5.0,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            base_url: REST root of the hosted project (e.g. "https://abc.example.co/rest/v1")
            api_key: Project API key, sent as ``apikey`` and as a bearer token
            timeout_seconds: Per-request timeout
            client: Preconfigured client, mainly for tests
        """
        self.base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(
            base_url=self.base_url,
            timeout=timeout_seconds,
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
            },
        )

    def list_available(self) -> list[MenuItem]:
        rows = self._request(
            "list_available",
            "GET",
            params={"select": "*", "available": "eq.true", "order": "name.asc"},
        )
        return _rows_to_items(rows)

    def list_all(self) -> list[MenuItem]:
        rows = self._request(
            "list_all",
            "GET",
            params={"select": "*", "order": "category.asc,name.asc"},
        )
        return _rows_to_items(rows)

    def set_availability(self, item_id: MenuItemId, available: bool) -> None:
        self._request(
            "set_availability",
            "PATCH",
            params={"id": f"eq.{item_id}"},
            json={"available": available},
        )

    def update_details(
        self,
        item_id: MenuItemId,
        *,
        name: str,
        price: Decimal,
        description: str,
        category: str,
    ) -> None:
        self._request(
            "update_details",
            "PATCH",
            params={"id": f"eq.{item_id}"},
            json={
                "name": name,
                "price": float(price),
                "description": description,
                "category": category,
            },
        )

    def insert(self, items: Sequence[MenuItem]) -> list[MenuItem]:
        rows = self._request(
            "insert",
            "POST",
            json=[_item_to_row(item) for item in items],
            headers={"Prefer": "return=representation"},
        )
        return _rows_to_items(rows)

    def ping(self) -> bool:
        try:
            self._request("ping", "GET", params={"select": "id", "limit": "1"})
        except StoreError:
            return False
        return True

    def close(self) -> None:
        self._client.close()

    def _request(
        self,
        operation: str,
        method: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> list[dict[str, Any]]:
        try:
            with store_span(operation, BACKEND):
                response = self._client.request(
                    method,
                    f"/{TABLE}",
                    params=params,
                    json=json,
                    headers=headers,
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            message = _error_message(e.response)
            logger.error(f"{method} {TABLE} failed with status {e.response.status_code}: {message}")
            raise StoreError(message) from e
        except httpx.RequestError as e:
            logger.error(f"{method} {TABLE} failed: {e}")
            raise StoreError(f"request to menu store failed: {e}") from e

        if not response.content:
            return []
        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"{method} {TABLE} returned a body that is not JSON")
            raise StoreError(f"menu store returned an unreadable response: {e}") from e
        if isinstance(data, dict):
            return [data]
        if not isinstance(data, list):
            raise StoreError(f"menu store returned unexpected payload of type {type(data).__name__}")
        return data


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"HTTP {response.status_code}"


def _item_to_row(item: MenuItem) -> dict[str, Any]:
    return {
        "name": item.name,
        "description": item.description,
        "price": float(item.price),
        "category": item.category,
        "available": item.available,
    }


def _row_to_item(row: dict[str, Any]) -> MenuItem:
    return MenuItem(
        item_id=MenuItemId(str(row["id"])),
        name=row["name"],
        description=row.get("description") or "",
        # numeric columns come back as JSON numbers
        price=to_price(row["price"]),
        category=row.get("category") or "",
        available=bool(row.get("available", True)),
    )


def _rows_to_items(rows: list[dict[str, Any]]) -> list[MenuItem]:
    try:
        return [_row_to_item(row) for row in rows]
    except (KeyError, TypeError, ValueError) as e:
        logger.error(f"{TABLE} row could not be mapped: {e!r}")
        raise StoreError(f"menu store returned a malformed row: {e!r}") from e
