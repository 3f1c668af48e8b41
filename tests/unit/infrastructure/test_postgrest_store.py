from __future__ import annotations

import json
import sys
from decimal import Decimal
from pathlib import Path

import httpx
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from menuboard.application.ports.store import StoreError
from menuboard.domain.common.ids import MenuItemId
from menuboard.domain.menu.entities import MenuItem
from menuboard.infrastructure.rest.postgrest_store import PostgrestMenuItemStore

BASE_URL = "https://project.example.co/rest/v1"


class RecordingHandler:
    def __init__(self, responses: list[httpx.Response]) -> None:
        self._responses = responses
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responses.pop(0)


def _store(handler: RecordingHandler) -> PostgrestMenuItemStore:
    client = httpx.Client(
        base_url=BASE_URL,
        transport=httpx.MockTransport(handler),
        headers={"apikey": "anon-key", "Authorization": "Bearer anon-key"},
    )
    return PostgrestMenuItemStore(base_url=BASE_URL, api_key="anon-key", client=client)


def _row(item_id: str, name: str, price: float, category: str, available: bool = True) -> dict:
    return {
        "id": item_id,
        "name": name,
        "description": None,
        "price": price,
        "category": category,
        "available": available,
    }


def test_list_available_filters_and_orders_by_name() -> None:
    handler = RecordingHandler(
        [httpx.Response(200, json=[_row("1", "Bruschetta", 7, "Appetizers")])]
    )

    items = _store(handler).list_available()

    request = handler.requests[0]
    assert request.method == "GET"
    assert request.url.path == "/rest/v1/menu_items"
    assert request.url.params["available"] == "eq.true"
    assert request.url.params["order"] == "name.asc"
    assert request.headers["apikey"] == "anon-key"
    assert items == [
        MenuItem(
            item_id=MenuItemId("1"),
            name="Bruschetta",
            description="",
            price=Decimal("7.00"),
            category="Appetizers",
            available=True,
        )
    ]


def test_list_all_orders_by_category_then_name() -> None:
    handler = RecordingHandler([httpx.Response(200, json=[])])

    assert _store(handler).list_all() == []
    assert handler.requests[0].url.params["order"] == "category.asc,name.asc"
    assert "available" not in handler.requests[0].url.params


def test_set_availability_patches_by_id() -> None:
    handler = RecordingHandler([httpx.Response(204)])

    _store(handler).set_availability(MenuItemId("7"), False)

    request = handler.requests[0]
    assert request.method == "PATCH"
    assert request.url.params["id"] == "eq.7"
    assert json.loads(request.content) == {"available": False}


def test_update_details_sends_editable_fields() -> None:
    handler = RecordingHandler([httpx.Response(204)])

    _store(handler).update_details(
        MenuItemId("7"),
        name="Tomato Soup",
        price=Decimal("5.50"),
        description="",
        category="Main",
    )

    assert json.loads(handler.requests[0].content) == {
        "name": "Tomato Soup",
        "price": 5.5,
        "description": "",
        "category": "Main",
    }


def test_insert_returns_created_rows() -> None:
    handler = RecordingHandler(
        [httpx.Response(201, json=[_row("42", "Lemonade", 3.0, "Drink")])]
    )
    draft = MenuItem.draft().with_changes(name="Lemonade", category="Drink", price=Decimal("3"))

    created = _store(handler).insert([draft])

    request = handler.requests[0]
    assert request.method == "POST"
    assert request.headers["prefer"] == "return=representation"
    assert json.loads(request.content) == [
        {
            "name": "Lemonade",
            "description": "",
            "price": 3.0,
            "category": "Drink",
            "available": True,
        }
    ]
    assert [item.item_id for item in created] == ["42"]
    assert created[0].display_price == "3.00"


def test_error_response_raises_store_error_with_message() -> None:
    handler = RecordingHandler(
        [
            httpx.Response(
                403,
                json={"code": "42501", "message": "permission denied for table menu_items"},
            )
        ]
    )

    with pytest.raises(StoreError) as exc_info:
        _store(handler).set_availability(MenuItemId("7"), True)

    assert exc_info.value.message == "permission denied for table menu_items"


def test_transport_error_raises_store_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.Client(base_url=BASE_URL, transport=httpx.MockTransport(handler))
    store = PostgrestMenuItemStore(base_url=BASE_URL, api_key="anon-key", client=client)

    with pytest.raises(StoreError):
        store.list_all()
    assert store.ping() is False


def test_non_json_success_body_raises_store_error() -> None:
    handler = RecordingHandler(
        [httpx.Response(200, text="<html>gateway</html>", headers={"content-type": "text/html"})]
    )

    with pytest.raises(StoreError) as exc_info:
        _store(handler).list_available()

    assert "unreadable response" in exc_info.value.message


def test_row_missing_columns_raises_store_error() -> None:
    handler = RecordingHandler([httpx.Response(200, json=[{"id": 1, "name": "x"}])])

    with pytest.raises(StoreError) as exc_info:
        _store(handler).list_all()

    assert "malformed row" in exc_info.value.message


def test_row_with_unparseable_price_raises_store_error() -> None:
    handler = RecordingHandler(
        [httpx.Response(201, json=[_row("42", "Lemonade", 3.0, "Drink") | {"price": "free"}])]
    )
    draft = MenuItem.draft().with_changes(name="Lemonade")

    with pytest.raises(StoreError):
        _store(handler).insert([draft])
