from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any
from uuid import uuid4

from menuboard.application.metrics.menu_mutations import (
    record_items_held,
    record_load_failure,
    record_mutation,
)
from menuboard.application.ports.store import MenuItemStore, StoreError
from menuboard.application.views.sequencer import MutationSequencer
from menuboard.domain.common.ids import MenuItemId
from menuboard.domain.menu.entities import EDITABLE_FIELDS, InvalidMenuItemError, MenuItem

logger = logging.getLogger(__name__)


class EditorState(str, Enum):
    CLOSED = "closed"
    EDITING_EXISTING = "editing_existing"
    EDITING_DRAFT = "editing_draft"


class MutationKind(str, Enum):
    TOGGLE = "toggle"
    CREATE = "create"
    UPDATE = "update"


class EditorBusyError(Exception):
    pass


class EditorClosedError(Exception):
    pass


class MenuItemNotFoundError(Exception):
    pass


@dataclass(frozen=True)
class MutationResult:
    """Outcome of one dashboard mutation.

    ``ok`` reports what the store said. ``applied`` is False when the store accepted
    the write but a newer mutation for the same item was issued in the meantime, so
    the local merge was skipped.
    """

    kind: MutationKind
    ok: bool
    message: str | None = None
    item: MenuItem | None = None
    applied: bool = False

    @classmethod
    def succeeded(cls, kind: MutationKind, item: MenuItem | None, applied: bool) -> MutationResult:
        return cls(kind=kind, ok=True, item=item, applied=applied)

    @classmethod
    def failed(cls, kind: MutationKind, message: str) -> MutationResult:
        return cls(kind=kind, ok=False, message=message)

    @property
    def outcome(self) -> str:
        if not self.ok:
            return "failed"
        return "applied" if self.applied else "discarded"


@dataclass(frozen=True)
class DashboardSnapshot:
    items: list[MenuItem]
    loading: bool
    editor_state: EditorState
    editing: MenuItem | None
    last_result: MutationResult | None

    @property
    def modal_open(self) -> bool:
        return self.editor_state is not EditorState.CLOSED


def _item_key(item_id: MenuItemId) -> str:
    return f"item:{item_id}"


class AdminDashboard:
    def __init__(self, store: MenuItemStore, sequencer: MutationSequencer | None = None) -> None:
        self._store = store
        self._sequencer = sequencer or MutationSequencer()
        self._lock = threading.Lock()
        self._items: list[MenuItem] = []
        self._loading = True
        self._editing: MenuItem | None = None
        self._editor_key: str | None = None
        self._last_result: MutationResult | None = None

    @property
    def items(self) -> list[MenuItem]:
        with self._lock:
            return list(self._items)

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def editing(self) -> MenuItem | None:
        return self._editing

    @property
    def modal_open(self) -> bool:
        return self._editing is not None

    @property
    def editor_state(self) -> EditorState:
        editing = self._editing
        if editing is None:
            return EditorState.CLOSED
        return EditorState.EDITING_DRAFT if editing.is_draft else EditorState.EDITING_EXISTING

    @property
    def last_result(self) -> MutationResult | None:
        return self._last_result

    def snapshot(self) -> DashboardSnapshot:
        with self._lock:
            return DashboardSnapshot(
                items=list(self._items),
                loading=self._loading,
                editor_state=self.editor_state,
                editing=self._editing,
                last_result=self._last_result,
            )

    def load(self) -> None:
        self._loading = True
        try:
            items = self._store.list_all()
        except StoreError:
            logger.exception("admin_fetch_failed")
            record_load_failure("admin")
            self._loading = False
            return

        with self._lock:
            self._items = items
            self._loading = False
        record_items_held("admin", len(items))

    def toggle_availability(self, item_id: MenuItemId) -> MutationResult:
        with self._lock:
            current = self._find(item_id)
        if current is None:
            raise MenuItemNotFoundError(f"menu item {item_id} not found")

        available = not current.available
        key = _item_key(item_id)
        version = self._sequencer.issue(key)
        try:
            self._store.set_availability(item_id, available)
        except StoreError as exc:
            return self._finish(MutationResult.failed(MutationKind.TOGGLE, exc.message), item_id)

        with self._lock:
            applied = self._sequencer.is_latest(key, version)
            if applied:
                self._items = [
                    item.with_changes(available=available) if item.item_id == item_id else item
                    for item in self._items
                ]
            merged = self._find(item_id)
        return self._finish(
            MutationResult.succeeded(MutationKind.TOGGLE, merged, applied=applied), item_id
        )

    def begin_edit(self, item_id: MenuItemId) -> MenuItem:
        with self._lock:
            self._ensure_closed()
            item = self._find(item_id)
            if item is None:
                raise MenuItemNotFoundError(f"menu item {item_id} not found")
            self._editing = item
            self._editor_key = _item_key(item_id)
            return item

    def begin_add(self) -> MenuItem:
        with self._lock:
            self._ensure_closed()
            self._editing = MenuItem.draft()
            self._editor_key = f"draft:{uuid4().hex}"
            return self._editing

    def change_field(self, **changes: Any) -> MenuItem:
        with self._lock:
            editing = self._ensure_open()
            allowed = EDITABLE_FIELDS | {"available"} if editing.is_draft else EDITABLE_FIELDS
            not_editable = sorted(set(changes) - allowed)
            if not_editable:
                raise InvalidMenuItemError(f"fields not editable: {', '.join(not_editable)}")
            self._editing = editing.with_changes(**changes)
            return self._editing

    def cancel(self) -> None:
        with self._lock:
            self._editing = None
            self._editor_key = None

    def submit(self) -> MutationResult:
        """Persist the editor contents.

        Raises ``InvalidMenuItemError`` without contacting the store when the edited
        item cannot be submitted; the editor stays open in that case.
        """
        with self._lock:
            editing = self._ensure_open()
            key = self._editor_key

        editing.ensure_submittable()

        if editing.item_id is None:
            return self._create(editing, key)
        return self._update(editing, editing.item_id, key)

    def _create(self, draft: MenuItem, key: str) -> MutationResult:
        version = self._sequencer.issue(key)
        try:
            created = self._store.insert([draft])
        except StoreError as exc:
            self._sequencer.release(key, version)
            return self._finish(MutationResult.failed(MutationKind.CREATE, exc.message))

        with self._lock:
            applied = self._sequencer.is_latest(key, version)
            self._sequencer.release(key, version)
            if applied:
                self._items = [*self._items, *created]
            self._close_if_editing(draft)
            count = len(self._items)
        record_items_held("admin", count)
        item = created[0] if created else None
        return self._finish(
            MutationResult.succeeded(MutationKind.CREATE, item, applied=applied),
            item.item_id if item else None,
        )

    def _update(self, edited: MenuItem, item_id: MenuItemId, key: str) -> MutationResult:
        version = self._sequencer.issue(key)
        try:
            self._store.update_details(
                item_id,
                name=edited.name,
                price=edited.price,
                description=edited.description,
                category=edited.category,
            )
        except StoreError as exc:
            return self._finish(MutationResult.failed(MutationKind.UPDATE, exc.message), item_id)

        with self._lock:
            applied = self._sequencer.is_latest(key, version)
            if applied:
                self._items = [edited if item.item_id == item_id else item for item in self._items]
            self._close_if_editing(edited)
        return self._finish(
            MutationResult.succeeded(MutationKind.UPDATE, edited, applied=applied), item_id
        )

    def _find(self, item_id: MenuItemId) -> MenuItem | None:
        for item in self._items:
            if item.item_id == item_id:
                return item
        return None

    def _ensure_closed(self) -> None:
        if self._editing is not None:
            raise EditorBusyError("an item is already being edited; cancel or submit it first")

    def _ensure_open(self) -> MenuItem:
        if self._editing is None:
            raise EditorClosedError("no item is being edited")
        return self._editing

    def _close_if_editing(self, item: MenuItem) -> None:
        # the editor may have been cancelled and reopened while the request was in flight
        if self._editing is item:
            self._editing = None
            self._editor_key = None

    def _finish(self, result: MutationResult, item_id: MenuItemId | None = None) -> MutationResult:
        record_mutation(result.kind.value, result.outcome)
        if result.ok:
            logger.info(
                "menu_item_mutation",
                extra={"mutation": result.kind.value, "outcome": result.outcome, "item_id": item_id},
            )
        else:
            logger.warning(
                "menu_item_mutation_failed",
                extra={
                    "mutation": result.kind.value,
                    "outcome": result.outcome,
                    "item_id": item_id,
                    "error": result.message,
                },
            )
        with self._lock:
            self._last_result = result
        return result
