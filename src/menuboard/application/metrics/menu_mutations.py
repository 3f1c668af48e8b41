from __future__ import annotations

from prometheus_client import Counter, Gauge

MENU_MUTATIONS_TOTAL = Counter(
    "menuboard_menu_mutations_total",
    "Total number of menu item mutations by kind and outcome.",
    ["kind", "outcome"],
)

MENU_LOAD_FAILURES_TOTAL = Counter(
    "menuboard_menu_load_failures_total",
    "Total number of failed menu item reads by view.",
    ["view"],
)

MENU_ITEMS_HELD = Gauge(
    "menuboard_menu_items_held",
    "Number of menu items currently held by a view after its last load or merge.",
    ["view"],
)


def record_mutation(kind: str, outcome: str) -> None:
    MENU_MUTATIONS_TOTAL.labels(kind=kind, outcome=outcome).inc()


def record_load_failure(view: str) -> None:
    MENU_LOAD_FAILURES_TOTAL.labels(view=view).inc()


def record_items_held(view: str, count: int) -> None:
    MENU_ITEMS_HELD.labels(view=view).set(count)
