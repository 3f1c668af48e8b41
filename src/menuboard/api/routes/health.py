from __future__ import annotations

import logging

from fastapi import APIRouter, Response, status

from menuboard.infrastructure.store_factory import get_menu_item_store

logger = logging.getLogger(__name__)

router = APIRouter()


def ping_store() -> bool:
    try:
        return get_menu_item_store().ping()
    except RuntimeError:
        logger.exception("store_not_configured")
        return False


@router.get("/health/live")
def live() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/health/ready")
def ready(response: Response) -> dict[str, object]:
    store_ready = ping_store()

    if store_ready:
        return {"status": "ok"}

    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {
        "status": "unavailable",
        "checks": {"store": store_ready},
    }
