from __future__ import annotations

from typing import NewType

MenuItemId = NewType("MenuItemId", str)
