from __future__ import annotations

from pydantic import BaseModel, Field


class MenuItemResponse(BaseModel):
    id: str | None = None
    name: str
    description: str = ""
    price: str
    category: str
    available: bool


class MenuViewResponse(BaseModel):
    activeCategory: str
    categories: list[str] = Field(default_factory=list)
    loading: bool
    items: list[MenuItemResponse] = Field(default_factory=list)
    emptyMessage: str | None = None


class EditorResponse(BaseModel):
    state: str
    modalOpen: bool
    item: MenuItemResponse | None = None


class MutationResultResponse(BaseModel):
    kind: str
    ok: bool
    applied: bool
    message: str | None = None
    item: MenuItemResponse | None = None


class DashboardResponse(BaseModel):
    loading: bool
    items: list[MenuItemResponse] = Field(default_factory=list)
    editor: EditorResponse
    lastResult: MutationResultResponse | None = None
