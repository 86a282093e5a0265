"""Shared response shapes."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from cyberhunter.utils import PageRequest, page_count


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class PageEnvelope(BaseModel):
    """Pagination metadata returned next to every paginated resource list."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    count: int
    total: int
    pages: int
    current_page: int = Field(serialization_alias="currentPage")


def page_envelope(key: str, items: Sequence[Any], total: int, page: PageRequest) -> dict[str, Any]:
    """Return ``{success, count, total, pages, currentPage, <key>: items}``."""

    envelope = PageEnvelope(
        count=len(items),
        total=total,
        pages=page_count(total, page.limit),
        current_page=page.page,
    )
    return {**envelope.model_dump(by_alias=True), key: list(items)}


__all__ = ["MessageResponse", "PageEnvelope", "page_envelope"]
