"""Page/limit handling shared by list endpoints."""

from __future__ import annotations

import math
from dataclasses import dataclass

from cyberhunter.config import get_settings


@dataclass(frozen=True)
class PageRequest:
    """A validated ``page``/``limit`` pair."""

    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def resolve_page(
    page: int | None = None, limit: int | None = None, *, default_limit: int | None = None
) -> PageRequest:
    """Clamp the requested page to the configured bounds."""

    settings = get_settings()
    fallback = default_limit or settings.default_page_limit
    resolved_page = page if page and page > 0 else 1
    resolved_limit = limit if limit and limit > 0 else fallback
    return PageRequest(page=resolved_page, limit=min(resolved_limit, settings.max_page_limit))


def page_count(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


__all__ = ["PageRequest", "page_count", "resolve_page"]
