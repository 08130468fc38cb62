"""Lenient page/limit parsing shared by the list endpoints."""

from dataclasses import dataclass
from typing import Optional

from fastapi import Query

from ..config import settings


@dataclass
class Pagination:
    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    def meta(self, result_meta: dict) -> dict:
        """Merge a service `{total, skip, limit}` meta with the requested page."""
        return {**result_meta, "page": self.page}


def _positive_int(raw: Optional[str]) -> Optional[int]:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


def parse_pagination(page: Optional[str] = None, limit: Optional[str] = None) -> Pagination:
    """Map 1-based `page` and `limit` to a `Pagination`.

    Invalid or non-positive values fall back to page 1 and the default
    page size; the page size is capped at `MAX_PAGE_SIZE`.
    """
    size = _positive_int(limit) or settings.DEFAULT_PAGE_SIZE
    size = min(size, settings.MAX_PAGE_SIZE)
    return Pagination(page=_positive_int(page) or 1, limit=size)


def get_pagination(page: Optional[str] = Query(None), limit: Optional[str] = Query(None)) -> Pagination:
    """FastAPI dependency wrapper around `parse_pagination`."""
    return parse_pagination(page, limit)
