"""Page slicing for list endpoints."""

from dataclasses import dataclass
from math import ceil

DEFAULT_LIMIT = 10


@dataclass(frozen=True)
class Page:
    items: list
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return ceil(self.total / self.limit) if self.limit else 0


def paginate(items, page=1, limit=DEFAULT_LIMIT) -> Page:
    page = max(int(page or 1), 1)
    limit = max(int(limit or DEFAULT_LIMIT), 1)
    start = (page - 1) * limit
    return Page(items=items[start : start + limit], total=len(items), page=page, limit=limit)


def newest_first(records):
    return sorted(records, key=lambda record: record.created_at, reverse=True)
