"""Paginator — clamps paging input and fetches one page plus the total count."""

from typing import Any

from app.application.interfaces import RecordStore
from app.application.services.concurrency import gather_all
from app.domain.entities import PageMeta, Predicate, Record, SortSpec

MAX_PAGE_LIMIT = 100
DEFAULT_PAGE_LIMIT = 10

# Offsets are bound as signed 64-bit integers.
MAX_OFFSET = 2**63 - 1


class Paginator:
    """Offset pagination over a RecordStore.

    The count and the page are independent reads and are awaited together.
    Under concurrent writes the total may be stale relative to the page;
    that is acceptable for list views.
    """

    def __init__(self, max_limit: int = MAX_PAGE_LIMIT):
        self._max_limit = max_limit

    def clamp(self, page: Any, limit: Any, default_limit: int) -> tuple[int, int]:
        """Force page ≥ 1 and 1 ≤ limit ≤ max_limit; missing or junk values use defaults.

        Pages so far out that their offset no longer fits the store are pulled
        back to the last addressable page, which is empty for any real table.
        """
        page = max(1, _as_int(page, 1))
        limit = min(max(1, _as_int(limit, default_limit)), self._max_limit)
        return min(page, MAX_OFFSET // limit + 1), limit

    async def paginate(
        self,
        predicate: Predicate,
        sort: SortSpec,
        page: int,
        limit: int,
        store: RecordStore,
        default_limit: int = DEFAULT_PAGE_LIMIT,
    ) -> tuple[list[Record], int]:
        page, limit = self.clamp(page, limit, default_limit)
        skip = (page - 1) * limit
        records, total = await gather_all(
            store.find(predicate, sort, skip, limit),
            store.count(predicate),
        )
        return records, total

    @staticmethod
    def page_meta(page: int, limit: int, total: int) -> PageMeta:
        return PageMeta.build(page=page, limit=limit, total=total)


def _as_int(value: Any, default: int) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default
