"""Page-number pagination over the store's continuation-token scans."""
from __future__ import annotations

import re
from typing import List, Optional, Tuple, Union

from task_api.core.exceptions import ValidationFailed
from task_api.models.task import Task
from task_api.store.base import TaskStore

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

# Returned instead of rows when page 0 is requested.
PAGE_ZERO_RESULT = "Got"

_INTEGER = re.compile(r"[+-]?\d+", re.ASCII)

# Query integers are 64-bit signed; anything wider is rejected, not clamped.
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


def _parse_int(value: str) -> Optional[int]:
    if not _INTEGER.fullmatch(value):
        return None
    parsed = int(value)
    if not INT64_MIN <= parsed <= INT64_MAX:
        return None
    return parsed


def parse_page_params(limit: Optional[str], page: Optional[str]) -> Tuple[int, int]:
    """Parse the raw ``limit`` and ``page`` query values."""
    if not limit or not page:
        raise ValidationFailed("Limit and Page are required")

    limit_int = _parse_int(limit)
    if limit_int is None:
        raise ValidationFailed("Invalid limit")

    page_int = _parse_int(page)
    if page_int is None:
        raise ValidationFailed("Invalid page")

    return limit_int, page_int


class PaginationWalker:
    """
    Resolve a page number by re-walking the scan from the first page.

    Each step feeds the previous step's continuation token back into the
    store; the token is never inspected here. A short page ends the walk
    early and is returned even when it is not the requested page.
    """

    def __init__(
        self,
        store: TaskStore,
        *,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = MAX_PAGE_SIZE,
    ) -> None:
        self.store = store
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size

    def normalize_page_size(self, page_size: int) -> int:
        # The default doubles as a floor: sizes below it are raised to it.
        if page_size > self.max_page_size:
            page_size = self.max_page_size
        if page_size < self.default_page_size:
            page_size = self.default_page_size
        return page_size

    @staticmethod
    def normalize_page_number(page_number: int) -> int:
        return max(page_number, 0)

    async def get_page(self, page_size: int, page_number: int) -> Union[List[Task], str]:
        """Return the rows of page ``page_number`` (1-based)."""
        page_size = self.normalize_page_size(page_size)
        page_number = self.normalize_page_number(page_number)

        token = None
        for i in range(page_number):
            rows, count, next_token = await self.store.scan_page(page_size, token)

            if count == 0:
                return []
            if count < page_size:
                return rows
            if i == page_number - 1:
                return rows
            if not next_token:
                return []

            token = next_token

        return PAGE_ZERO_RESULT
