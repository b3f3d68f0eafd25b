"""Paged reads for Supabase selects."""

from collections.abc import Callable
from typing import Any

# Matches the default PostgREST max_rows; responses are cut there silently.
DEFAULT_PAGE_SIZE = 1000


def select_all(
    build_query: Callable[[], Any], page_size: int = DEFAULT_PAGE_SIZE
) -> list[dict[str, Any]]:
    """Read every row of an ordered select, one range at a time."""
    rows: list[dict[str, Any]] = []
    offset = 0
    while True:
        response = build_query().range(offset, offset + page_size - 1).execute()
        page = response.data or []
        rows.extend(page)
        if len(page) < page_size:
            return rows
        offset += page_size
