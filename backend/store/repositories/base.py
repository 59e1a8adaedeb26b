"""
Shared query helpers for the repositories

Sorting and paging work the same way for every table, so the SQL
fragments are built here and each repository supplies its own columns.

Author: TM3
Date: 2025-10-17
"""
from typing import Any, Callable, Dict, List, Optional, Sequence

from store.core.exceptions import InvalidInputError
from store.domain.page import Page, SortOrder


def like_pattern(query: str) -> str:
    """
    Build an unanchored ILIKE pattern matching query literally

    Backslash, % and _ are escaped so they match themselves.
    """
    escaped = query.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
    return f"%{escaped}%"


def order_by_clause(
    sort_by: str,
    sort_order: Optional[str],
    columns: Dict[str, str],
    tie_breaker: str,
) -> str:
    """
    Build a safe ORDER BY clause

    Args:
        sort_by: Requested sort field
        sort_order: 'asc' or 'desc' (any case); anything else sorts ascending
        columns: Whitelist mapping sort field -> SQL column
        tie_breaker: Column appended so equal values page deterministically

    Raises:
        InvalidInputError: sort_by is not in the whitelist
    """
    column = columns.get(sort_by)
    if column is None:
        raise InvalidInputError(
            "sort_by", f"Cannot sort by '{sort_by}', expected one of: {', '.join(columns)}"
        )

    direction = SortOrder.parse(sort_order).sql
    clause = f"ORDER BY {column} {direction}"
    if column != tie_breaker:
        clause += f", {tie_breaker} {direction}"
    return clause


def fetch_page(
    cursor,
    select_sql: str,
    count_sql: str,
    params: Sequence[Any],
    order_by: str,
    page: int,
    size: int,
    map_row: Callable[[dict], Any],
    sort_by: str,
    sort_order: Optional[str],
) -> Page:
    """
    Run a count query and a LIMIT/OFFSET query, return them as a Page

    Args:
        cursor: RealDictCursor
        select_sql: SELECT ... FROM ... WHERE ... (no ORDER BY / LIMIT)
        count_sql: SELECT COUNT(...) AS total FROM ... WHERE ... (same filter)
        params: Parameters shared by both queries
        order_by: ORDER BY clause from order_by_clause()
        page: 0-based page number
        size: Page size
        map_row: Row -> domain model
        sort_by: Sort field, echoed into the page
        sort_order: Sort direction, echoed into the page
    """
    cursor.execute(count_sql, list(params))
    total = cursor.fetchone()['total']

    content: List[Any] = []
    if total and page * size < total:
        cursor.execute(
            f"{select_sql}\n{order_by}\nLIMIT %s OFFSET %s",
            list(params) + [size, page * size],
        )
        content = [map_row(row) for row in cursor.fetchall()]

    return Page(
        content=content,
        page=page,
        size=size,
        total_elements=total,
        sort_by=sort_by,
        sort_order=sort_order if sort_order is not None else SortOrder.ASC.value,
    )
