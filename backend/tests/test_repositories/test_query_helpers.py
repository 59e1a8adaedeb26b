"""
Tests for the shared SQL helpers (LIKE escaping, ORDER BY, paging)

Author: TM3
Date: 2025-10-17
"""
import pytest
from unittest.mock import MagicMock

from store.core.exceptions import InvalidInputError
from store.repositories.base import fetch_page, like_pattern, order_by_clause

COLUMNS = {'id': 'id', 'name': 'name'}


class TestLikePattern:

    def test_wraps_query_for_substring_match(self):
        assert like_pattern('john') == '%john%'

    def test_escapes_wildcards(self):
        assert like_pattern('50%') == '%50\\%%'
        assert like_pattern('a_b') == '%a\\_b%'
        assert like_pattern('c:\\') == '%c:\\\\%'


class TestOrderByClause:

    def test_ascending_with_tie_breaker(self):
        assert order_by_clause('name', 'asc', COLUMNS, 'id') == 'ORDER BY name ASC, id ASC'

    def test_descending_any_case(self):
        assert order_by_clause('name', 'DeSc', COLUMNS, 'id') == 'ORDER BY name DESC, id DESC'

    def test_unknown_direction_sorts_ascending(self):
        assert order_by_clause('id', 'sideways', COLUMNS, 'id') == 'ORDER BY id ASC'

    def test_no_tie_breaker_when_sorting_by_it(self):
        assert order_by_clause('id', None, COLUMNS, 'id') == 'ORDER BY id ASC'

    def test_rejects_unlisted_field(self):
        with pytest.raises(InvalidInputError) as exc_info:
            order_by_clause('password', 'asc', COLUMNS, 'id')

        assert exc_info.value.field == 'sort_by'


class TestFetchPage:

    def test_maps_rows_and_computes_offset(self):
        cursor = MagicMock()
        cursor.fetchone.return_value = {'total': 7}
        cursor.fetchall.return_value = [{'id': 5}, {'id': 6}]

        page = fetch_page(
            cursor, 'SELECT id FROM t', 'SELECT COUNT(*) AS total FROM t', ['x'],
            'ORDER BY id ASC', page=2, size=2, map_row=lambda row: row['id'],
            sort_by='id', sort_order='asc',
        )

        assert page.content == [5, 6]
        assert page.total_pages == 4
        sql, params = cursor.execute.call_args_list[1][0]
        assert sql.endswith('LIMIT %s OFFSET %s')
        assert params == ['x', 2, 4]

    def test_empty_table_runs_count_only(self):
        cursor = MagicMock()
        cursor.fetchone.return_value = {'total': 0}

        page = fetch_page(
            cursor, 'SELECT id FROM t', 'SELECT COUNT(*) AS total FROM t', [],
            'ORDER BY id ASC', page=0, size=10, map_row=dict,
            sort_by='id', sort_order=None,
        )

        assert page.content == []
        assert page.first is True
        assert page.last is True
        assert page.sort_order == 'asc'
        assert cursor.execute.call_count == 1
