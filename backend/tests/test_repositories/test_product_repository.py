"""
Unit tests for ProductRepository

These tests validate repository logic without requiring a database connection.

Author: TM3
Date: 2025-10-17
"""
import pytest
from unittest.mock import MagicMock, patch

from store.domain.product import Product
from store.repositories.product_repository import ProductRepository


@pytest.fixture
def mock_db():
    with patch('store.repositories.product_repository.get_db_connection_dict') as mock_get_conn:
        mock_conn = MagicMock()
        mock_cursor = MagicMock()
        mock_get_conn.return_value = mock_conn
        mock_conn.cursor.return_value = mock_cursor
        yield mock_conn, mock_cursor


class TestProductRepository:
    """Test ProductRepository methods"""

    def test_find_by_id_returns_product(self, mock_db):
        mock_conn, mock_cursor = mock_db
        mock_cursor.fetchone.return_value = {'id': 1, 'description': 'Wireless Mouse'}

        product = ProductRepository().find_by_id(1)

        assert product == Product(id=1, description='Wireless Mouse')
        mock_cursor.close.assert_called_once()
        mock_conn.close.assert_called_once()

    def test_find_all_by_ids_deduplicates_and_skips_query_when_empty(self, mock_db):
        mock_conn, mock_cursor = mock_db
        mock_cursor.fetchall.return_value = [{'id': 1, 'description': 'Wireless Mouse'}]

        products = ProductRepository().find_all_by_ids([9999, 1, 1])

        sql, params = mock_cursor.execute.call_args[0]
        assert 'id = ANY(%s)' in sql
        assert params == ([1, 9999],)
        assert [p.id for p in products] == [1]

        mock_cursor.reset_mock()
        assert ProductRepository().find_all_by_ids([]) == []
        mock_cursor.execute.assert_not_called()

    def test_save_inserts_new_product(self, mock_db):
        mock_conn, mock_cursor = mock_db
        mock_cursor.fetchone.return_value = {'id': 4, 'description': 'Desk Lamp'}

        saved = ProductRepository().save(Product(description='Desk Lamp'))

        assert 'INSERT INTO products' in mock_cursor.execute.call_args[0][0]
        assert saved.id == 4
        mock_conn.commit.assert_called_once()

    def test_search_escapes_like_wildcards(self, mock_db):
        _, mock_cursor = mock_db
        mock_cursor.fetchall.return_value = []

        ProductRepository().search('100%_off')

        params = mock_cursor.execute.call_args[0][1]
        assert params == ('%100\\%\\_off%',)

    def test_search_blank_returns_all(self, mock_db):
        _, mock_cursor = mock_db
        mock_cursor.fetchall.return_value = [{'id': 1, 'description': 'Wireless Mouse'}]

        products = ProductRepository().search(None)

        assert 'ILIKE' not in mock_cursor.execute.call_args[0][0]
        assert len(products) == 1

    def test_search_paged_filters_description(self, mock_db):
        _, mock_cursor = mock_db
        mock_cursor.fetchone.return_value = {'total': 1}
        mock_cursor.fetchall.return_value = [{'id': 2, 'description': 'Mechanical Keyboard'}]

        page = ProductRepository().search_paged('keyboard', 0, 5, 'description', 'asc')

        select_sql, params = mock_cursor.execute.call_args_list[1][0]
        assert 'p.description ILIKE %s' in select_sql
        assert 'ORDER BY p.description ASC, p.id ASC' in select_sql
        assert params == ['%keyboard%', 5, 0]
        assert page.content[0].description == 'Mechanical Keyboard'

    def test_find_with_orders_paged_uses_exists(self, mock_db):
        _, mock_cursor = mock_db
        mock_cursor.fetchone.return_value = {'total': 0}

        page = ProductRepository().find_with_orders_paged(0, 10)

        count_sql = mock_cursor.execute.call_args_list[0][0][0]
        assert 'WHERE EXISTS (SELECT 1 FROM order_products' in count_sql
        assert page.total_elements == 0

    def test_find_without_orders_paged_uses_not_exists(self, mock_db):
        _, mock_cursor = mock_db
        mock_cursor.fetchone.return_value = {'total': 0}

        ProductRepository().find_without_orders_paged(0, 10)

        count_sql = mock_cursor.execute.call_args_list[0][0][0]
        assert 'WHERE NOT EXISTS (SELECT 1 FROM order_products' in count_sql

    def test_delete_by_id_commits(self, mock_db):
        mock_conn, mock_cursor = mock_db

        ProductRepository().delete_by_id(2)

        assert mock_cursor.execute.call_args[0][1] == (2,)
        mock_conn.commit.assert_called_once()

    def test_find_with_orders_unpaged(self, mock_db):
        _, mock_cursor = mock_db
        mock_cursor.fetchall.return_value = [{'id': 1, 'description': 'Wireless Mouse'}]

        products = ProductRepository().find_with_orders()

        sql = mock_cursor.execute.call_args[0][0]
        assert 'WHERE EXISTS (SELECT 1 FROM order_products' in sql
        assert 'ORDER BY p.id' in sql
        assert 'LIMIT' not in sql
        assert products == [Product(id=1, description='Wireless Mouse')]

    def test_find_without_orders_unpaged(self, mock_db):
        mock_conn, mock_cursor = mock_db
        mock_cursor.fetchall.return_value = []

        assert ProductRepository().find_without_orders() == []

        sql = mock_cursor.execute.call_args[0][0]
        assert 'WHERE NOT EXISTS (SELECT 1 FROM order_products' in sql
        mock_conn.close.assert_called_once()
