"""
Product Repository - Data Access Layer for Products

Handles all database queries for products and returns Product domain models.

Author: TM3
Date: 2025-10-17
"""
from typing import Iterable, List, Optional

from store.core.database import get_db_connection_dict
from store.core.exceptions import ProductNotFoundError
from store.domain.page import Page
from store.domain.product import Product
from store.repositories.base import fetch_page, like_pattern, order_by_clause


# Products that appear in at least one order's product set
_WITH_ORDERS = "EXISTS (SELECT 1 FROM order_products op WHERE op.product_id = p.id)"


class ProductRepository:
    """
    Repository for Product data access

    All SQL queries for products are centralized here.
    Returns Product domain models, not raw dictionaries.
    """

    # Sort field -> column (products are aliased as p)
    SORTABLE_FIELDS = {
        'id': 'p.id',
        'description': 'p.description',
    }

    @staticmethod
    def _map_row_to_product(row: dict) -> Product:
        return Product(id=row['id'], description=row['description'])

    def find_by_id(self, product_id: int) -> Optional[Product]:
        """
        Find product by ID

        Returns:
            Product or None if not found
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id, description
                FROM products
                WHERE id = %s
            """, (product_id,))

            row = cursor.fetchone()
            if not row:
                return None

            return self._map_row_to_product(row)

        finally:
            cursor.close()
            conn.close()

    def find_all_by_ids(self, product_ids: Iterable[int]) -> List[Product]:
        """
        Batch lookup by ID

        Ids that do not exist are simply absent from the result.

        Returns:
            Products ordered by id, one per distinct existing id
        """
        ids = sorted({product_id for product_id in product_ids if product_id is not None})
        if not ids:
            return []

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id, description
                FROM products
                WHERE id = ANY(%s)
                ORDER BY id
            """, (ids,))

            return [self._map_row_to_product(row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def exists_by_id(self, product_id: int) -> bool:
        """Check whether a product exists"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT EXISTS(SELECT 1 FROM products WHERE id = %s) AS found
            """, (product_id,))

            return bool(cursor.fetchone()['found'])

        finally:
            cursor.close()
            conn.close()

    def save(self, product: Product) -> Product:
        """
        Insert a new product (no id) or update an existing one

        Raises:
            ProductNotFoundError: update of an id that no longer exists
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            if not product.is_persisted:
                cursor.execute("""
                    INSERT INTO products (description)
                    VALUES (%s)
                    RETURNING id, description
                """, (product.description,))
            else:
                cursor.execute("""
                    UPDATE products
                    SET description = %s
                    WHERE id = %s
                    RETURNING id, description
                """, (product.description, product.id))

            row = cursor.fetchone()
            if not row:
                conn.rollback()
                raise ProductNotFoundError.with_id(product.id)

            conn.commit()
            return self._map_row_to_product(row)

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()

    def delete_by_id(self, product_id: int) -> None:
        """
        Delete a product

        The product also leaves every order's product set (join rows cascade).
        The caller checks existence first.
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM products WHERE id = %s", (product_id,))
            conn.commit()

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()

    def find_all(self) -> List[Product]:
        """Get every product ordered by id"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id, description
                FROM products
                ORDER BY id
            """)

            return [self._map_row_to_product(row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def search(self, query: Optional[str]) -> List[Product]:
        """
        Unpaged case-insensitive substring search on description

        A None or blank query returns every product.
        """
        if query is None or not query.strip():
            return self.find_all()

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id, description
                FROM products
                WHERE description ILIKE %s
                ORDER BY id
            """, (like_pattern(query.strip()),))

            return [self._map_row_to_product(row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def _find_page(
        self,
        where: Optional[str],
        params: list,
        page: int,
        size: int,
        sort_by: str,
        sort_order: str
    ) -> Page:
        order_by = order_by_clause(sort_by, sort_order, self.SORTABLE_FIELDS, tie_breaker='p.id')
        where_clause = f"WHERE {where}" if where else ""

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            return fetch_page(
                cursor,
                select_sql=f"SELECT p.id, p.description FROM products p {where_clause}",
                count_sql=f"SELECT COUNT(*) AS total FROM products p {where_clause}",
                params=params,
                order_by=order_by,
                page=page,
                size=size,
                map_row=self._map_row_to_product,
                sort_by=sort_by,
                sort_order=sort_order,
            )

        finally:
            cursor.close()
            conn.close()

    def find_all_paged(
        self,
        page: int,
        size: int,
        sort_by: str = 'id',
        sort_order: str = 'asc'
    ) -> Page:
        """
        Get one page of all products

        Args:
            page: 0-based page number
            size: Page size
            sort_by: 'id' or 'description'
            sort_order: 'asc' or 'desc' (default asc)
        """
        return self._find_page(None, [], page, size, sort_by, sort_order)

    def search_paged(
        self,
        query: Optional[str],
        page: int,
        size: int,
        sort_by: str = 'id',
        sort_order: str = 'asc'
    ) -> Page:
        """
        Case-insensitive substring search on description

        A None or blank query returns the same page as find_all_paged.
        """
        if query is None or not query.strip():
            return self.find_all_paged(page, size, sort_by, sort_order)

        return self._find_page(
            "p.description ILIKE %s", [like_pattern(query.strip())],
            page, size, sort_by, sort_order
        )

    def find_with_orders_paged(
        self,
        page: int,
        size: int,
        sort_by: str = 'id',
        sort_order: str = 'asc'
    ) -> Page:
        """Distinct products that appear in at least one order"""
        return self._find_page(_WITH_ORDERS, [], page, size, sort_by, sort_order)

    def find_without_orders_paged(
        self,
        page: int,
        size: int,
        sort_by: str = 'id',
        sort_order: str = 'asc'
    ) -> Page:
        """Products that appear in no order"""
        return self._find_page(f"NOT {_WITH_ORDERS}", [], page, size, sort_by, sort_order)

    def _find_where(self, where: str) -> List[Product]:
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT p.id, p.description
                FROM products p
                WHERE {where}
                ORDER BY p.id
            """)

            return [self._map_row_to_product(row) for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()

    def find_with_orders(self) -> List[Product]:
        """Every distinct product that appears in at least one order, ordered by id"""
        return self._find_where(_WITH_ORDERS)

    def find_without_orders(self) -> List[Product]:
        """Every product that appears in no order, ordered by id"""
        return self._find_where(f"NOT {_WITH_ORDERS}")
