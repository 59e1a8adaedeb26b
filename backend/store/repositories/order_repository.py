"""
Order Repository - Data Access Layer for Orders

Handles all database queries for orders and returns Order domain models
with their customer and products attached.

Orders own both relationships: the customer reference lives on the
orders row and the product set in order_products. The inverse views
(a customer's orders, a product's orders) are queried here on demand.

Author: TM3
Date: 2025-10-17
"""
from typing import Dict, List, Optional

from store.core.database import get_db_connection_dict
from store.core.exceptions import OrderNotFoundError
from store.domain.customer import Customer
from store.domain.order import Order
from store.domain.page import Page
from store.domain.product import Product
from store.repositories.base import fetch_page, order_by_clause


_ORDER_COLUMNS = """
    o.id, o.description, o.customer_id,
    c.name AS customer_name
"""


class OrderRepository:
    """
    Repository for Order data access

    All SQL queries for orders are centralized here.
    Returns Order domain models with related data (customer, products).
    """

    # Sort field -> column (orders are aliased as o)
    SORTABLE_FIELDS = {
        'id': 'o.id',
        'description': 'o.description',
        'customer_id': 'o.customer_id',
    }

    @staticmethod
    def _map_row_to_order(row: dict, products: Optional[List[Product]] = None) -> Order:
        return Order(
            id=row['id'],
            description=row['description'],
            customer=Customer(id=row['customer_id'], name=row['customer_name']),
            products=products or [],
        )

    @staticmethod
    def _load_products(cursor, order_ids: List[int]) -> Dict[int, List[Product]]:
        """
        Load the product sets of several orders in one query

        Returns:
            Dict of order id -> products ordered by product id
        """
        products_by_order: Dict[int, List[Product]] = {order_id: [] for order_id in order_ids}
        if not order_ids:
            return products_by_order

        cursor.execute("""
            SELECT op.order_id, p.id, p.description
            FROM order_products op
            JOIN products p ON p.id = op.product_id
            WHERE op.order_id = ANY(%s)
            ORDER BY op.order_id, p.id
        """, (list(order_ids),))

        for row in cursor.fetchall():
            products_by_order[row['order_id']].append(
                Product(id=row['id'], description=row['description'])
            )

        return products_by_order

    def find_by_id(self, order_id: int) -> Optional[Order]:
        """
        Find order by ID with customer and products

        Returns:
            Order or None if not found
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {_ORDER_COLUMNS}
                FROM orders o
                JOIN customers c ON c.id = o.customer_id
                WHERE o.id = %s
            """, (order_id,))

            row = cursor.fetchone()
            if not row:
                return None

            products = self._load_products(cursor, [row['id']])
            return self._map_row_to_order(row, products[row['id']])

        finally:
            cursor.close()
            conn.close()

    def exists_by_id(self, order_id: int) -> bool:
        """Check whether an order exists"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT EXISTS(SELECT 1 FROM orders WHERE id = %s) AS found
            """, (order_id,))

            return bool(cursor.fetchone()['found'])

        finally:
            cursor.close()
            conn.close()

    def save(self, order: Order) -> Order:
        """
        Insert a new order (no id) or update an existing one

        The order row and its product set are written in one transaction.
        On update the product set is replaced.

        Returns:
            The stored order with its id assigned

        Raises:
            OrderNotFoundError: update of an id that no longer exists
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            if order.id is None:
                cursor.execute("""
                    INSERT INTO orders (description, customer_id)
                    VALUES (%s, %s)
                    RETURNING id
                """, (order.description, order.customer_id))
            else:
                cursor.execute("""
                    UPDATE orders
                    SET description = %s, customer_id = %s
                    WHERE id = %s
                    RETURNING id
                """, (order.description, order.customer_id, order.id))

            row = cursor.fetchone()
            if not row:
                raise OrderNotFoundError.with_id(order.id)

            order_id = row['id']

            if order.id is not None:
                cursor.execute("DELETE FROM order_products WHERE order_id = %s", (order_id,))

            for product_id in order.product_ids:
                cursor.execute("""
                    INSERT INTO order_products (order_id, product_id)
                    VALUES (%s, %s)
                    ON CONFLICT DO NOTHING
                """, (order_id, product_id))

            conn.commit()
            return order.model_copy(update={'id': order_id})

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()

    def find_all(self) -> List[Order]:
        """Get every order with customer and products, ordered by id"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {_ORDER_COLUMNS}
                FROM orders o
                JOIN customers c ON c.id = o.customer_id
                ORDER BY o.id
            """)

            rows = cursor.fetchall()
            products = self._load_products(cursor, [row['id'] for row in rows])
            return [self._map_row_to_order(row, products[row['id']]) for row in rows]

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
        Get one page of orders with customer and products

        Args:
            page: 0-based page number
            size: Page size
            sort_by: 'id', 'description' or 'customer_id'
            sort_order: 'asc' or 'desc' (default asc)
        """
        order_by = order_by_clause(sort_by, sort_order, self.SORTABLE_FIELDS, tie_breaker='o.id')

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            result = fetch_page(
                cursor,
                select_sql=f"""
                    SELECT {_ORDER_COLUMNS}
                    FROM orders o
                    JOIN customers c ON c.id = o.customer_id
                """,
                count_sql="SELECT COUNT(*) AS total FROM orders o",
                params=[],
                order_by=order_by,
                page=page,
                size=size,
                map_row=dict,
                sort_by=sort_by,
                sort_order=sort_order,
            )

            rows = result.content
            products = self._load_products(cursor, [row['id'] for row in rows])
            return result.model_copy(update={
                'content': [self._map_row_to_order(row, products[row['id']]) for row in rows]
            })

        finally:
            cursor.close()
            conn.close()

    def find_by_customer_id(self, customer_id: int) -> List[Order]:
        """
        Get every order placed by a customer (the customer's inverse view)

        Returns:
            Orders ordered by id
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute(f"""
                SELECT {_ORDER_COLUMNS}
                FROM orders o
                JOIN customers c ON c.id = o.customer_id
                WHERE o.customer_id = %s
                ORDER BY o.id
            """, (customer_id,))

            rows = cursor.fetchall()
            products = self._load_products(cursor, [row['id'] for row in rows])
            return [self._map_row_to_order(row, products[row['id']]) for row in rows]

        finally:
            cursor.close()
            conn.close()

    def find_order_ids_by_product_id(self, product_id: int) -> List[int]:
        """Ids of the orders containing a product (the product's inverse view)"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT order_id
                FROM order_products
                WHERE product_id = %s
                ORDER BY order_id
            """, (product_id,))

            return [row['order_id'] for row in cursor.fetchall()]

        finally:
            cursor.close()
            conn.close()
