"""
Customer Repository - Data Access Layer for Customers

Handles all database queries for customers and returns Customer domain models.

Author: TM3
Date: 2025-10-17
"""
from typing import Optional

from store.core.database import get_db_connection_dict
from store.core.exceptions import CustomerNotFoundError
from store.domain.customer import Customer
from store.domain.page import Page
from store.repositories.base import fetch_page, like_pattern, order_by_clause


class CustomerRepository:
    """
    Repository for Customer data access

    All SQL queries for customers are centralized here.
    Returns Customer domain models, not raw dictionaries.
    """

    # Sort field -> column
    SORTABLE_FIELDS = {
        'id': 'id',
        'name': 'name',
    }

    @staticmethod
    def _map_row_to_customer(row: dict) -> Customer:
        return Customer(id=row['id'], name=row['name'])

    def find_by_id(self, customer_id: int) -> Optional[Customer]:
        """
        Find customer by ID

        Returns:
            Customer or None if not found
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT id, name
                FROM customers
                WHERE id = %s
            """, (customer_id,))

            row = cursor.fetchone()
            if not row:
                return None

            return self._map_row_to_customer(row)

        finally:
            cursor.close()
            conn.close()

    def exists_by_id(self, customer_id: int) -> bool:
        """Check whether a customer exists"""
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                SELECT EXISTS(SELECT 1 FROM customers WHERE id = %s) AS found
            """, (customer_id,))

            return bool(cursor.fetchone()['found'])

        finally:
            cursor.close()
            conn.close()

    def save(self, customer: Customer) -> Customer:
        """
        Insert a new customer (no id) or update an existing one

        Returns:
            The stored customer, with its id assigned

        Raises:
            CustomerNotFoundError: update of an id that no longer exists
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            if not customer.is_persisted:
                cursor.execute("""
                    INSERT INTO customers (name)
                    VALUES (%s)
                    RETURNING id, name
                """, (customer.name,))
            else:
                cursor.execute("""
                    UPDATE customers
                    SET name = %s
                    WHERE id = %s
                    RETURNING id, name
                """, (customer.name, customer.id))

            row = cursor.fetchone()
            if not row:
                conn.rollback()
                raise CustomerNotFoundError.with_id(customer.id)

            conn.commit()
            return self._map_row_to_customer(row)

        except Exception:
            conn.rollback()
            raise

        finally:
            cursor.close()
            conn.close()

    def delete_by_id(self, customer_id: int) -> None:
        """
        Delete a customer

        The caller checks existence first; deleting a missing id is a no-op.
        A customer that still owns orders is rejected by the foreign key.
        """
        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            cursor.execute("DELETE FROM customers WHERE id = %s", (customer_id,))
            conn.commit()

        except Exception:
            conn.rollback()
            raise

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
        Get one page of all customers

        Args:
            page: 0-based page number
            size: Page size
            sort_by: 'id' or 'name'
            sort_order: 'asc' or 'desc' (default asc)

        Returns:
            Page of Customer
        """
        order_by = order_by_clause(sort_by, sort_order, self.SORTABLE_FIELDS, tie_breaker='id')

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            return fetch_page(
                cursor,
                select_sql="SELECT id, name FROM customers",
                count_sql="SELECT COUNT(*) AS total FROM customers",
                params=[],
                order_by=order_by,
                page=page,
                size=size,
                map_row=self._map_row_to_customer,
                sort_by=sort_by,
                sort_order=sort_order,
            )

        finally:
            cursor.close()
            conn.close()

    def search_paged(
        self,
        query: Optional[str],
        page: int,
        size: int,
        sort_by: str = 'id',
        sort_order: str = 'asc'
    ) -> Page:
        """
        Case-insensitive substring search on customer name

        A None or blank query returns the same page as find_all_paged.
        """
        if query is None or not query.strip():
            return self.find_all_paged(page, size, sort_by, sort_order)

        order_by = order_by_clause(sort_by, sort_order, self.SORTABLE_FIELDS, tie_breaker='id')
        pattern = like_pattern(query.strip())

        conn = get_db_connection_dict()
        cursor = conn.cursor()

        try:
            return fetch_page(
                cursor,
                select_sql="SELECT id, name FROM customers WHERE name ILIKE %s",
                count_sql="SELECT COUNT(*) AS total FROM customers WHERE name ILIKE %s",
                params=[pattern],
                order_by=order_by,
                page=page,
                size=size,
                map_row=self._map_row_to_customer,
                sort_by=sort_by,
                sort_order=sort_order,
            )

        finally:
            cursor.close()
            conn.close()
