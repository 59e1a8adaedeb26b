"""
Customer Service
Validation, caching and persistence for customers

Author: TM3
Date: 2025-10-17
"""
import logging
from typing import List, Optional

from store.core.cache import CacheRegion, RegionCache
from store.core.config import Settings
from store.core.exceptions import CustomerNotFoundError, ValidationException
from store.domain.customer import Customer
from store.domain.order import Order
from store.domain.page import Page
from store.repositories.customer_repository import CustomerRepository
from store.repositories.order_repository import OrderRepository
from store.services.base import CachedService, store_operation
from store.services.validation_service import ValidationService

logger = logging.getLogger(__name__)


class CustomerService(CachedService):
    """
    Service for customer operations

    Reads go through the customer cache regions; every create, update
    and delete evicts all of them, since any cached page or search
    result may now be stale.
    """

    REGIONS = CacheRegion.CUSTOMER_REGIONS

    def __init__(
        self,
        repository: Optional[CustomerRepository] = None,
        order_repository: Optional[OrderRepository] = None,
        cache: Optional[RegionCache] = None,
        validator: Optional[ValidationService] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__(cache=cache, validator=validator, settings=settings)
        self.repository = repository or CustomerRepository()
        self.order_repository = order_repository or OrderRepository()

    # =========================================================================
    # Reads
    # =========================================================================

    @store_operation("Failed to retrieve customers")
    def get_all_customers(
        self,
        page: Optional[int] = None,
        size: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None
    ) -> Page:
        """
        Get one page of customers

        Args:
            page: 0-based page number (default 0)
            size: Page size (default settings.DEFAULT_PAGE_SIZE)
            sort_by: 'id' or 'name'
            sort_order: 'asc' or 'desc'

        Returns:
            Page of Customer
        """
        page, size, sort_by, sort_order = self._resolve_paging(
            page, size, sort_by, sort_order, CustomerRepository.SORTABLE_FIELDS
        )
        logger.debug(
            f"Retrieving customers - page: {page}, size: {size}, sort_by: {sort_by}, sort_order: {sort_order}"
        )

        return self._cached(
            CacheRegion.CUSTOMER_PAGE,
            self._page_fingerprint(page, size, sort_by, sort_order),
            lambda: self.repository.find_all_paged(page, size, sort_by, sort_order),
        )

    @store_operation("Failed to search customers")
    def search_customers_by_name(
        self,
        query: Optional[str],
        page: Optional[int] = None,
        size: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None
    ) -> Page:
        """
        Case-insensitive substring search on customer name

        A None or blank query returns the unfiltered listing.

        Raises:
            InvalidSearchQueryError: non-empty query breaks the query rule
        """
        try:
            self.validator.validate_search_query(query)
        except ValidationException as e:
            logger.warning(f"Validation error in customer search: {e.message}")
            raise

        page, size, sort_by, sort_order = self._resolve_paging(
            page, size, sort_by, sort_order, CustomerRepository.SORTABLE_FIELDS
        )
        term = query.strip() if query else ""
        logger.debug(
            f"Searching customers - query: '{term}', page: {page}, size: {size}, "
            f"sort_by: {sort_by}, sort_order: {sort_order}"
        )

        return self._cached(
            CacheRegion.CUSTOMER_SEARCH_PAGE,
            self._page_fingerprint(page, size, sort_by, sort_order, query=term),
            lambda: self.repository.search_paged(term, page, size, sort_by, sort_order),
        )

    @store_operation("Failed to retrieve customer")
    def get_customer_by_id(self, customer_id: int) -> Customer:
        """
        Get a customer by ID

        Raises:
            RequiredFieldError / InvalidInputError: bad id
            CustomerNotFoundError: no customer with that id
        """
        logger.debug(f"Retrieving customer with ID: {customer_id}")
        self.validator.validate_customer_id(customer_id)

        cached = self.cache.get(CacheRegion.CUSTOMER_BY_ID, customer_id)
        if cached is not None:
            return cached

        customer = self.repository.find_by_id(customer_id)
        if customer is None:
            logger.warning(f"Customer not found with ID: {customer_id}")
            raise CustomerNotFoundError.with_id(customer_id)

        self.cache.put(CacheRegion.CUSTOMER_BY_ID, customer_id, customer)
        return customer

    @store_operation("Failed to retrieve customer orders")
    def get_customer_orders(self, customer_id: int) -> List[Order]:
        """
        Get the orders placed by a customer

        Computed by query every time; orders own the relationship.

        Raises:
            CustomerNotFoundError: no customer with that id
        """
        self.validator.validate_customer_id(customer_id)

        if not self.repository.exists_by_id(customer_id):
            logger.warning(f"Customer not found with ID: {customer_id}")
            raise CustomerNotFoundError.with_id(customer_id)

        return self.order_repository.find_by_customer_id(customer_id)

    # =========================================================================
    # Writes
    # =========================================================================

    @store_operation("Failed to create customer")
    def create_customer(self, name: Optional[str]) -> Customer:
        """
        Create a customer with a title-cased name

        Returns:
            The created customer with its id
        """
        logger.debug(f"Creating new customer: {name!r}")
        self.validator.validate_customer_name(name)

        saved = self.repository.save(Customer(name=self.validator.sanitize_name(name)))
        self._evict_all()

        logger.info(f"Successfully created customer with ID: {saved.id}")
        return saved

    @store_operation("Failed to update customer")
    def update_customer(self, customer_id: int, name: Optional[str]) -> Customer:
        """
        Rename a customer (id preserved)

        Raises:
            CustomerNotFoundError: no customer with that id
        """
        logger.debug(f"Updating customer with ID: {customer_id}")
        self.validator.validate_customer_id(customer_id)
        self.validator.validate_customer_name(name)

        existing = self.repository.find_by_id(customer_id)
        if existing is None:
            logger.warning(f"Customer not found for update with ID: {customer_id}")
            raise CustomerNotFoundError.with_id(customer_id)

        updated = self.repository.save(
            existing.model_copy(update={'name': self.validator.sanitize_name(name)})
        )
        self._evict_all()

        logger.info(f"Successfully updated customer with ID: {customer_id}")
        return updated

    @store_operation("Failed to delete customer")
    def delete_customer(self, customer_id: int) -> None:
        """
        Delete a customer

        Raises:
            CustomerNotFoundError: no customer with that id
            OperationFailure: the customer still has orders
        """
        logger.debug(f"Deleting customer with ID: {customer_id}")
        self.validator.validate_customer_id(customer_id)

        if not self.repository.exists_by_id(customer_id):
            logger.warning(f"Customer not found for deletion with ID: {customer_id}")
            raise CustomerNotFoundError.with_id(customer_id)

        self.repository.delete_by_id(customer_id)
        self._evict_all()

        logger.info(f"Successfully deleted customer with ID: {customer_id}")
