"""
Order Service
Order creation with customer/product resolution, cached order reads

Author: TM3
Date: 2025-10-17
"""
import logging
from typing import Iterable, List, Optional

from store.core.cache import CacheRegion, RegionCache
from store.core.config import Settings
from store.core.exceptions import (
    CustomerNotFoundError,
    OrderNotFoundError,
    ProductNotFoundError,
)
from store.domain.order import Order
from store.domain.page import Page
from store.repositories.customer_repository import CustomerRepository
from store.repositories.order_repository import OrderRepository
from store.repositories.product_repository import ProductRepository
from store.services.base import CachedService, store_operation
from store.services.validation_service import ValidationService

logger = logging.getLogger(__name__)

# Fingerprint of the unpaged order list in the by-id region
ALL_ORDERS = "all"


class OrderService(CachedService):
    """
    Service for order operations

    Orders are created and read; there is no update or delete.

    Creating an order evicts the order regions only. The product
    with/without-orders views stay cached until their TTL runs out,
    unless ORDER_EVICTS_PRODUCT_VIEWS is enabled.
    """

    REGIONS = CacheRegion.ORDER_REGIONS

    def __init__(
        self,
        repository: Optional[OrderRepository] = None,
        customer_repository: Optional[CustomerRepository] = None,
        product_repository: Optional[ProductRepository] = None,
        cache: Optional[RegionCache] = None,
        validator: Optional[ValidationService] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__(cache=cache, validator=validator, settings=settings)
        self.repository = repository or OrderRepository()
        self.customer_repository = customer_repository or CustomerRepository()
        self.product_repository = product_repository or ProductRepository()

    # =========================================================================
    # Reads
    # =========================================================================

    @store_operation("Failed to retrieve orders")
    def get_all_orders(
        self,
        page: Optional[int] = None,
        size: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None
    ) -> Page:
        """
        Get one page of orders with customer and products

        Args:
            page: 0-based page number (default 0)
            size: Page size (default settings.DEFAULT_PAGE_SIZE)
            sort_by: 'id', 'description' or 'customer_id'
            sort_order: 'asc' or 'desc'
        """
        page, size, sort_by, sort_order = self._resolve_paging(
            page, size, sort_by, sort_order, OrderRepository.SORTABLE_FIELDS
        )
        logger.debug(
            f"Retrieving orders - page: {page}, size: {size}, sort_by: {sort_by}, sort_order: {sort_order}"
        )

        return self._cached(
            CacheRegion.ORDER_PAGE,
            self._page_fingerprint(page, size, sort_by, sort_order),
            lambda: self.repository.find_all_paged(page, size, sort_by, sort_order),
        )

    @store_operation("Failed to retrieve orders")
    def list_all_orders(self) -> List[Order]:
        """Get every order, unpaged"""
        logger.debug("Retrieving all orders")
        return self._cached(CacheRegion.ORDER_BY_ID, ALL_ORDERS, self.repository.find_all)

    @store_operation("Failed to retrieve order")
    def get_order_by_id(self, order_id: int) -> Order:
        """
        Get an order by ID

        Raises:
            RequiredFieldError / InvalidInputError: bad id
            OrderNotFoundError: no order with that id
        """
        logger.debug(f"Retrieving order with ID: {order_id}")
        self.validator.validate_order_id(order_id)

        cached = self.cache.get(CacheRegion.ORDER_BY_ID, order_id)
        if cached is not None:
            return cached

        order = self.repository.find_by_id(order_id)
        if order is None:
            logger.warning(f"Order not found with ID: {order_id}")
            raise OrderNotFoundError.with_id(order_id)

        self.cache.put(CacheRegion.ORDER_BY_ID, order_id, order)
        return order

    # =========================================================================
    # Writes
    # =========================================================================

    @store_operation("Failed to create order")
    def create_order(
        self,
        description: Optional[str],
        customer_id: int,
        product_ids: Optional[Iterable[int]] = None
    ) -> Order:
        """
        Create an order for an existing customer

        Args:
            description: Free text, stored as given
            customer_id: Customer placing the order (must exist)
            product_ids: Products to include; repeats collapse to one

        Product ids that do not exist are dropped when
        ORDER_DROP_MISSING_PRODUCTS is on (default) and rejected otherwise.

        Raises:
            CustomerNotFoundError: customer_id does not exist (nothing is saved)
            ProductNotFoundError: unknown product ids with dropping disabled
        """
        logger.debug(f"Creating order for customer ID: {customer_id}")
        self.validator.validate_customer_id(customer_id, field="customer_id")

        customer = self.customer_repository.find_by_id(customer_id)
        if customer is None:
            logger.warning(f"Customer not found with ID: {customer_id}")
            raise CustomerNotFoundError.with_id(customer_id)

        requested = list(dict.fromkeys(product_ids or []))
        products = self.product_repository.find_all_by_ids(requested) if requested else []

        missing = sorted(set(requested) - {product.id for product in products})
        if missing:
            if not self.settings.ORDER_DROP_MISSING_PRODUCTS:
                logger.warning(f"Order rejected, unknown product IDs: {missing}")
                raise ProductNotFoundError.with_id(missing)
            logger.warning(f"Dropping unknown product IDs from order: {missing}")

        saved = self.repository.save(
            Order(description=description, customer=customer, products=products)
        )

        extra = CacheRegion.PRODUCT_ORDER_VIEW_REGIONS if self.settings.ORDER_EVICTS_PRODUCT_VIEWS else ()
        self._evict_all(extra)

        logger.info(f"Successfully created order with ID: {saved.id}")
        return saved
