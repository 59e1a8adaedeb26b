"""
Product Service
Validation, caching and persistence for products

Author: TM3
Date: 2025-10-17
"""
import logging
from typing import List, Optional

from store.core.cache import CacheRegion, RegionCache
from store.core.config import Settings
from store.core.exceptions import ProductNotFoundError, ValidationException
from store.domain.page import Page
from store.domain.product import Product
from store.repositories.order_repository import OrderRepository
from store.repositories.product_repository import ProductRepository
from store.services.base import CachedService, store_operation
from store.services.validation_service import ValidationService

logger = logging.getLogger(__name__)

# Fingerprint of an unpaged list inside a region
ALL_PRODUCTS = "all"


class ProductService(CachedService):
    """
    Service for product operations

    Product writes evict every product region, including the
    with/without-orders views. Order writes do not touch those views
    unless ORDER_EVICTS_PRODUCT_VIEWS is set (see OrderService).
    """

    REGIONS = CacheRegion.PRODUCT_REGIONS

    def __init__(
        self,
        repository: Optional[ProductRepository] = None,
        order_repository: Optional[OrderRepository] = None,
        cache: Optional[RegionCache] = None,
        validator: Optional[ValidationService] = None,
        settings: Optional[Settings] = None,
    ):
        super().__init__(cache=cache, validator=validator, settings=settings)
        self.repository = repository or ProductRepository()
        self.order_repository = order_repository or OrderRepository()

    def _paged(self, region: str, loader, page, size, sort_by, sort_order, label: str) -> Page:
        page, size, sort_by, sort_order = self._resolve_paging(
            page, size, sort_by, sort_order, ProductRepository.SORTABLE_FIELDS
        )
        logger.debug(
            f"Retrieving {label} - page: {page}, size: {size}, sort_by: {sort_by}, sort_order: {sort_order}"
        )

        return self._cached(
            region,
            self._page_fingerprint(page, size, sort_by, sort_order),
            lambda: loader(page, size, sort_by, sort_order),
        )

    # =========================================================================
    # Reads
    # =========================================================================

    @store_operation("Failed to retrieve products")
    def get_all_products(
        self,
        page: Optional[int] = None,
        size: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None
    ) -> Page:
        """
        Get one page of products

        Args:
            page: 0-based page number (default 0)
            size: Page size (default settings.DEFAULT_PAGE_SIZE)
            sort_by: 'id' or 'description'
            sort_order: 'asc' or 'desc'
        """
        return self._paged(
            CacheRegion.PRODUCT_PAGE, self.repository.find_all_paged,
            page, size, sort_by, sort_order, label="products"
        )

    @store_operation("Failed to retrieve products")
    def list_all_products(self) -> List[Product]:
        """Get every product, unpaged"""
        logger.debug("Retrieving all products")
        return self._cached(CacheRegion.PRODUCT_BY_ID, ALL_PRODUCTS, self.repository.find_all)

    @store_operation("Failed to search products")
    def search_products_by_description(
        self,
        query: Optional[str],
        page: Optional[int] = None,
        size: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None
    ) -> Page:
        """
        Case-insensitive substring search on description

        A None or blank query returns the unfiltered listing.

        Raises:
            InvalidSearchQueryError: non-empty query breaks the query rule
        """
        try:
            self.validator.validate_search_query(query)
        except ValidationException as e:
            logger.warning(f"Validation error in product search: {e.message}")
            raise

        page, size, sort_by, sort_order = self._resolve_paging(
            page, size, sort_by, sort_order, ProductRepository.SORTABLE_FIELDS
        )
        term = query.strip() if query else ""
        logger.debug(
            f"Searching products - query: '{term}', page: {page}, size: {size}, "
            f"sort_by: {sort_by}, sort_order: {sort_order}"
        )

        return self._cached(
            CacheRegion.PRODUCT_SEARCH_PAGE,
            self._page_fingerprint(page, size, sort_by, sort_order, query=term),
            lambda: self.repository.search_paged(term, page, size, sort_by, sort_order),
        )

    @store_operation("Failed to search products")
    def search_products(self, query: Optional[str]) -> List[Product]:
        """Unpaged description search (not cached)"""
        try:
            self.validator.validate_search_query(query)
        except ValidationException as e:
            logger.warning(f"Validation error in product search: {e.message}")
            raise

        products = self.repository.search(query.strip() if query else "")
        logger.debug(f"Found {len(products)} products matching query: {query!r}")
        return products

    @store_operation("Failed to retrieve product")
    def get_product_by_id(self, product_id: int) -> Product:
        """
        Get a product by ID

        Raises:
            RequiredFieldError / InvalidInputError: bad id
            ProductNotFoundError: no product with that id
        """
        logger.debug(f"Retrieving product with ID: {product_id}")
        self.validator.validate_product_id(product_id)

        cached = self.cache.get(CacheRegion.PRODUCT_BY_ID, product_id)
        if cached is not None:
            return cached

        product = self.repository.find_by_id(product_id)
        if product is None:
            logger.warning(f"Product not found with ID: {product_id}")
            raise ProductNotFoundError.with_id(product_id)

        self.cache.put(CacheRegion.PRODUCT_BY_ID, product_id, product)
        return product

    @store_operation("Failed to retrieve products with orders")
    def get_products_with_orders(
        self,
        page: Optional[int] = None,
        size: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None
    ) -> Page:
        """Page of distinct products that appear in at least one order"""
        return self._paged(
            CacheRegion.PRODUCT_WITH_ORDERS_PAGE, self.repository.find_with_orders_paged,
            page, size, sort_by, sort_order, label="products with orders"
        )

    @store_operation("Failed to retrieve products without orders")
    def get_products_without_orders(
        self,
        page: Optional[int] = None,
        size: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None
    ) -> Page:
        """Page of products that appear in no order"""
        return self._paged(
            CacheRegion.PRODUCT_WITHOUT_ORDERS_PAGE, self.repository.find_without_orders_paged,
            page, size, sort_by, sort_order, label="products without orders"
        )

    @store_operation("Failed to retrieve products with orders")
    def list_products_with_orders(self) -> List[Product]:
        """Every product that appears in at least one order, unpaged"""
        logger.debug("Retrieving all products with orders")
        return self._cached(
            CacheRegion.PRODUCT_WITH_ORDERS_PAGE, ALL_PRODUCTS, self.repository.find_with_orders
        )

    @store_operation("Failed to retrieve products without orders")
    def list_products_without_orders(self) -> List[Product]:
        """Every product that appears in no order, unpaged"""
        logger.debug("Retrieving all products without orders")
        return self._cached(
            CacheRegion.PRODUCT_WITHOUT_ORDERS_PAGE, ALL_PRODUCTS, self.repository.find_without_orders
        )

    @store_operation("Failed to retrieve product orders")
    def get_product_order_ids(self, product_id: int) -> List[int]:
        """
        Ids of the orders containing a product (computed by query, not cached)

        Raises:
            ProductNotFoundError: no product with that id
        """
        self.validator.validate_product_id(product_id)

        if not self.repository.exists_by_id(product_id):
            logger.warning(f"Product not found with ID: {product_id}")
            raise ProductNotFoundError.with_id(product_id)

        return self.order_repository.find_order_ids_by_product_id(product_id)

    # =========================================================================
    # Writes
    # =========================================================================

    @store_operation("Failed to create product")
    def create_product(self, description: Optional[str]) -> Product:
        """
        Create a product with a title-cased description

        Returns:
            The created product with its id
        """
        logger.debug(f"Creating new product: {description!r}")
        self.validator.validate_product_description(description)

        saved = self.repository.save(
            Product(description=self.validator.sanitize_description(description))
        )
        self._evict_all()

        logger.info(f"Successfully created product with ID: {saved.id}")
        return saved

    @store_operation("Failed to update product")
    def update_product(self, product_id: int, description: Optional[str]) -> Product:
        """
        Change a product's description (id preserved)

        Raises:
            ProductNotFoundError: no product with that id
        """
        logger.debug(f"Updating product with ID: {product_id}")
        self.validator.validate_product_id(product_id)
        self.validator.validate_product_description(description)

        existing = self.repository.find_by_id(product_id)
        if existing is None:
            logger.warning(f"Product not found for update with ID: {product_id}")
            raise ProductNotFoundError.with_id(product_id)

        updated = self.repository.save(
            existing.model_copy(update={'description': self.validator.sanitize_description(description)})
        )
        self._evict_all()

        logger.info(f"Successfully updated product with ID: {product_id}")
        return updated

    @store_operation("Failed to delete product")
    def delete_product(self, product_id: int) -> None:
        """
        Delete a product (it also leaves every order's product set)

        Raises:
            ProductNotFoundError: no product with that id
        """
        logger.debug(f"Deleting product with ID: {product_id}")
        self.validator.validate_product_id(product_id)

        if not self.repository.exists_by_id(product_id):
            logger.warning(f"Product not found for deletion with ID: {product_id}")
            raise ProductNotFoundError.with_id(product_id)

        self.repository.delete_by_id(product_id)
        self._evict_all()

        logger.info(f"Successfully deleted product with ID: {product_id}")
