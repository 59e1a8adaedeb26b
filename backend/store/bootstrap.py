"""
Store bootstrap
Builds the process-wide cache and the services that share it

Usage:
    services = create_services(configure_log=True)  # entry-point scripts
    customer = services.customers.create_customer("jane doe")
    ...
    services.shutdown()

Author: TM3
Date: 2025-10-17
"""
import logging
from dataclasses import dataclass
from typing import Optional

from store.core.cache import NullCache, RegionCache
from store.core.config import Settings, get_settings
from store.core.database import create_schema, dispose_engine
from store.repositories import CustomerRepository, OrderRepository, ProductRepository
from store.services import CustomerService, OrderService, ProductService, ValidationService

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for scripts and workers"""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


@dataclass
class StoreServices:
    """Services of one process, all sharing one cache"""
    settings: Settings
    cache: RegionCache
    customers: CustomerService
    products: ProductService
    orders: OrderService

    def shutdown(self) -> None:
        """Drop cached entries and release pooled connections"""
        self.cache.clear()
        dispose_engine()
        logger.info("Store services shut down")


def create_services(
    settings: Optional[Settings] = None,
    cache: Optional[RegionCache] = None,
    init_schema: bool = False,
    configure_log: bool = False,
) -> StoreServices:
    """
    Wire repositories, validator, cache and services together

    Args:
        settings: Settings to use (default: environment)
        cache: Cache to share (default: built from settings)
        init_schema: Create missing tables first
        configure_log: Configure root logging from settings.LOG_LEVEL (entry points only)

    Returns:
        StoreServices
    """
    settings = settings or get_settings()
    if configure_log:
        configure_logging(settings.LOG_LEVEL)

    if cache is None:
        cache = RegionCache.from_settings(settings) if settings.CACHE_ENABLED else NullCache()

    if init_schema:
        create_schema()

    validator = ValidationService()
    customer_repository = CustomerRepository()
    product_repository = ProductRepository()
    order_repository = OrderRepository()

    services = StoreServices(
        settings=settings,
        cache=cache,
        customers=CustomerService(
            repository=customer_repository,
            order_repository=order_repository,
            cache=cache,
            validator=validator,
            settings=settings,
        ),
        products=ProductService(
            repository=product_repository,
            order_repository=order_repository,
            cache=cache,
            validator=validator,
            settings=settings,
        ),
        orders=OrderService(
            repository=order_repository,
            customer_repository=customer_repository,
            product_repository=product_repository,
            cache=cache,
            validator=validator,
            settings=settings,
        ),
    )

    logger.info(f"Store services ready (cache enabled: {settings.CACHE_ENABLED})")
    return services
