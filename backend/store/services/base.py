"""
Cached Service Base
Cache-aside reads, region eviction on writes, and failure wrapping
shared by the customer, product and order services

Author: TM3
Date: 2025-10-17
"""
import functools
import logging
from typing import Any, Callable, Iterable, Optional, Tuple

from store.core.cache import NullCache, RegionCache, make_fingerprint
from store.core.config import Settings, get_settings
from store.core.exceptions import (
    NotFoundError,
    OperationFailure,
    ValidationException,
)
from store.services.validation_service import ValidationService

logger = logging.getLogger(__name__)


def store_operation(failure_message: str):
    """
    Wrap unexpected errors of a service call into OperationFailure

    ValidationException and NotFoundError pass through untouched.
    Nothing is retried.

    Usage:
        @store_operation("Failed to create customer")
        def create_customer(self, name): ...
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except (ValidationException, NotFoundError, OperationFailure):
                raise
            except Exception as e:
                logger.error(f"{failure_message}: {e}", exc_info=True)
                raise OperationFailure(failure_message, original_error=e) from e
        return wrapper
    return decorator


class CachedService:
    """
    Base class for entity services

    Subclasses set REGIONS to every cache region of their entity type;
    _evict_all() drops all of them after a successful write.
    """

    REGIONS: Tuple[str, ...] = ()

    def __init__(
        self,
        cache: Optional[RegionCache] = None,
        validator: Optional[ValidationService] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        if cache is None:
            cache = RegionCache.from_settings(self.settings) if self.settings.CACHE_ENABLED else NullCache()
        self.cache = cache
        self.validator = validator or ValidationService()

    # =========================================================================
    # Cache helpers
    # =========================================================================

    def _cached(self, region: str, fingerprint: Any, loader: Callable[[], Any]) -> Any:
        """
        Cache-aside read

        Returns the cached value on hit; on miss calls loader(), caches a
        non-None result and returns it.
        """
        value = self.cache.get(region, fingerprint)
        if value is not None:
            return value

        value = loader()
        self.cache.put(region, fingerprint, value)
        return value

    def _evict_all(self, extra_regions: Iterable[str] = ()) -> None:
        """Evict every region of this entity type (plus extra_regions)"""
        self.cache.evict_regions(tuple(self.REGIONS) + tuple(extra_regions))

    # =========================================================================
    # Paging helpers
    # =========================================================================

    def _resolve_paging(
        self,
        page: Optional[int],
        size: Optional[int],
        sort_by: Optional[str],
        sort_order: Optional[str],
        sortable_fields: Iterable[str],
    ) -> Tuple[int, int, str, str]:
        """
        Fill in defaults and validate paging arguments

        Returns:
            (page, size, sort_by, sort_order)
        """
        page = 0 if page is None else page
        size = self.settings.DEFAULT_PAGE_SIZE if size is None else size
        sort_by = sort_by or self.settings.DEFAULT_SORT_BY
        sort_order = sort_order or self.settings.DEFAULT_SORT_ORDER

        self.validator.validate_page_request(page, size, max_size=self.settings.MAX_PAGE_SIZE)
        self.validator.validate_sort_field(sort_by, sortable_fields)

        return page, size, sort_by, sort_order

    @staticmethod
    def _page_fingerprint(page: int, size: int, sort_by: str, sort_order: str, **extra: Any) -> str:
        return make_fingerprint(page=page, size=size, sort_by=sort_by, sort_order=sort_order, **extra)
