"""
Region Cache - process-wide read cache in front of the repositories

Entries are addressed by (region, fingerprint). A region groups every
cached result of one entity type and operation shape (e.g. all customer
search pages), has its own TTL, and can be evicted in a single call.

Writes never update entries in place: services evict every region of the
written entity type and let the next read repopulate it.

Author: TM3
Date: 2025-10-17
"""
import copy
import logging
import threading
import time
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from cachetools import TTLCache

from store.core.config import Settings

logger = logging.getLogger(__name__)


# ============================================================================
# Region names
# ============================================================================

class CacheRegion:
    """Names of every cache region, grouped by entity type"""

    CUSTOMER_BY_ID = "customer-by-id"
    CUSTOMER_PAGE = "customer-page"
    CUSTOMER_SEARCH_PAGE = "customer-search-page"

    PRODUCT_BY_ID = "product-by-id"
    PRODUCT_PAGE = "product-page"
    PRODUCT_SEARCH_PAGE = "product-search-page"
    PRODUCT_WITH_ORDERS_PAGE = "product-with-orders-page"
    PRODUCT_WITHOUT_ORDERS_PAGE = "product-without-orders-page"

    ORDER_BY_ID = "order-by-id"
    ORDER_PAGE = "order-page"

    CUSTOMER_REGIONS: Tuple[str, ...] = (
        CUSTOMER_BY_ID,
        CUSTOMER_PAGE,
        CUSTOMER_SEARCH_PAGE,
    )
    PRODUCT_REGIONS: Tuple[str, ...] = (
        PRODUCT_BY_ID,
        PRODUCT_PAGE,
        PRODUCT_SEARCH_PAGE,
        PRODUCT_WITH_ORDERS_PAGE,
        PRODUCT_WITHOUT_ORDERS_PAGE,
    )
    PRODUCT_ORDER_VIEW_REGIONS: Tuple[str, ...] = (
        PRODUCT_WITH_ORDERS_PAGE,
        PRODUCT_WITHOUT_ORDERS_PAGE,
    )
    ORDER_REGIONS: Tuple[str, ...] = (
        ORDER_BY_ID,
        ORDER_PAGE,
    )


# Used for any region without an explicit TTL
DEFAULT_TTL_SECONDS = 600


def build_region_ttls(settings: Settings) -> Dict[str, float]:
    """
    Map every known region to its TTL in seconds

    Args:
        settings: Application settings holding TTLs in minutes

    Returns:
        Dict of region name -> TTL seconds
    """
    paged = settings.CACHE_TTL_PAGED * 60

    return {
        CacheRegion.CUSTOMER_BY_ID: settings.CACHE_TTL_CUSTOMER * 60,
        CacheRegion.CUSTOMER_PAGE: paged,
        CacheRegion.CUSTOMER_SEARCH_PAGE: paged,
        CacheRegion.PRODUCT_BY_ID: settings.CACHE_TTL_PRODUCT * 60,
        CacheRegion.PRODUCT_PAGE: paged,
        CacheRegion.PRODUCT_SEARCH_PAGE: paged,
        CacheRegion.PRODUCT_WITH_ORDERS_PAGE: paged,
        CacheRegion.PRODUCT_WITHOUT_ORDERS_PAGE: paged,
        CacheRegion.ORDER_BY_ID: settings.CACHE_TTL_ORDER * 60,
        CacheRegion.ORDER_PAGE: paged,
    }


def make_fingerprint(**params: Any) -> str:
    """
    Build a deterministic key from every parameter that shapes a result

    Keys are sorted so argument order never matters. Strings are repr'd,
    so None, '' and 'None' stay distinct.

    Example:
        make_fingerprint(page=0, size=20, sort_by='id', sort_order='asc', query='john')
        -> "page=0|query='john'|size=20|sort_by='id'|sort_order='asc'"
    """
    return "|".join(f"{name}={params[name]!r}" for name in sorted(params))


class _Region:
    """One TTL-bounded map plus the lock that guards it"""

    __slots__ = ("name", "entries", "lock")

    def __init__(self, name: str, maxsize: int, ttl: float, timer: Callable[[], float]):
        self.name = name
        self.entries = TTLCache(maxsize=maxsize, ttl=ttl, timer=timer)
        self.lock = threading.RLock()


class RegionCache:
    """
    Thread-safe keyed cache partitioned into evictable regions

    Features:
    - Per-region TTL (see build_region_ttls)
    - Size-bounded regions (LRU once maxsize is reached)
    - evict_region() drops every entry of a region regardless of fingerprint
    - None is never cached, so a miss stays a miss
    - Values are copied on the way in and out, callers never share
      mutable state with the cache

    Construct one instance per process and pass it to the services.
    """

    def __init__(
        self,
        region_ttls: Optional[Dict[str, float]] = None,
        maxsize: int = 1024,
        default_ttl: float = DEFAULT_TTL_SECONDS,
        timer: Callable[[], float] = time.monotonic,
    ):
        self._region_ttls = dict(region_ttls or {})
        self._maxsize = maxsize
        self._default_ttl = default_ttl
        self._timer = timer
        self._regions: Dict[str, _Region] = {}
        self._regions_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "RegionCache":
        """Create a cache with the TTLs configured in settings"""
        return cls(
            region_ttls=build_region_ttls(settings),
            maxsize=settings.CACHE_MAX_ENTRIES,
        )

    def _region(self, name: str) -> _Region:
        region = self._regions.get(name)
        if region is not None:
            return region

        with self._regions_lock:
            region = self._regions.get(name)
            if region is None:
                ttl = self._region_ttls.get(name, self._default_ttl)
                region = _Region(name, self._maxsize, ttl, self._timer)
                self._regions[name] = region
            return region

    def ttl_for(self, region: str) -> float:
        """TTL in seconds applied to a region"""
        return self._region_ttls.get(region, self._default_ttl)

    def get(self, region: str, fingerprint: Any) -> Optional[Any]:
        """
        Look up a cached value

        Returns:
            A copy of the cached value, or None on miss or expiry
        """
        cached = self._region(region)
        with cached.lock:
            value = cached.entries.get(fingerprint)

        if value is None:
            logger.debug(f"Cache miss: {region}[{fingerprint}]")
            return None

        logger.debug(f"Cache hit: {region}[{fingerprint}]")
        return copy.deepcopy(value)

    def put(self, region: str, fingerprint: Any, value: Any) -> None:
        """Store a value; None is ignored"""
        if value is None:
            return

        stored = copy.deepcopy(value)
        cached = self._region(region)
        with cached.lock:
            cached.entries[fingerprint] = stored

    def evict_region(self, region: str) -> None:
        """Remove every entry in a region"""
        cached = self._region(region)
        with cached.lock:
            removed = len(cached.entries)
            cached.entries.clear()

        logger.debug(f"Evicted region {region} ({removed} entries)")

    def evict_regions(self, regions: Iterable[str]) -> None:
        """Evict several regions, one after the other"""
        for region in regions:
            self.evict_region(region)

    def clear(self) -> None:
        """Drop every region (used at shutdown)"""
        with self._regions_lock:
            regions = list(self._regions.values())
            self._regions = {}

        for region in regions:
            with region.lock:
                region.entries.clear()

    def size(self, region: str) -> int:
        """Number of live entries in a region"""
        cached = self._region(region)
        with cached.lock:
            cached.entries.expire()
            return len(cached.entries)

    def stats(self) -> Dict[str, Dict[str, float]]:
        """Entry count and TTL for every region created so far"""
        with self._regions_lock:
            names = list(self._regions)

        return {
            name: {"entries": self.size(name), "ttl_seconds": self.ttl_for(name)}
            for name in names
        }


class NullCache(RegionCache):
    """Cache that never stores anything (CACHE_ENABLED=false)"""

    def get(self, region: str, fingerprint: Any) -> Optional[Any]:
        return None

    def put(self, region: str, fingerprint: Any, value: Any) -> None:
        return None
