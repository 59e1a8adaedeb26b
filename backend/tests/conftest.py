"""
Pytest fixtures and configuration for Store Core tests

Service tests run against in-memory repositories that honour the same
query contracts as the PostgreSQL ones (substring search, paging,
sorting), so no database is needed.

Author: TM3
Date: 2025-10-17
"""
import os

import pytest
from dotenv import load_dotenv

from store.core.cache import RegionCache, build_region_ttls
from store.core.config import Settings
from store.domain.customer import Customer
from store.domain.order import Order
from store.domain.page import Page, SortOrder
from store.domain.product import Product
from store.services.customer_service import CustomerService
from store.services.order_service import OrderService
from store.services.product_service import ProductService
from store.services.validation_service import ValidationService

# Load environment variables for integration tests
load_dotenv()


# ============================================================================
# In-memory repositories
# ============================================================================

def _page_of(items, page, size, sort_by, sort_order):
    reverse = SortOrder.parse(sort_order) is SortOrder.DESC
    ordered = sorted(items, key=lambda item: (getattr(item, sort_by) or "", item.id), reverse=reverse)
    start = page * size
    return Page(
        content=ordered[start:start + size],
        page=page,
        size=size,
        total_elements=len(ordered),
        sort_by=sort_by,
        sort_order=sort_order,
    )


class InMemoryCustomerRepository:
    SORTABLE_FIELDS = {'id': 'id', 'name': 'name'}

    def __init__(self):
        self.rows = {}
        self._next_id = 1

    def find_by_id(self, customer_id):
        return self.rows.get(customer_id)

    def exists_by_id(self, customer_id):
        return customer_id in self.rows

    def save(self, customer):
        if customer.id is None:
            customer = customer.model_copy(update={'id': self._next_id})
            self._next_id += 1
        self.rows[customer.id] = customer
        return customer

    def delete_by_id(self, customer_id):
        self.rows.pop(customer_id, None)

    def find_all_paged(self, page, size, sort_by='id', sort_order='asc'):
        return _page_of(list(self.rows.values()), page, size, sort_by, sort_order)

    def search_paged(self, query, page, size, sort_by='id', sort_order='asc'):
        if not query or not query.strip():
            return self.find_all_paged(page, size, sort_by, sort_order)
        needle = query.strip().lower()
        matches = [c for c in self.rows.values() if needle in c.name.lower()]
        return _page_of(matches, page, size, sort_by, sort_order)


class InMemoryProductRepository:
    SORTABLE_FIELDS = {'id': 'p.id', 'description': 'p.description'}

    def __init__(self, orders=None):
        self.rows = {}
        self.orders = orders
        self._next_id = 1

    def find_by_id(self, product_id):
        return self.rows.get(product_id)

    def find_all_by_ids(self, product_ids):
        return [self.rows[i] for i in sorted(set(product_ids)) if i in self.rows]

    def exists_by_id(self, product_id):
        return product_id in self.rows

    def save(self, product):
        if product.id is None:
            product = product.model_copy(update={'id': self._next_id})
            self._next_id += 1
        self.rows[product.id] = product
        return product

    def delete_by_id(self, product_id):
        self.rows.pop(product_id, None)

    def find_all(self):
        return [self.rows[i] for i in sorted(self.rows)]

    def search(self, query):
        if not query or not query.strip():
            return self.find_all()
        needle = query.strip().lower()
        return [p for p in self.find_all() if needle in p.description.lower()]

    def find_all_paged(self, page, size, sort_by='id', sort_order='asc'):
        return _page_of(list(self.rows.values()), page, size, sort_by, sort_order)

    def search_paged(self, query, page, size, sort_by='id', sort_order='asc'):
        return _page_of(self.search(query), page, size, sort_by, sort_order)

    def _ordered_ids(self):
        return {pid for order in self.orders.rows.values() for pid in order.product_ids}

    def find_with_orders(self):
        ordered = self._ordered_ids()
        return [p for p in self.find_all() if p.id in ordered]

    def find_without_orders(self):
        ordered = self._ordered_ids()
        return [p for p in self.find_all() if p.id not in ordered]

    def find_with_orders_paged(self, page, size, sort_by='id', sort_order='asc'):
        ordered = self._ordered_ids()
        return _page_of([p for p in self.rows.values() if p.id in ordered], page, size, sort_by, sort_order)

    def find_without_orders_paged(self, page, size, sort_by='id', sort_order='asc'):
        ordered = self._ordered_ids()
        return _page_of([p for p in self.rows.values() if p.id not in ordered], page, size, sort_by, sort_order)


class InMemoryOrderRepository:
    SORTABLE_FIELDS = {'id': 'o.id', 'description': 'o.description', 'customer_id': 'o.customer_id'}

    def __init__(self):
        self.rows = {}
        self._next_id = 1

    def find_by_id(self, order_id):
        return self.rows.get(order_id)

    def exists_by_id(self, order_id):
        return order_id in self.rows

    def save(self, order):
        if order.id is None:
            order = order.model_copy(update={'id': self._next_id})
            self._next_id += 1
        self.rows[order.id] = order
        return order

    def find_all(self):
        return [self.rows[i] for i in sorted(self.rows)]

    def find_all_paged(self, page, size, sort_by='id', sort_order='asc'):
        return _page_of(list(self.rows.values()), page, size, sort_by, sort_order)

    def find_by_customer_id(self, customer_id):
        return [o for o in self.rows.values() if o.customer_id == customer_id]

    def find_order_ids_by_product_id(self, product_id):
        return sorted(o.id for o in self.rows.values() if product_id in o.product_ids)


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Settings with defaults only (no .env)"""
    return Settings(_env_file=None)


@pytest.fixture
def cache(settings):
    """Fresh region cache per test"""
    return RegionCache(region_ttls=build_region_ttls(settings), maxsize=settings.CACHE_MAX_ENTRIES)


@pytest.fixture
def validator():
    return ValidationService()


@pytest.fixture
def order_repo():
    return InMemoryOrderRepository()


@pytest.fixture
def customer_repo():
    return InMemoryCustomerRepository()


@pytest.fixture
def product_repo(order_repo):
    return InMemoryProductRepository(orders=order_repo)


@pytest.fixture
def customer_service(customer_repo, order_repo, cache, validator, settings):
    return CustomerService(
        repository=customer_repo,
        order_repository=order_repo,
        cache=cache,
        validator=validator,
        settings=settings,
    )


@pytest.fixture
def product_service(product_repo, order_repo, cache, validator, settings):
    return ProductService(
        repository=product_repo,
        order_repository=order_repo,
        cache=cache,
        validator=validator,
        settings=settings,
    )


@pytest.fixture
def order_service(order_repo, customer_repo, product_repo, cache, validator, settings):
    return OrderService(
        repository=order_repo,
        customer_repository=customer_repo,
        product_repository=product_repo,
        cache=cache,
        validator=validator,
        settings=settings,
    )


@pytest.fixture
def sample_customer(customer_repo):
    """A stored customer named John Doe"""
    return customer_repo.save(Customer(name="John Doe"))


@pytest.fixture
def sample_products(product_repo):
    """Three stored products"""
    return [
        product_repo.save(Product(description="Wireless Mouse")),
        product_repo.save(Product(description="Mechanical Keyboard")),
        product_repo.save(Product(description="Usb-c Cable 2m")),
    ]


@pytest.fixture
def sample_order(order_repo, sample_customer, sample_products):
    """An order for John Doe containing the first product"""
    return order_repo.save(
        Order(description="first order", customer=sample_customer, products=[sample_products[0]])
    )


@pytest.fixture(scope="session")
def database_url():
    """
    Database URL for integration tests

    Scope: session (created once per test session)
    """
    url = os.getenv("DATABASE_URL")
    if not url:
        pytest.skip("DATABASE_URL not configured")
    return url
