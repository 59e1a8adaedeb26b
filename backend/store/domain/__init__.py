"""
Domain Layer - Business Entities

This layer contains Pydantic models representing business entities.
These models enforce type safety across repositories and services.

Author: TM3
Date: 2025-10-17
"""
from store.domain.customer import Customer
from store.domain.product import Product
from store.domain.order import Order
from store.domain.page import Page, SortOrder

__all__ = ['Customer', 'Product', 'Order', 'Page', 'SortOrder']
