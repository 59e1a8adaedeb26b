"""
Service Layer - validation, caching and persistence orchestration

Author: TM3
Date: 2025-10-17
"""
from store.services.validation_service import ValidationService
from store.services.customer_service import CustomerService
from store.services.product_service import ProductService
from store.services.order_service import OrderService

__all__ = [
    'ValidationService',
    'CustomerService',
    'ProductService',
    'OrderService',
]
