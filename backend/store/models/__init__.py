"""
Database models (schema of record)
"""
from .customer import Customer
from .product import Product
from .order import Order, order_products

__all__ = [
    "Customer",
    "Product",
    "Order",
    "order_products",
]
