"""
Store Core - customers, products and orders behind a region cache

Author: TM3
Date: 2025-10-17
"""
__version__ = "1.0.0"
