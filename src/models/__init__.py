"""
Data models for catalog price sync.

This module contains pure data classes with no I/O.
"""

from .product import PriceDelta, PriceStatus, Product, normalize_asin
from .tenant import CatalogCredentials, TenantConfig

__all__ = [
    'CatalogCredentials',
    'PriceDelta',
    'PriceStatus',
    'Product',
    'TenantConfig',
    'normalize_asin',
]
