"""Product management with a cache-aside layer over SQLite."""

from product_cache.exceptions import (
    NotFoundError,
    ProductCacheError,
    SessionStateError,
    StoreConnectivityError,
)
from product_cache.models.product import Product
from product_cache.models.products import ProductService
from product_cache.utils.cache import HashMapProductCache, NullCache, ProductCache, get_cache

__all__ = [
    'HashMapProductCache',
    'NotFoundError',
    'NullCache',
    'Product',
    'ProductCache',
    'ProductCacheError',
    'ProductService',
    'SessionStateError',
    'StoreConnectivityError',
    'get_cache',
]
