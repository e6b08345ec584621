"""Errors raised by the product service and its store."""


class ProductCacheError(Exception):
    """Base class for all product service errors"""


class SessionStateError(ProductCacheError):
    """Session opened twice, or an operation attempted without an open session"""


class NotFoundError(ProductCacheError):
    """Update or delete targeted a product id with no matching row"""

    def __init__(self, product_id):
        super().__init__(f"Product not found: {product_id}")
        self.product_id = product_id


class StoreConnectivityError(ProductCacheError):
    """Wraps a failure of the underlying database (connection or query)"""
