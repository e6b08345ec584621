"""In-memory product caches.

Two interchangeable variants satisfy the ProductCache capability set:
HashMapProductCache keeps products by id and search results by
lower-cased search term, NullCache stores nothing and misses on every
lookup. A miss is always reported as None; an empty list from
get_product_list means an empty search result was cached.
"""
from dataclasses import replace
from typing import Dict, List, Optional, Protocol, runtime_checkable

from product_cache.models.product import Product


def normalize_term(search_term):
    return search_term.lower()


@runtime_checkable
class ProductCache(Protocol):
    """Operations the product service needs from a cache"""

    def cache_product(self, product_id: int, product: Product) -> None: ...

    def get_product(self, product_id: int) -> Optional[Product]: ...

    def invalidate_product(self, product_id: int) -> None: ...

    def cache_product_list(self, search_term: str, products: List[Product]) -> None: ...

    def get_product_list(self, search_term: str) -> Optional[List[Product]]: ...

    def invalidate_search_term(self, search_term: str) -> None: ...

    def clear_search_cache(self) -> None: ...

    def clear_cache(self) -> None: ...

    def contains_product(self, product_id: int) -> bool: ...

    def contains_search_term(self, search_term: str) -> bool: ...


class HashMapProductCache:
    """Dictionary-backed cache for single products and search results"""

    def __init__(self):
        self._products: Dict[int, Product] = {}
        self._searches: Dict[str, List[Product]] = {}

    def cache_product(self, product_id, product):
        self._products[product_id] = replace(product)

    def get_product(self, product_id):
        return self._products.get(product_id)

    def invalidate_product(self, product_id):
        self._products.pop(product_id, None)
        # Scrub stale copies out of cached search results too
        for products in self._searches.values():
            products[:] = [p for p in products if p.id != product_id]

    def cache_product_list(self, search_term, products):
        self._searches[normalize_term(search_term)] = [replace(p) for p in products]

    def get_product_list(self, search_term):
        products = self._searches.get(normalize_term(search_term))
        return None if products is None else list(products)

    def invalidate_search_term(self, search_term):
        self._searches.pop(normalize_term(search_term), None)

    def clear_search_cache(self):
        self._searches.clear()

    def clear_cache(self):
        self._products.clear()
        self._searches.clear()

    def contains_product(self, product_id):
        return product_id in self._products

    def contains_search_term(self, search_term):
        return normalize_term(search_term) in self._searches

    def __repr__(self):
        return f'HashMapProductCache(products={len(self._products)}, searches={len(self._searches)})'


class NullCache:
    """Cache that never stores anything; every lookup misses"""

    def cache_product(self, product_id, product):
        pass

    def get_product(self, product_id):
        return None

    def invalidate_product(self, product_id):
        pass

    def cache_product_list(self, search_term, products):
        pass

    def get_product_list(self, search_term):
        return None

    def invalidate_search_term(self, search_term):
        pass

    def clear_search_cache(self):
        pass

    def clear_cache(self):
        pass

    def contains_product(self, product_id):
        return False

    def contains_search_term(self, search_term):
        return False

    def __repr__(self):
        return 'NullCache()'


def get_cache(cache=None):
    """Return the supplied cache, or a fresh NullCache when none is given"""
    return cache if cache is not None else NullCache()
