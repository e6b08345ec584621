import logging
from dataclasses import replace

from product_cache.exceptions import NotFoundError, SessionStateError
from product_cache.models.database import DATABASE_PATH
from product_cache.models.store import ProductStore
from product_cache.utils.cache import get_cache, normalize_term

logger = logging.getLogger(__name__)


class ProductService:
    """
    Product management with cache-aside reads and invalidating writes

    Reads probe the cache first and fall back to the store, caching what
    they find. Writes go to the store and then drop the affected product
    entry plus every cached search result, since any write may change
    the outcome of any search.

    A session must be open for every CRUD call. Closing the session
    releases the store connection and empties the cache.
    """

    def __init__(self, cache=None, database_path=DATABASE_PATH, store_factory=ProductStore.open):
        self.cache = get_cache(cache)
        self.database_path = database_path
        self._store_factory = store_factory
        self._store = None

    @property
    def is_session_open(self):
        return self._store is not None

    def open_session(self):
        if self.is_session_open:
            logger.error("Attempted to open already open session")
            raise SessionStateError("Session is already open!")
        self._store = self._store_factory(self.database_path)
        logger.info("Session opened successfully")

    def close_session(self):
        if not self.is_session_open:
            logger.error("Attempted to close non-existent session")
            raise SessionStateError("No session is currently open!")
        store, self._store = self._store, None
        try:
            store.close()
        finally:
            self.cache.clear_cache()
            logger.info("Session closed, cache cleared")

    def __enter__(self):
        self.open_session()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close_session()

    def _require_session(self):
        if not self.is_session_open:
            logger.error("Attempted to perform operation without open session")
            raise SessionStateError("Session must be opened before executing queries!")
        return self._store

    def get_product_by_id(self, product_id):
        """Get a product by ID, or None if no such product exists"""
        store = self._require_session()

        # Check cache first
        cached = self.cache.get_product(product_id)
        if cached is not None:
            logger.info(f"Cache hit for product {product_id}")
            return replace(cached)
        logger.info(f"Cache miss for product {product_id}")

        product = store.find_by_id(product_id)
        if product is None:
            logger.info(f"No product found with ID {product_id}")
            return None

        self.cache.cache_product(product_id, product)
        return product

    def get_product_by_name(self, name):
        """Get all products whose name contains name"""
        store = self._require_session()
        term = normalize_term(name)

        cached = self.cache.get_product_list(term)
        if cached is not None:
            logger.info(f"Cache hit for search term '{term}'")
            return [replace(p) for p in cached]
        logger.info(f"Cache miss for search term '{term}'")

        products = store.find_by_name_contains(name)

        # A search result is also knowledge of each product
        self.cache.cache_product_list(term, products)
        for product in products:
            self.cache.cache_product(product.id, product)

        logger.info(f"Found {len(products)} products matching '{name}'")
        return products

    def get_all_products(self):
        store = self._require_session()
        products = store.find_all()
        for product in products:
            self.cache.cache_product(product.id, product)
        logger.info(f"Retrieved {len(products)} products")
        return products

    def create_product(self, product):
        """Persist product, assigning the generated id to it"""
        store = self._require_session()
        product.id = store.insert(product.name, product.price)
        self.cache.cache_product(product.id, product)

        # The new product may match searches that were cached without it
        self.cache.clear_search_cache()
        logger.info(f"Product created with ID {product.id}")
        return product

    def update_product(self, product):
        store = self._require_session()
        if store.update(product.id, product.name, product.price) == 0:
            logger.warning(f"No product found to update with ID {product.id}")
            raise NotFoundError(product.id)

        # Invalidate rather than refresh; the next read sees what was persisted
        self.cache.invalidate_product(product.id)
        self.cache.clear_search_cache()
        logger.info(f"Product {product.id} updated")

    def delete_product(self, product_id):
        store = self._require_session()
        if store.delete(product_id) == 0:
            logger.warning(f"No product found to delete with ID {product_id}")
            raise NotFoundError(product_id)

        self.cache.invalidate_product(product_id)
        self.cache.clear_search_cache()
        logger.info(f"Product {product_id} deleted")

