import pytest

from product_cache.models.products import ProductService
from product_cache.utils.cache import HashMapProductCache


@pytest.fixture
def cache():
    return HashMapProductCache()


@pytest.fixture
def service(cache):
    """A service with an open session on a fresh in-memory database"""
    service = ProductService(cache=cache, database_path=':memory:')
    service.open_session()
    yield service
    if service.is_session_open:
        service.close_session()
