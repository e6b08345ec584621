import pytest

from product_cache.exceptions import NotFoundError, SessionStateError
from product_cache.models.product import Product
from product_cache.models.products import ProductService


def test_complete_round_trip(service: ProductService, cache):
    new_product = Product("Test Product", 99.99)
    service.create_product(new_product)
    assert new_product.id > 0

    retrieved = service.get_product_by_id(new_product.id)
    assert retrieved is not None
    assert retrieved.name == new_product.name
    assert retrieved.price == pytest.approx(new_product.price)
    assert cache.contains_product(new_product.id)

    by_name = service.get_product_by_name("Test Product")
    assert len(by_name) == 1
    assert by_name[0].name == "Test Product"

    retrieved.price = 149.99
    retrieved.name = "Updated Test Product"
    service.update_product(retrieved)
    assert not cache.contains_product(new_product.id)

    updated = service.get_product_by_id(new_product.id)
    assert updated.name == "Updated Test Product"
    assert updated.price == pytest.approx(149.99)

    all_products = service.get_all_products()
    assert any(p.id == new_product.id for p in all_products)

    service.delete_product(new_product.id)
    assert service.get_product_by_id(new_product.id) is None


def test_second_read_is_served_from_cache(service: ProductService, cache):
    product = Product("Test Product", 99.99)
    service.create_product(product)
    cache.invalidate_product(product.id)

    first = service.get_product_by_id(product.id)
    assert cache.contains_product(product.id)

    # Drop the row behind the cache's back; the cached copy still answers
    service._store.conn.execute('DELETE FROM products WHERE id = ?', (product.id,))
    second = service.get_product_by_id(product.id)

    assert first == second
    assert cache.contains_product(product.id)


def test_update_invalidates_and_store_has_new_price(service: ProductService, cache):
    product = Product("Test Product", 99.99)
    service.create_product(product)
    service.get_product_by_id(product.id)
    assert cache.contains_product(product.id)

    product.price = 149.99
    service.update_product(product)
    assert not cache.contains_product(product.id)

    assert service.get_product_by_id(product.id).price == pytest.approx(149.99)
    assert cache.contains_product(product.id)

    service.delete_product(product.id)
    assert not cache.contains_product(product.id)


def test_search_caching(service: ProductService, cache):
    product1 = Product("Test Product 1", 99.99)
    product2 = Product("Test Product 2", 149.99)
    service.create_product(product1)
    service.create_product(product2)

    first = service.get_product_by_name("Test Product")
    assert len(first) == 2
    assert cache.contains_search_term("Test Product")

    second = service.get_product_by_name("test product")
    assert first == second

    product1.price = 199.99
    service.update_product(product1)
    assert not cache.contains_search_term("Test Product")


def test_create_makes_new_product_visible_to_search(service: ProductService):
    service.create_product(Product("Motor A", 10.0))
    assert len(service.get_product_by_name("Motor")) == 1

    service.create_product(Product("Motor B", 20.0))
    assert len(service.get_product_by_name("Motor")) == 2


def test_delete_removes_product_from_search(service: ProductService):
    keep = service.create_product(Product("Motor A", 10.0))
    gone = service.create_product(Product("Motor B", 20.0))
    service.get_product_by_name("motor")

    service.delete_product(gone.id)

    assert [p.id for p in service.get_product_by_name("motor")] == [keep.id]


def test_search_treats_wildcards_literally(service: ProductService):
    service.create_product(Product("100% Cotton", 5.0))
    service.create_product(Product("Cotton_Blend", 6.0))
    service.create_product(Product("Wool", 7.0))

    assert [p.name for p in service.get_product_by_name("%")] == ["100% Cotton"]
    assert [p.name for p in service.get_product_by_name("_")] == ["Cotton_Blend"]


def test_product_operations(service: ProductService):
    product1 = service.create_product(Product("Product 1", 10.0))
    product2 = service.create_product(Product("Product 2", 20.0))

    assert len(service.get_all_products()) == 2
    assert len(service.get_product_by_name("Product")) == 2

    service.delete_product(product1.id)
    service.delete_product(product2.id)
    assert service.get_all_products() == []


def test_update_and_delete_unknown_ids(service: ProductService):
    with pytest.raises(NotFoundError):
        service.update_product(Product("Never Created", 1.0))
    with pytest.raises(NotFoundError):
        service.delete_product(12345)


def test_session_management(service: ProductService):
    with pytest.raises(SessionStateError):
        service.open_session()

    service.close_session()
    with pytest.raises(SessionStateError):
        service.get_all_products()


def test_database_file_persists_between_sessions(tmp_path, cache):
    database_path = str(tmp_path / "products.db")

    with ProductService(cache=cache, database_path=database_path) as service:
        product = service.create_product(Product("Durable", 42.0))

    assert not cache.contains_product(product.id)

    with ProductService(cache=cache, database_path=database_path) as service:
        assert service.get_product_by_id(product.id) == Product("Durable", 42.0)
