import sqlite3

import pytest

from product_cache.exceptions import StoreConnectivityError
from product_cache.models.product import Product
from product_cache.models.store import ProductStore


@pytest.fixture
def store():
    store = ProductStore.open(':memory:')
    yield store
    store.close()


def test_insert_and_find(store: ProductStore):
    product_id = store.insert("Motor", 999.99)

    assert product_id > 0
    found = store.find_by_id(product_id)
    assert found == Product("Motor", 999.99)
    assert found.id == product_id


def test_find_missing_returns_none(store: ProductStore):
    assert store.find_by_id(1) is None


def test_update_and_delete_report_rows_affected(store: ProductStore):
    product_id = store.insert("Motor", 1.0)

    assert store.update(product_id, "Motor", 2.0) == 1
    assert store.update(product_id + 1, "Motor", 2.0) == 0
    assert store.delete(product_id) == 1
    assert store.delete(product_id) == 0


def test_find_by_name_contains_is_ordered_by_id(store: ProductStore):
    store.insert("Big Motor", 1.0)
    store.insert("Pump", 2.0)
    store.insert("Small motor", 3.0)

    assert [p.name for p in store.find_by_name_contains("motor")] == ["Big Motor", "Small motor"]
    assert len(store.find_all()) == 3


def test_database_errors_are_wrapped(store: ProductStore):
    store.close()

    with pytest.raises(StoreConnectivityError) as exc_info:
        store.find_all()
    assert isinstance(exc_info.value.__cause__, sqlite3.Error)


def test_open_unreachable_database_raises(tmp_path):
    with pytest.raises(StoreConnectivityError):
        ProductStore.open(str(tmp_path / "missing" / "products.db"))
