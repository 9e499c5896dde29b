"""Pytest configuration and fixtures"""
import os

import pytest

# No log files under /data and no handler bound to the captured stderr
os.environ.setdefault("SHOP_LOG_TO_FILE", "false")
os.environ.setdefault("SHOP_LOG_TO_STDERR", "false")
os.environ.setdefault("SHOP_LOG_LEVEL", "DEBUG")

from shopcore.cart import Cart  # noqa: E402
from shopcore.catalog import CatalogStore  # noqa: E402
from shopcore.models import Item  # noqa: E402
from shopcore.storage import KeyValueStore  # noqa: E402


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "state" / "shop.sqlite3")


@pytest.fixture
def storage(db_path):
    return KeyValueStore(db_path)


@pytest.fixture
def catalog(storage):
    store = CatalogStore(storage)
    store.initialize()
    return store


@pytest.fixture
def cart(storage):
    c = Cart(storage)
    c.initialize()
    return c


@pytest.fixture
def item_a():
    """In-stock laptop priced 100"""
    return Item(
        id="A",
        name="Alpha Book",
        brand="Acme",
        price=100.0,
        processor="Intel i5",
        condition="new",
        rating=4.0,
        review_count=10,
        in_stock=True,
    )


@pytest.fixture
def item_b():
    """Out-of-stock laptop priced 200"""
    return Item(
        id="B",
        name="Beta Station",
        brand="Bolt",
        price=200.0,
        processor="AMD Ryzen 7",
        condition="used",
        rating=4.5,
        review_count=3,
        in_stock=False,
    )
