import os
import sys
from decimal import Decimal

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from freshbasket.app.config import Config
from freshbasket.app.extensions import db
from freshbasket.app.factory import create_app
from freshbasket.app.models import Category, Product
from freshbasket.catalog import types
from freshbasket.catalog.fetchers import EXTENSION_KEY, FetchFailure, ProductFetcher


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    # Use SQLite in tests for simplicity.
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    CATALOG_BACKEND = "sql"
    FEATURED_LIMIT = 2
    SEARCH_DEBOUNCE_SECONDS = 0.01
    COLLATION_LOCALE = "C"


def make_product(name, price, **kwargs):
    kwargs.setdefault("id", name.lower().replace(" ", "-"))
    return types.Product(name=name, price=Decimal(str(price)), **kwargs)


@pytest.fixture()
def grocery():
    return [
        make_product("Green Lettuce", "2.99", unit="piece", category_id="veg"),
        make_product("Fresh Apples", "4.99", unit="kg", category_id="fruit", description="Crisp red apples"),
        make_product("Organic Tomatoes", "3.99", unit="kg", category_id="veg", description="Vine-ripened"),
    ]


class StaticFetcher(ProductFetcher):
    """In-memory fetcher; `fail=True` makes every call raise FetchFailure."""

    def __init__(self, products=(), categories=(), fail=False):
        self.products = list(products)
        self.categories = list(categories)
        self.fail = fail
        self.calls = 0

    def _check(self):
        self.calls += 1
        if self.fail:
            raise FetchFailure("backend unavailable")

    def list_products(self, featured_only=False, limit=None):
        self._check()
        items = sorted(self.products, key=lambda p: p.name)
        if featured_only:
            items = [p for p in items if p.is_featured]
        return items[:limit] if limit is not None else items

    def get_product(self, product_id):
        self._check()
        return next((p for p in self.products if p.id == product_id), None)

    def list_categories(self):
        self._check()
        return list(self.categories)


class FakeTimer:
    """Stands in for threading.Timer; tests fire it by hand."""

    created = []

    def __init__(self, interval, function, args=()):
        self.interval = interval
        self.function = function
        self.args = args
        self.daemon = False
        self.started = False
        self.cancelled = False
        FakeTimer.created.append(self)

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function(*self.args)


@pytest.fixture()
def fake_timers():
    FakeTimer.created = []
    yield FakeTimer
    FakeTimer.created = []


@pytest.fixture()
def app():
    app = create_app(TestConfig)

    with app.app_context():
        db.create_all()

        fruit = Category(id="fruit", name="Fruits")
        veg = Category(id="veg", name="Vegetables")
        db.session.add_all([fruit, veg])
        db.session.add_all([
            Product(id="lettuce", name="Green Lettuce", description=None, price_cents=299,
                    unit="piece", stock_quantity=60, is_featured=True, category=veg),
            Product(id="apples", name="Fresh Apples", description="Crisp red apples", price_cents=499,
                    unit="kg", stock_quantity=120, is_featured=True, category=fruit),
            Product(id="tomatoes", name="Organic Tomatoes", description="Vine-ripened organic tomatoes",
                    price_cents=399, unit="kg", stock_quantity=80, is_featured=False, category=veg),
        ])
        db.session.commit()

    yield app

    with app.app_context():
        db.drop_all()


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture()
def failing_client(app):
    app.extensions[EXTENSION_KEY] = StaticFetcher(fail=True)
    with app.test_client() as client:
        yield client
