"""Pytest configuration and fixtures"""
import os
import pytest
from fastapi.testclient import TestClient

# Set test environment variables
os.environ.setdefault("UPSTASH_REDIS_REST_URL", "https://test.upstash.io")
os.environ.setdefault("UPSTASH_REDIS_REST_TOKEN", "test_token")
os.environ.setdefault("CART_BACKEND", "memory")

from shelfcart.cart import CartItem, CartManager, InMemoryCartStore  # noqa: E402
from shelfcart.clients import InMemoryOrderSubmitter, InMemoryStockVerifier, OrderOutcome  # noqa: E402


@pytest.fixture
def store():
    """Empty in-memory cart store"""
    return InMemoryCartStore()


@pytest.fixture
def verifier():
    """Stock verifier with a few books on the shelf"""
    return InMemoryStockVerifier({"b1": 5, "b2": 3, "b3": 1})


@pytest.fixture
def submitter():
    """Order submitter that accepts every order"""
    return InMemoryOrderSubmitter(OrderOutcome.success("OK-123"))


@pytest.fixture
def cart_manager(store, verifier, submitter):
    return CartManager(store=store, stock_verifier=verifier, order_submitter=submitter)


@pytest.fixture
def sample_item():
    """Sample cart line"""
    return CartItem(book_id="b1", title="Dune", quantity=2, price="9.99")


@pytest.fixture
def client(cart_manager):
    """Test client wired to the in-memory cart manager"""
    from api.index import app
    from shelfcart.routers.deps import get_cart_manager_lazy

    app.dependency_overrides[get_cart_manager_lazy] = lambda: cart_manager
    yield TestClient(app)
    app.dependency_overrides.clear()
