"""
Shared fixtures: every store points at its own document under tmp_path.
"""

import pytest

from shopstore.core.carts import CartStore
from shopstore.core.orders import OrderStore
from shopstore.core.payments import PaymentStore
from shopstore.core.products import ProductStore
from shopstore.core.users import UserStore


@pytest.fixture
def order_store(tmp_path):
    return OrderStore(tmp_path / "orders.json")


@pytest.fixture
def cart_store(tmp_path):
    return CartStore(tmp_path / "carts.json")


@pytest.fixture
def product_store(tmp_path):
    return ProductStore(tmp_path / "products.json")


@pytest.fixture
def user_store(tmp_path):
    return UserStore(tmp_path / "users.json")


@pytest.fixture
def payment_store(tmp_path):
    return PaymentStore(tmp_path / "payments.json")


@pytest.fixture
def sample_order():
    return {
        "userId": "u1",
        "items": [{"productId": "p1", "name": "P", "price": 10, "quantity": 2}],
        "shippingAddress": {"street": "S", "city": "C"},
    }
