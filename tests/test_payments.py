"""
Payment store tests.
"""

import asyncio
import re

import pytest

from shopstore.core.errors import ValidationFault


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def payment_data():
    return {"userId": "u1", "orderId": "o1", "paymentMethod": "paypal", "amount": 19.99}


class TestPaymentCreate:

    def test_defaults(self, payment_store, payment_data):
        payment = run(payment_store.create(payment_data))

        assert re.fullmatch(r"txn_\d+", payment["transactionId"])
        assert payment["status"] == "completed"
        assert payment["currency"] == "USD"
        assert payment["description"] == ""
        assert payment["metadata"] == {}

    def test_rejects_unknown_method(self, payment_store, payment_data):
        payment_data["paymentMethod"] = "cash"
        with pytest.raises(ValidationFault) as exc_info:
            run(payment_store.create(payment_data))
        assert exc_info.value.field == "paymentMethod"

    @pytest.mark.parametrize("amount", [0, -5, "10", None])
    def test_rejects_bad_amount(self, payment_store, payment_data, amount):
        payment_data["amount"] = amount
        with pytest.raises(ValidationFault) as exc_info:
            run(payment_store.create(payment_data))
        assert exc_info.value.field == "amount"

    def test_rejects_unknown_status(self, payment_store, payment_data):
        payment_data["status"] = "lost"
        with pytest.raises(ValidationFault) as exc_info:
            run(payment_store.create(payment_data))
        assert exc_info.value.field == "status"


class TestPaymentUpdate:

    def test_refund(self, payment_store, payment_data):
        payment = run(payment_store.create(payment_data))
        assert run(payment_store.update_status(payment["id"], "refunded"))["status"] == "refunded"

    def test_rejects_unknown_method(self, payment_store, payment_data):
        payment = run(payment_store.create(payment_data))
        with pytest.raises(ValidationFault):
            run(payment_store.update(payment["id"], {"paymentMethod": "cash"}))


class TestPaymentQueries:

    def test_by_user_and_order(self, payment_store, payment_data):
        run(payment_store.create(payment_data))
        run(payment_store.create({**payment_data, "orderId": "o2", "paymentMethod": "crypto"}))

        assert len(run(payment_store.get_payments_by_user_id("u1"))) == 2
        assert len(run(payment_store.get_payments_by_order_id("o2"))) == 1
        assert len(run(payment_store.search_payments(user_id="u1", payment_method="crypto"))) == 1
        assert run(payment_store.search_payments(status="failed")) == []
