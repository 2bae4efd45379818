"""
Structured logging: level selection and redaction of secrets.
"""

import asyncio
import logging

import pytest

from shopstore.core.errors import ValidationFault
from shopstore.util.logging import StructuredLogger, logger, sanitize_payload


@pytest.fixture
def structured():
    return StructuredLogger("shopstore.test")


class TestLogOperation:

    def test_format(self, structured, caplog):
        with caplog.at_level(logging.INFO, logger="shopstore.test"):
            structured.log_operation("orders.create", "success", {"record_id": "abc"})

        assert "Operation: orders.create, Status: success, Details: {'record_id': 'abc'}" in caplog.text

    @pytest.mark.parametrize("status,level", [
        ("success", logging.INFO),
        ("rejected", logging.WARNING),
        ("recovered", logging.WARNING),
        ("failed", logging.ERROR),
        ("error", logging.ERROR),
    ])
    def test_level_follows_status(self, structured, caplog, status, level):
        with caplog.at_level(logging.INFO, logger="shopstore.test"):
            structured.log_operation("x", status)
        assert caplog.records[-1].levelno == level

    def test_store_operation_redacts_details(self, structured, caplog):
        with caplog.at_level(logging.INFO, logger="shopstore.test"):
            structured.log_store_operation("users", "update", "u1", details={"password": "hunter2"})

        assert "hunter2" not in caplog.text
        assert "[REDACTED]" in caplog.text

    def test_validation_fault_is_logged(self, user_store, caplog):
        with caplog.at_level(logging.WARNING, logger="shopstore"):
            with pytest.raises(ValidationFault):
                asyncio.run(user_store.create({"email": "a@b.co", "password": "x"}))

        assert "users.validate" in caplog.text
        assert "username is required" in caplog.text

    def test_recovery_is_logged(self, order_store, caplog):
        order_store.path.write_text("garbage")
        with caplog.at_level(logging.WARNING, logger="shopstore"):
            asyncio.run(order_store.ensure_initialized())

        assert "document.recover" in caplog.text


class TestSanitizePayload:

    def test_nested_secrets_are_redacted(self):
        payload = {"user": {"email": "a@b.co", "resetToken": "t"}, "items": [{"token": "x"}]}
        assert sanitize_payload(payload) == {
            "user": {"email": "a@b.co", "resetToken": "[REDACTED]"},
            "items": [{"token": "[REDACTED]"}],
        }

    def test_reveal(self):
        assert sanitize_payload({"password": "p"}, reveal_sensitive=True) == {"password": "p"}

    def test_long_strings_truncated(self):
        assert sanitize_payload("x" * 150) == "x" * 100 + "..."


def test_global_logger_name():
    assert logger.logger.name == "shopstore"
