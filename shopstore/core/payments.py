"""
Payment store. Mock processing: new payments are recorded as completed.
"""

import secrets
from numbers import Number
from typing import Any, Dict, List, Optional

from .schema import DEFAULT_CURRENCY, DEFAULT_PAYMENT_STATUS, PAYMENT_METHODS, PAYMENT_STATUSES
from .store import EntityStore, Record


def new_transaction_id() -> str:
    return f"txn_{secrets.randbelow(10 ** 9)}"


class PaymentStore(EntityStore):
    status_field = "status"
    valid_statuses = PAYMENT_STATUSES
    default_status = DEFAULT_PAYMENT_STATUS

    def __init__(self, path, collection: str = "payments", schema_version: Optional[str] = None):
        super().__init__(path, collection, schema_version)

    def validate_new(self, data: Dict[str, Any]) -> None:
        self.require(data, "userId", "userId is required")
        self.require(data, "orderId", "orderId is required")
        self.require(data, "paymentMethod", "paymentMethod is required")
        self.check_choice(data, "paymentMethod", PAYMENT_METHODS, "payment method")

        amount = data.get("amount")
        if isinstance(amount, bool) or not isinstance(amount, Number) or amount <= 0:
            raise self.fault("amount must be a positive number", "amount")

    def build_record(self, data: Dict[str, Any], timestamp: str) -> Dict[str, Any]:
        return {
            "transactionId": new_transaction_id(),
            "userId": data["userId"],
            "orderId": data["orderId"],
            "paymentMethod": data["paymentMethod"],
            "amount": data["amount"],
            "status": data.get("status") or DEFAULT_PAYMENT_STATUS,
            "currency": data.get("currency") or DEFAULT_CURRENCY,
            "description": data.get("description") or "",
            "metadata": data.get("metadata") or {},
        }

    def prepare_update(self, existing: Record, changes: Dict[str, Any]) -> Dict[str, Any]:
        self.check_choice(changes, "paymentMethod", PAYMENT_METHODS, "payment method")
        return changes

    async def get_payments_by_user_id(self, user_id: str) -> List[Record]:
        return await self.get_by_field("userId", user_id)

    async def get_payments_by_order_id(self, order_id: str) -> List[Record]:
        return await self.get_by_field("orderId", order_id)

    async def search_payments(
        self,
        user_id: Optional[str] = None,
        order_id: Optional[str] = None,
        payment_method: Optional[str] = None,
        status: Optional[str] = None,
        start_date: Any = None,
        end_date: Any = None,
    ) -> List[Record]:
        return await self.search(
            {
                "userId": user_id or None,
                "orderId": order_id or None,
                "paymentMethod": payment_method or None,
                "status": status or None,
            },
            start_date=start_date,
            end_date=end_date,
        )
