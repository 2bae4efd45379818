"""
Record and document shapes shared by the entity stores, plus timestamp helpers.
"""

from dataclasses import dataclass, asdict
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Union

ORDER_STATUSES = ("pending", "processing", "shipped", "delivered", "cancelled")
DEFAULT_ORDER_STATUS = "pending"

# Orders in these states no longer accept item changes
CLOSED_ORDER_STATUSES = ("delivered", "cancelled")

PAYMENT_METHODS = ("credit_card", "debit_card", "paypal", "bank_transfer", "crypto")
PAYMENT_STATUSES = ("pending", "completed", "failed", "refunded")
DEFAULT_PAYMENT_STATUS = "completed"

DEFAULT_USER_ROLE = "user"
DEFAULT_PRODUCT_CATEGORY = "uncategorized"
DEFAULT_CURRENCY = "USD"

# Fields the store owns; merge-updates never overwrite them
IMMUTABLE_FIELDS = ("id", "createdAt")


@dataclass
class StatusChange:
    """One entry of an order's statusHistory."""
    status: str
    timestamp: str
    note: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def empty_document(collection: str, schema_version: str) -> Dict[str, Any]:
    return {"schemaVersion": schema_version, collection: []}


def format_timestamp(value: datetime) -> str:
    """Render a UTC datetime as ISO-8601 with microseconds and a Z suffix."""
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def parse_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    """Parse an ISO-8601 string (or date) into an aware UTC datetime.

    Naive values are taken as UTC. Returns None when the value cannot be parsed.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def next_timestamp(previous: Optional[str] = None) -> str:
    """Current time, forced strictly past `previous` when the clock has not moved."""
    current = datetime.now(timezone.utc)
    last = parse_timestamp(previous)
    if last is not None and current <= last:
        current = last + timedelta(microseconds=1)
    return format_timestamp(current)
