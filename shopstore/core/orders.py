"""
Order store: required fields, status lifecycle with history, totals and item edits.
"""

from typing import Any, Dict, List, Optional

from .config import RECENT_ORDERS_LIMIT
from .schema import (
    CLOSED_ORDER_STATUSES,
    DEFAULT_ORDER_STATUS,
    ORDER_STATUSES,
    StatusChange,
    next_timestamp,
    parse_timestamp,
)
from .store import EntityStore, Record, is_present


def calculate_total_amount(items: List[Dict[str, Any]]) -> float:
    """Sum of price * quantity; quantity defaults to 1, unparseable values count as 0."""
    total = 0.0
    for item in items:
        try:
            price = float(item.get("price") or 0)
        except (TypeError, ValueError):
            price = 0.0
        try:
            quantity = int(item.get("quantity") or 1)
        except (TypeError, ValueError):
            quantity = 1
        total += price * quantity
    return round(total, 2)


def _newest_first(records: List[Record]) -> List[Record]:
    def key(record: Record):
        created = parse_timestamp(record.get("createdAt"))
        return created.timestamp() if created else float("-inf")
    return sorted(records, key=key, reverse=True)


class OrderStore(EntityStore):
    status_field = "status"
    valid_statuses = ORDER_STATUSES
    default_status = DEFAULT_ORDER_STATUS

    def __init__(self, path, collection: str = "orders", schema_version: Optional[str] = None):
        super().__init__(path, collection, schema_version)

    def validate_new(self, data: Dict[str, Any]) -> None:
        self.require(data, "userId", "userId is required")
        items = data.get("items")
        if not isinstance(items, list) or not items:
            raise self.fault("items: order must contain at least one item", "items")
        self.require(data, "shippingAddress", "shippingAddress is required")

    def build_record(self, data: Dict[str, Any], timestamp: str) -> Dict[str, Any]:
        status = data.get("status") or DEFAULT_ORDER_STATUS
        record = {
            "userId": data["userId"],
            "items": data["items"],
            "shippingAddress": data["shippingAddress"],
            "billingAddress": data.get("billingAddress") or data["shippingAddress"],
            "status": status,
            "totalAmount": data.get("totalAmount") or calculate_total_amount(data["items"]),
            "paymentMethod": data.get("paymentMethod"),
            "paymentStatus": data.get("paymentStatus") or "pending",
            "notes": data.get("notes") or "",
            "statusHistory": [StatusChange(status, timestamp, "Order created").to_dict()],
        }
        # Keep any extra caller fields, the store treats them as opaque
        for key, value in data.items():
            if key not in record and key not in ("id", "createdAt", "updatedAt", "statusNote"):
                record[key] = value
        return record

    def prepare_update(self, existing: Record, changes: Dict[str, Any]) -> Dict[str, Any]:
        changes = dict(changes)
        note = changes.pop("statusNote", None)

        if "items" in changes:
            self._check_open(existing, "replace items in")
            if not isinstance(changes["items"], list) or not changes["items"]:
                raise self.fault("items: order must contain at least one item", "items")

        status = changes.get("status")
        if status is not None and status != existing.get("status"):
            history = list(existing.get("statusHistory") or [])
            history.append(StatusChange(
                status,
                next_timestamp(existing.get("updatedAt")),
                note or f"Status changed to {status}",
            ).to_dict())
            changes["statusHistory"] = history

        items = changes.get("items")
        if items is not None:
            changes["totalAmount"] = calculate_total_amount(items)
        return changes

    # ----- Queries -----

    async def get_orders_by_user_id(self, user_id: str) -> List[Record]:
        return await self.get_by_field("userId", user_id)

    async def get_orders_by_status(self, status: str) -> List[Record]:
        return await self.get_by_field("status", status)

    async def search_orders(
        self,
        user_id: Optional[str] = None,
        status: Optional[str] = None,
        start_date: Any = None,
        end_date: Any = None,
        product_id: Optional[str] = None,
    ) -> List[Record]:
        orders = await self.search(
            {"userId": user_id or None, "status": status or None},
            start_date=start_date,
            end_date=end_date,
        )
        if product_id:
            orders = [
                o for o in orders
                if any(item.get("productId") == product_id for item in o.get("items") or [])
            ]
        return orders

    async def count_orders_by_status(self) -> Dict[str, int]:
        return await self.count_by_field("status", ORDER_STATUSES)

    async def get_user_order_history(self, user_id: str) -> List[Record]:
        return _newest_first(await self.get_orders_by_user_id(user_id))

    async def get_recent_orders(self, limit: int = RECENT_ORDERS_LIMIT) -> List[Record]:
        return _newest_first(await self.get_all())[:max(limit, 0)]

    # ----- Mutations -----

    async def update_order_status(self, order_id: str, status: str, note: Optional[str] = None) -> Optional[Record]:
        self.check_status({"status": status})
        return await self.update(order_id, {
            "status": status,
            "statusNote": note or f"Status changed to {status}",
        })

    async def add_order_item(self, order_id: str, item: Dict[str, Any]) -> Optional[Record]:
        order = await self.get_by_id(order_id)
        if order is None:
            return None
        self._check_open(order, "add items to")

        for field in ("productId", "name", "price"):
            if not is_present(item.get(field)):
                raise self.fault("Item must have productId, name, and price", field)

        items = list(order.get("items") or [])
        items.append({**item, "quantity": item.get("quantity") or 1})
        return await self.update(order_id, {"items": items})

    async def remove_order_item(self, order_id: str, product_id: str) -> Optional[Record]:
        order = await self.get_by_id(order_id)
        if order is None:
            return None
        self._check_open(order, "remove items from")

        items = [i for i in order.get("items") or [] if i.get("productId") != product_id]
        if not items:
            raise self.fault(
                "Cannot remove the last item from an order. Consider cancelling the order instead.",
                "items",
            )
        return await self.update(order_id, {"items": items})

    async def update_order_item(self, order_id: str, product_id: str, updates: Dict[str, Any]) -> Optional[Record]:
        order = await self.get_by_id(order_id)
        if order is None:
            return None
        self._check_open(order, "update items in")

        items = list(order.get("items") or [])
        for i, item in enumerate(items):
            if item.get("productId") == product_id:
                items[i] = {**item, **updates}
                break
        else:
            raise self.fault(f"Item with productId {product_id} not found in order", "productId")
        return await self.update(order_id, {"items": items})

    def _check_open(self, order: Record, action: str) -> None:
        if order.get("status") in CLOSED_ORDER_STATUSES:
            raise self.fault(f"Cannot {action} {order['status']} orders", "status")
