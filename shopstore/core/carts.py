"""
Cart store. Each user owns at most one cart, addressed by userId.
"""

from typing import Any, Dict, List, Optional

from .store import EntityStore, Record, is_present


class CartStore(EntityStore):

    def __init__(self, path, collection: str = "carts", schema_version: Optional[str] = None):
        super().__init__(path, collection, schema_version)

    def validate_new(self, data: Dict[str, Any]) -> None:
        self.require(data, "userId", "userId is required")
        if not isinstance(data.get("items"), list):
            raise self.fault("items must be an array", "items")

    def build_record(self, data: Dict[str, Any], timestamp: str) -> Dict[str, Any]:
        return {"userId": data["userId"], "items": data["items"]}

    async def get_cart_by_user_id(self, user_id: str) -> Optional[Record]:
        return await self.find_one("userId", user_id)

    async def create_or_update_cart(self, user_id: str, items: List[Dict[str, Any]]) -> Record:
        """Replace the user's cart items, creating the cart on first use."""
        self.validate_new({"userId": user_id, "items": items})

        cart = await self.get_cart_by_user_id(user_id)
        if cart is None:
            return await self.create({"userId": user_id, "items": items})

        updated = await self.update(cart["id"], {"items": items})
        if updated is None:
            # Removed between the lookup and the write
            return await self.create({"userId": user_id, "items": items})
        return updated

    async def add_item_to_cart(self, user_id: str, item: Dict[str, Any]) -> Record:
        """Add a line, or merge quantity into the existing line for the same product."""
        self.require({"userId": user_id}, "userId", "userId is required")
        if not isinstance(item, dict) or not is_present(item.get("productId")):
            raise self.fault("Valid item with productId is required", "productId")
        if not is_present(item.get("name")) or item.get("price") is None or item.get("quantity") is None:
            raise self.fault("Item must have name, price, and quantity", "item")
        self._check_quantity(item["quantity"])

        cart = await self.get_cart_by_user_id(user_id)
        if cart is None:
            return await self.create_or_update_cart(user_id, [dict(item)])

        items = list(cart.get("items") or [])
        for i, existing in enumerate(items):
            if existing.get("productId") == item["productId"]:
                items[i] = {
                    **existing,
                    "quantity": (existing.get("quantity") or 0) + item["quantity"],
                    "price": item["price"],
                    "name": item["name"],
                }
                break
        else:
            items.append(dict(item))

        return await self.create_or_update_cart(user_id, items)

    async def remove_item_from_cart(self, user_id: str, product_id: str) -> Optional[Record]:
        self.require({"userId": user_id}, "userId", "userId is required")
        self.require({"productId": product_id}, "productId", "productId is required")

        cart = await self.get_cart_by_user_id(user_id)
        if cart is None:
            return None
        items = [i for i in cart.get("items") or [] if i.get("productId") != product_id]
        return await self.create_or_update_cart(user_id, items)

    async def update_item_quantity(self, user_id: str, product_id: str, quantity: int) -> Optional[Record]:
        """Set a line's quantity. Returns None if the cart or the line is missing."""
        self.require({"userId": user_id}, "userId", "userId is required")
        self.require({"productId": product_id}, "productId", "productId is required")
        self._check_quantity(quantity)

        cart = await self.get_cart_by_user_id(user_id)
        if cart is None:
            return None

        items = list(cart.get("items") or [])
        for i, existing in enumerate(items):
            if existing.get("productId") == product_id:
                items[i] = {**existing, "quantity": quantity}
                break
        else:
            return None

        return await self.create_or_update_cart(user_id, items)

    async def clear_cart(self, user_id: str) -> Optional[Record]:
        self.require({"userId": user_id}, "userId", "userId is required")
        cart = await self.get_cart_by_user_id(user_id)
        if cart is None:
            return None
        return await self.create_or_update_cart(user_id, [])

    async def delete_cart(self, user_id: str) -> bool:
        self.require({"userId": user_id}, "userId", "userId is required")
        cart = await self.get_cart_by_user_id(user_id)
        if cart is None:
            return False
        return await self.delete(cart["id"])

    def _check_quantity(self, quantity: Any) -> None:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise self.fault("quantity must be a positive number", "quantity")

    async def calculate_cart_total(self, user_id: str) -> Optional[Dict[str, Any]]:
        cart = await self.get_cart_by_user_id(user_id)
        if cart is None:
            return None
        items = cart.get("items") or []
        total = sum(float(i.get("price") or 0) * int(i.get("quantity") or 0) for i in items)
        return {
            "userId": user_id,
            "itemCount": sum(int(i.get("quantity") or 0) for i in items),
            "total": round(total, 2),
        }
