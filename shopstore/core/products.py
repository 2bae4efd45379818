"""
Product catalogue store.
"""

from numbers import Number
from typing import Any, Dict, List, Optional

from .schema import DEFAULT_PRODUCT_CATEGORY
from .store import EntityStore, Record


class ProductStore(EntityStore):

    def __init__(self, path, collection: str = "products", schema_version: Optional[str] = None):
        super().__init__(path, collection, schema_version)

    def validate_new(self, data: Dict[str, Any]) -> None:
        self.require(data, "name", "name is required")
        price = data.get("price")
        if price is None:
            raise self.fault("price is required", "price")
        if isinstance(price, bool) or not isinstance(price, Number) or price < 0:
            raise self.fault("price must be a non-negative number", "price")

    def build_record(self, data: Dict[str, Any], timestamp: str) -> Dict[str, Any]:
        return {
            "name": data["name"],
            "description": data.get("description") or "",
            "price": data["price"],
            "category": data.get("category") or DEFAULT_PRODUCT_CATEGORY,
            "imageUrl": data.get("imageUrl"),
            "stock": data["stock"] if data.get("stock") is not None else 0,
        }

    async def search_products(self, query: str) -> List[Record]:
        """Case-insensitive substring match over name and description."""
        needle = (query or "").lower()
        return await self.filter(
            lambda p: needle in str(p.get("name") or "").lower()
            or needle in str(p.get("description") or "").lower()
        )

    async def find_products_by_category(self, category: str) -> List[Record]:
        return await self.get_by_field("category", category)

    async def count_products(self) -> int:
        return await self.count()
