"""
Configured store instances, one per entity, located under the data directory.
"""

import asyncio
from functools import lru_cache
from pathlib import Path
from typing import Dict

from .carts import CartStore
from .config import COLLECTIONS, get_document_path
from .orders import OrderStore
from .payments import PaymentStore
from .products import ProductStore
from .store import EntityStore
from .users import UserStore

STORE_TYPES = {
    "users": UserStore,
    "orders": OrderStore,
    "carts": CartStore,
    "products": ProductStore,
    "payments": PaymentStore,
}


@lru_cache(maxsize=None)
def _store_for(collection: str, path: Path) -> EntityStore:
    return STORE_TYPES[collection](path)


def get_store(collection: str) -> EntityStore:
    """Store for a collection at its configured path."""
    if collection not in STORE_TYPES:
        raise KeyError(f"Unknown collection: {collection}")
    return _store_for(collection, get_document_path(collection))


def get_user_store() -> UserStore:
    return get_store("users")


def get_order_store() -> OrderStore:
    return get_store("orders")


def get_cart_store() -> CartStore:
    return get_store("carts")


def get_product_store() -> ProductStore:
    return get_store("products")


def get_payment_store() -> PaymentStore:
    return get_store("payments")


async def initialize_all() -> Dict[str, EntityStore]:
    """Ensure every collection document exists and is well-formed."""
    stores = {name: get_store(name) for name in COLLECTIONS}
    await asyncio.gather(*(store.ensure_initialized() for store in stores.values()))
    return stores


def reset_stores() -> None:
    """Drop cached instances, e.g. after DATA_DIR changes."""
    _store_for.cache_clear()
