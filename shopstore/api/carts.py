"""
Cart endpoints, addressed by the owning user's id.
"""

from fastapi import APIRouter, Depends

from ..core.carts import CartStore
from ..core.registry import get_cart_store
from .responses import not_found
from .schemas import CartItemRequest, CartItemsRequest, QuantityUpdateRequest

router = APIRouter()


@router.get("/{user_id}")
async def get_cart(user_id: str, store: CartStore = Depends(get_cart_store)):
    cart = await store.get_cart_by_user_id(user_id)
    if cart is None:
        return not_found("Cart not found")
    return cart


@router.put("/{user_id}")
async def replace_cart(user_id: str, request: CartItemsRequest, store: CartStore = Depends(get_cart_store)):
    items = [item.model_dump() for item in request.items]
    return await store.create_or_update_cart(user_id, items)


@router.get("/{user_id}/total")
async def cart_total(user_id: str, store: CartStore = Depends(get_cart_store)):
    total = await store.calculate_cart_total(user_id)
    if total is None:
        return not_found("Cart not found")
    return total


@router.post("/{user_id}/items")
async def add_cart_item(user_id: str, item: CartItemRequest, store: CartStore = Depends(get_cart_store)):
    return await store.add_item_to_cart(user_id, item.model_dump())


@router.patch("/{user_id}/items/{product_id}")
async def update_cart_item(
    user_id: str,
    product_id: str,
    request: QuantityUpdateRequest,
    store: CartStore = Depends(get_cart_store),
):
    cart = await store.update_item_quantity(user_id, product_id, request.quantity)
    if cart is None:
        return not_found("Cart or item not found")
    return cart


@router.delete("/{user_id}/items/{product_id}")
async def remove_cart_item(user_id: str, product_id: str, store: CartStore = Depends(get_cart_store)):
    cart = await store.remove_item_from_cart(user_id, product_id)
    if cart is None:
        return not_found("Cart not found")
    return cart


@router.delete("/{user_id}/items")
async def clear_cart(user_id: str, store: CartStore = Depends(get_cart_store)):
    cart = await store.clear_cart(user_id)
    if cart is None:
        return not_found("Cart not found")
    return cart


@router.delete("/{user_id}")
async def delete_cart(user_id: str, store: CartStore = Depends(get_cart_store)):
    if not await store.delete_cart(user_id):
        return not_found("Cart not found")
    return {"message": "Cart deleted"}
