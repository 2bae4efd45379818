"""
Order endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from ..core.config import RECENT_ORDERS_LIMIT
from ..core.orders import OrderStore
from ..core.registry import get_order_store
from .responses import not_found
from .schemas import (
    OrderCreateRequest,
    OrderItem,
    OrderItemUpdateRequest,
    OrderStatusUpdateRequest,
    OrderUpdateRequest,
)

router = APIRouter()


@router.post("", status_code=201)
async def create_order(request: OrderCreateRequest, store: OrderStore = Depends(get_order_store)):
    return await store.create(request.model_dump(exclude_none=True))


@router.get("")
async def search_orders(
    userId: Optional[str] = None,
    status: Optional[str] = None,
    startDate: Optional[str] = None,
    endDate: Optional[str] = None,
    productId: Optional[str] = None,
    store: OrderStore = Depends(get_order_store),
):
    """Orders matching every given filter; no filters lists all orders."""
    return await store.search_orders(
        user_id=userId,
        status=status,
        start_date=startDate,
        end_date=endDate,
        product_id=productId,
    )


@router.get("/recent")
async def recent_orders(limit: int = RECENT_ORDERS_LIMIT, store: OrderStore = Depends(get_order_store)):
    return await store.get_recent_orders(limit)


@router.get("/counts")
async def count_orders_by_status(store: OrderStore = Depends(get_order_store)):
    return await store.count_orders_by_status()


@router.get("/user/{user_id}")
async def user_order_history(user_id: str, store: OrderStore = Depends(get_order_store)):
    return await store.get_user_order_history(user_id)


@router.get("/{order_id}")
async def get_order(order_id: str, store: OrderStore = Depends(get_order_store)):
    order = await store.get_by_id(order_id)
    if order is None:
        return not_found("Order not found")
    return order


@router.patch("/{order_id}")
async def update_order(order_id: str, request: OrderUpdateRequest, store: OrderStore = Depends(get_order_store)):
    order = await store.update(order_id, request.model_dump(exclude_unset=True))
    if order is None:
        return not_found("Order not found")
    return order


@router.patch("/{order_id}/status")
async def update_order_status(
    order_id: str,
    request: OrderStatusUpdateRequest,
    store: OrderStore = Depends(get_order_store),
):
    order = await store.update_order_status(order_id, request.status, request.note)
    if order is None:
        return not_found("Order not found")
    return order


@router.post("/{order_id}/items")
async def add_order_item(order_id: str, item: OrderItem, store: OrderStore = Depends(get_order_store)):
    order = await store.add_order_item(order_id, item.model_dump())
    if order is None:
        return not_found("Order not found")
    return order


@router.patch("/{order_id}/items/{product_id}")
async def update_order_item(
    order_id: str,
    product_id: str,
    request: OrderItemUpdateRequest,
    store: OrderStore = Depends(get_order_store),
):
    order = await store.update_order_item(order_id, product_id, request.model_dump(exclude_unset=True))
    if order is None:
        return not_found("Order not found")
    return order


@router.delete("/{order_id}/items/{product_id}")
async def remove_order_item(order_id: str, product_id: str, store: OrderStore = Depends(get_order_store)):
    order = await store.remove_order_item(order_id, product_id)
    if order is None:
        return not_found("Order not found")
    return order


@router.delete("/{order_id}")
async def delete_order(order_id: str, store: OrderStore = Depends(get_order_store)):
    if not await store.delete(order_id):
        return not_found("Order not found")
    return {"message": "Order deleted"}
