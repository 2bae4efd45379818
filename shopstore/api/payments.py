"""
Payment endpoints. Processing is mocked: new payments are recorded as completed.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from ..core.payments import PaymentStore
from ..core.registry import get_payment_store
from .responses import not_found
from .schemas import PaymentCreateRequest, PaymentUpdateRequest

router = APIRouter()


@router.post("", status_code=201)
async def create_payment(request: PaymentCreateRequest, store: PaymentStore = Depends(get_payment_store)):
    return await store.create(request.model_dump(exclude_none=True))


@router.get("")
async def search_payments(
    userId: Optional[str] = None,
    orderId: Optional[str] = None,
    paymentMethod: Optional[str] = None,
    status: Optional[str] = None,
    startDate: Optional[str] = None,
    endDate: Optional[str] = None,
    store: PaymentStore = Depends(get_payment_store),
):
    return await store.search_payments(
        user_id=userId,
        order_id=orderId,
        payment_method=paymentMethod,
        status=status,
        start_date=startDate,
        end_date=endDate,
    )


@router.get("/order/{order_id}")
async def payments_for_order(order_id: str, store: PaymentStore = Depends(get_payment_store)):
    return await store.get_payments_by_order_id(order_id)


@router.get("/user/{user_id}")
async def payments_for_user(user_id: str, store: PaymentStore = Depends(get_payment_store)):
    return await store.get_payments_by_user_id(user_id)


@router.get("/{payment_id}")
async def get_payment(payment_id: str, store: PaymentStore = Depends(get_payment_store)):
    payment = await store.get_by_id(payment_id)
    if payment is None:
        return not_found("Payment not found")
    return payment


@router.patch("/{payment_id}")
async def update_payment(
    payment_id: str,
    request: PaymentUpdateRequest,
    store: PaymentStore = Depends(get_payment_store),
):
    payment = await store.update(payment_id, request.model_dump(exclude_unset=True))
    if payment is None:
        return not_found("Payment not found")
    return payment
