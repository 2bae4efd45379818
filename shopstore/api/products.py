"""
Product catalogue endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from ..core.products import ProductStore
from ..core.registry import get_product_store
from .responses import not_found
from .schemas import ProductCreateRequest, ProductUpdateRequest

router = APIRouter()


@router.post("", status_code=201)
async def create_product(request: ProductCreateRequest, store: ProductStore = Depends(get_product_store)):
    return await store.create(request.model_dump(exclude_none=True))


@router.get("")
async def list_products(
    q: Optional[str] = None,
    category: Optional[str] = None,
    store: ProductStore = Depends(get_product_store),
):
    if q:
        products = await store.search_products(q)
        if category:
            products = [p for p in products if p.get("category") == category]
        return products
    if category:
        return await store.find_products_by_category(category)
    return await store.get_all()


@router.get("/count")
async def count_products(store: ProductStore = Depends(get_product_store)):
    return {"count": await store.count_products()}


@router.get("/{product_id}")
async def get_product(product_id: str, store: ProductStore = Depends(get_product_store)):
    product = await store.get_by_id(product_id)
    if product is None:
        return not_found("Product not found")
    return product


@router.patch("/{product_id}")
async def update_product(
    product_id: str,
    request: ProductUpdateRequest,
    store: ProductStore = Depends(get_product_store),
):
    product = await store.update(product_id, request.model_dump(exclude_unset=True))
    if product is None:
        return not_found("Product not found")
    return product


@router.delete("/{product_id}")
async def delete_product(product_id: str, store: ProductStore = Depends(get_product_store)):
    if not await store.delete(product_id):
        return not_found("Product not found")
    return {"message": "Product deleted"}
