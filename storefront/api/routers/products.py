# storefront/api/routers/products.py
from fastapi import APIRouter, Depends, Query

from storefront.api.deps import get_product_service, require_roles
from storefront.domain.schemas import (
    ProductDeletedResponse,
    ProductIn,
    ProductListResponse,
    ProductOut,
    ProductUpdate,
)
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])
admin_router = APIRouter(
    prefix="/admin/products",
    tags=["products"],
    dependencies=[Depends(require_roles("admin", "superadmin"))],
)


def _as_int(value: str | None) -> int | None:
    # garbage paging params fall back to defaults instead of failing
    try:
        return int(value) if value is not None else None
    except ValueError:
        return None


@router.get("", response_model=ProductListResponse)
def list_products(
    page: str | None = Query(None),
    limit: str | None = Query(None),
    svc: ProductService = Depends(get_product_service),
):
    result = svc.get_paginated_products(_as_int(page), _as_int(limit))
    return ProductListResponse(data=result, page=result.page, limit=result.limit)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, svc: ProductService = Depends(get_product_service)):
    return svc.get_product(product_id)


@admin_router.post("/create", response_model=ProductOut, status_code=201)
def create_product(payload: ProductIn, svc: ProductService = Depends(get_product_service)):
    return svc.create_product(payload)


@admin_router.put("/update/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    payload: ProductUpdate,
    svc: ProductService = Depends(get_product_service),
):
    return svc.update_product(product_id, payload)


@admin_router.delete("/delete/{product_id}", response_model=ProductDeletedResponse)
def delete_product(product_id: int, svc: ProductService = Depends(get_product_service)):
    deleted = svc.delete_product(product_id)
    return ProductDeletedResponse(message="Product deleted successfully", deleted_product=deleted)
