#storefront/api/routers/carts.py
from typing import List

from fastapi import APIRouter, Depends

from storefront.api.deps import get_cart_service, get_identity
from storefront.domain.ports import Identity
from storefront.domain.schemas import (
    CartLineIn,
    CartResponse,
    RemoveQuantityIn,
)
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=CartResponse)
def get_cart(
    identity: Identity = Depends(get_identity),
    svc: CartService = Depends(get_cart_service),
):
    cart = svc.get_cart(identity.user_id)
    if cart is None:
        return CartResponse(cart=None, message="Cart is empty")
    return CartResponse(cart=cart)


@router.post("/add", response_model=CartResponse)
def add_to_cart(
    payload: CartLineIn,
    identity: Identity = Depends(get_identity),
    svc: CartService = Depends(get_cart_service),
):
    cart = svc.add_line(
        identity.user_id,
        product_id=payload.product_id,
        quantity=payload.quantity,
        price=payload.price,
    )
    return CartResponse(cart=cart)


@router.put("/update", response_model=CartResponse)
def replace_cart(
    payload: List[CartLineIn],
    identity: Identity = Depends(get_identity),
    svc: CartService = Depends(get_cart_service),
):
    return CartResponse(cart=svc.replace_lines(identity.user_id, payload))


@router.delete("/{product_id}", response_model=CartResponse)
def remove_from_cart(
    product_id: int,
    payload: RemoveQuantityIn,
    identity: Identity = Depends(get_identity),
    svc: CartService = Depends(get_cart_service),
):
    cart = svc.remove_quantity(identity.user_id, product_id, payload.quantity)
    return CartResponse(cart=cart, message="Product quantity reduced in cart")


@router.delete("", response_model=CartResponse)
def clear_cart(
    identity: Identity = Depends(get_identity),
    svc: CartService = Depends(get_cart_service),
):
    svc.clear_cart(identity.user_id)
    return CartResponse(message="Cart cleared successfully")
