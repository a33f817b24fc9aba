# storefront/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends

from storefront.api.deps import get_identity, get_order_service
from storefront.domain.ports import Identity
from storefront.domain.schemas import OrderOut, OrderStatusUpdate, PlacedOrderResponse
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("/create", response_model=PlacedOrderResponse, status_code=201)
def create_order(
    identity: Identity = Depends(get_identity),
    svc: OrderService = Depends(get_order_service),
):
    """
    Places an order from the caller's cart, priced from the live catalog.
    """
    placed = svc.place_order(identity.user_id)
    return PlacedOrderResponse(
        message="Order created successfully",
        order=placed.order,
        cart_cleared=placed.cart_cleared,
    )


@router.get("", response_model=List[OrderOut])
def list_orders(
    identity: Identity = Depends(get_identity),
    svc: OrderService = Depends(get_order_service),
):
    return svc.list_orders(identity.user_id)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    identity: Identity = Depends(get_identity),
    svc: OrderService = Depends(get_order_service),
):
    return svc.get_order(order_id, identity)


@router.put("/update/{order_id}", response_model=OrderOut)
def update_order(
    order_id: int,
    payload: OrderStatusUpdate,
    identity: Identity = Depends(get_identity),
    svc: OrderService = Depends(get_order_service),
):
    """
    Changes the order status. Owners can update their own orders, admins any.
    """
    return svc.update_status(order_id, payload.status, identity)
