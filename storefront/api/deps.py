# storefront/api/deps.py
from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.errors import AuthError, ForbiddenError
from storefront.domain.ports import Identity, ListingCache
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.payment_repo import PaymentRepo
from storefront.repos.product_repo import ProductRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.cart_service import CartService
from storefront.services.order_service import OrderService
from storefront.services.payment_service import PaymentService
from storefront.services.product_service import ProductService
from storefront.services.user_service import UserService
from storefront.utils.deadline import Deadline
from storefront.utils.security import verify_token
from storefront.utils.settings import REQUEST_TIMEOUT_SECONDS


def get_deadline() -> Deadline:
    return Deadline(REQUEST_TIMEOUT_SECONDS)


def get_listing_cache(request: Request) -> ListingCache:
    return request.app.state.listing_cache


# =====================================================
# auth
# =====================================================
def get_identity(authorization: str | None = Header(None)) -> Identity:
    if not authorization:
        raise AuthError("Authorization header required")

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AuthError("Authorization header format must be 'Bearer {token}'")

    return verify_token(parts[1])


def require_roles(*roles: str):
    def dependency(identity: Identity = Depends(get_identity)) -> Identity:
        if identity.role not in roles:
            raise ForbiddenError("User does not have required privileges")
        return identity

    return dependency


# =====================================================
# services, built per request
# =====================================================
def get_cart_service(
    db: Session = Depends(get_db),
    deadline: Deadline = Depends(get_deadline),
) -> CartService:
    return CartService(CartRepo(db), deadline=deadline)


def get_product_service(
    db: Session = Depends(get_db),
    cache: ListingCache = Depends(get_listing_cache),
    deadline: Deadline = Depends(get_deadline),
) -> ProductService:
    return ProductService(ProductRepo(db), cache, deadline=deadline)


def get_order_service(
    db: Session = Depends(get_db),
    deadline: Deadline = Depends(get_deadline),
) -> OrderService:
    return OrderService(
        carts=CartRepo(db),
        catalog=ProductRepo(db),
        payments=PaymentService(PaymentRepo(db)),
        ledger=OrderRepo(db),
        deadline=deadline,
    )


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(UserRepo(db))
