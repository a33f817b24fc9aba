# storefront/domain/ports.py
"""
Interfaces the order workflow, cart logic and listing cache consume.

The SQLAlchemy repositories and the Redis cache implement these; tests can
swap in anything with the same shape.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Protocol

from storefront.data.models import CartModel, OrderModel, ProductModel


@dataclass(frozen=True)
class Identity:
    user_id: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role in ("admin", "superadmin")


@dataclass(frozen=True)
class PaymentResult:
    transaction_id: str
    status: str


class CartStore(Protocol):
    def get(self, user_id: str) -> Optional[CartModel]: ...

    def upsert(self, user_id: str, product_info: str, expected_version: int | None) -> CartModel: ...

    def delete(self, user_id: str, expected_version: int | None = None) -> bool: ...


class CatalogStore(Protocol):
    def get_by_id(self, product_id: int) -> Optional[ProductModel]: ...

    def get_page(self, limit: int, offset: int) -> List[ProductModel]: ...

    def count(self) -> int: ...


class OrderLedger(Protocol):
    def insert(self, order: OrderModel) -> OrderModel: ...

    def get_by_user(self, user_id: str) -> List[OrderModel]: ...

    def get_by_id(self, order_id: int) -> Optional[OrderModel]: ...

    def update(self, order: OrderModel) -> OrderModel: ...


class PaymentGateway(Protocol):
    def charge(self, user_id: str, amount: Decimal) -> Optional[PaymentResult]: ...

    def void(self, transaction_id: str) -> None: ...


class ListingCache(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str, ttl: int) -> None: ...

    def delete_by_pattern(self, pattern: str) -> int: ...
