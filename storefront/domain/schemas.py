# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, EmailStr
from pydantic.alias_generators import to_camel
from typing import List, Optional
from decimal import Decimal
from datetime import datetime


class CamelModel(BaseModel):
    """Wire format is camelCase (productId, userId), Python side snake_case."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =====================================================
# CART
# =====================================================
class CartLine(CamelModel):
    """One validated line as stored in the cart."""

    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0)
    price: Decimal = Field(..., gt=0)


class CartLineIn(CamelModel):
    """Raw line from the client; range checks happen in CartService."""

    product_id: int
    quantity: int
    price: Decimal


class RemoveQuantityIn(CamelModel):
    quantity: int


class CartOut(CamelModel):
    user_id: str
    lines: List[CartLine]
    total: Decimal
    version: int
    updated_at: datetime | None = None


class CartResponse(CamelModel):
    success: bool = True
    cart: Optional[CartOut] = None
    message: Optional[str] = None


# =====================================================
# CATALOG
# =====================================================
class ProductIn(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    image: str = Field(..., min_length=1, max_length=1024)
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)


class ProductUpdate(CamelModel):
    """Partial update; only fields the client sent are applied."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, min_length=1)
    image: Optional[str] = Field(None, min_length=1, max_length=1024)
    price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)


class ProductOut(CamelModel):
    id: int
    name: str
    description: str
    image: str
    price: Decimal
    created_at: datetime


class PaginatedProducts(CamelModel):
    products: List[ProductOut]
    total: int
    page: int
    limit: int


class ProductListResponse(CamelModel):
    data: PaginatedProducts
    page: int
    limit: int


class ProductDeletedResponse(CamelModel):
    message: str
    deleted_product: ProductOut


# =====================================================
# ORDERS
# =====================================================
class OrderLine(CamelModel):
    """Product snapshot taken when the order was placed."""

    product_id: int
    name: str
    image: str
    price: Decimal
    quantity: int


class OrderOut(CamelModel):
    id: int
    payment_id: str
    user_id: str
    lines: List[OrderLine]
    status: str
    total: Decimal
    created_at: datetime


class PlacedOrderResponse(CamelModel):
    message: str
    order: OrderOut
    cart_cleared: bool


class OrderStatusUpdate(CamelModel):
    status: str = Field(..., min_length=1)


# =====================================================
# USERS
# =====================================================
class UserSignup(CamelModel):
    user_id: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserLogin(CamelModel):
    user_id: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserUpdate(CamelModel):
    """Partial update of account fields; absent fields stay as they are."""

    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=1)


class RoleUpdate(CamelModel):
    role: str = Field(..., min_length=1)


class UserOut(CamelModel):
    user_id: str
    email: str
    role: str
    created_at: datetime


class TokenOut(CamelModel):
    token: str
    token_type: str = "bearer"


class MessageOut(CamelModel):
    message: str
