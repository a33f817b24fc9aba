from decimal import Decimal
from typing import Iterable, List

from pydantic import TypeAdapter, ValidationError as SchemaError

from storefront.data.models.cart import CartModel
from storefront.domain.errors import (
    CartNotFound,
    InvalidCartData,
    MalformedCart,
    ProductNotInCart,
    ValidationError,
)
from storefront.domain.ports import CartStore
from storefront.domain.schemas import CartLine, CartLineIn, CartOut
from storefront.utils.deadline import Deadline
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_lines = TypeAdapter(List[CartLine])


def decode_lines(product_info: str | None) -> List[CartLine]:
    if not product_info:
        return []
    try:
        return _lines.validate_json(product_info)
    except SchemaError as e:
        logger.error(f"Failed to parse stored cart lines: {e}")
        raise MalformedCart() from e


def encode_lines(lines: List[CartLine]) -> str:
    return _lines.dump_json(lines, by_alias=True).decode()


def cart_total(lines: Iterable[CartLine]) -> Decimal:
    return sum((line.price * line.quantity for line in lines), Decimal("0.00"))


class CartService:
    """
    Cart use cases for a single user.
    commands (add, replace, remove, clear) go read -> modify -> conditional write,
    query (get) only reads
    """

    def __init__(self, repo: CartStore, deadline: Deadline | None = None):
        self.repo = repo
        self.deadline = deadline or Deadline.none()

    #query
    def get_cart(self, user_id: str) -> CartOut | None:
        self._require_user(user_id)
        self.deadline.check("cart read")
        cart = self.repo.get(user_id)
        if not cart:
            return None
        return self._to_out(cart, decode_lines(cart.product_info))

    #commands
    def add_line(self, user_id: str, product_id: int, quantity: int, price) -> CartOut:
        self._require_user(user_id)
        new_line = self._validate_line(product_id, quantity, price)

        self.deadline.check("cart read")
        cart = self.repo.get(user_id)
        lines = decode_lines(cart.product_info) if cart else []

        for i, existing in enumerate(lines):
            if existing.product_id == new_line.product_id:
                logger.info(
                    f"Product {product_id} already in cart of {user_id}, quantity "
                    f"{existing.quantity} -> {existing.quantity + new_line.quantity}"
                )
                # quantity adds up, price is last-write-wins
                lines[i] = CartLine(
                    product_id=existing.product_id,
                    quantity=existing.quantity + new_line.quantity,
                    price=new_line.price,
                )
                break
        else:
            logger.info(f"Adding product {product_id} to cart of {user_id}")
            lines.append(new_line)

        return self._save(user_id, lines, cart)

    def replace_lines(self, user_id: str, lines: Iterable[CartLineIn | dict]) -> CartOut:
        self._require_user(user_id)

        validated: List[CartLine] = []
        seen = set()
        for raw in lines:
            if isinstance(raw, CartLineIn):
                raw = raw.model_dump()
            try:
                line = CartLine.model_validate(raw)
            except SchemaError:
                raise InvalidCartData("Invalid product data in cart")
            if line.product_id in seen:
                raise InvalidCartData(f"Duplicate product {line.product_id} in cart data")
            seen.add(line.product_id)
            validated.append(line)

        self.deadline.check("cart read")
        cart = self.repo.get(user_id)
        logger.info(f"Replacing cart of {user_id} with {len(validated)} line(s)")
        return self._save(user_id, validated, cart)

    def remove_quantity(self, user_id: str, product_id: int, quantity: int) -> CartOut:
        self._require_user(user_id)
        if product_id <= 0:
            raise InvalidCartData("Invalid product ID")
        if quantity <= 0:
            raise InvalidCartData("Quantity to remove must be positive")

        self.deadline.check("cart read")
        cart = self.repo.get(user_id)
        if not cart:
            raise CartNotFound()

        updated: List[CartLine] = []
        found = False
        for line in decode_lines(cart.product_info):
            if line.product_id != product_id:
                updated.append(line)
                continue
            found = True
            remaining = line.quantity - quantity
            if remaining > 0:
                updated.append(CartLine(product_id=line.product_id, quantity=remaining, price=line.price))
            # remaining <= 0 drops the line

        if not found:
            raise ProductNotInCart()

        logger.info(f"Removed {quantity} x product {product_id} from cart of {user_id}")
        return self._save(user_id, updated, cart)

    def clear_cart(self, user_id: str) -> None:
        self._require_user(user_id)
        self.deadline.check("cart delete")
        self.repo.delete(user_id)
        logger.info(f"Cart of {user_id} cleared")

    # helpers
    def _save(self, user_id: str, lines: List[CartLine], cart: CartModel | None) -> CartOut:
        self.deadline.check("cart write")
        saved = self.repo.upsert(
            user_id,
            encode_lines(lines),
            cart.version if cart else None,
        )
        return self._to_out(saved, lines)

    @staticmethod
    def _validate_line(product_id: int, quantity: int, price) -> CartLine:
        try:
            return CartLine(product_id=product_id, quantity=quantity, price=price)
        except SchemaError:
            raise InvalidCartData()

    @staticmethod
    def _require_user(user_id: str) -> None:
        if not user_id:
            raise ValidationError("User ID cannot be empty")

    @staticmethod
    def _to_out(cart: CartModel, lines: List[CartLine]) -> CartOut:
        return CartOut(
            user_id=cart.user_id,
            lines=lines,
            total=cart_total(lines),
            version=cart.version,
            updated_at=cart.updated_at,
        )
