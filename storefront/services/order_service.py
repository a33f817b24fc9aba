# storefront/services/order_service.py
from dataclasses import dataclass
from decimal import Decimal
from typing import List

from pydantic import TypeAdapter, ValidationError as SchemaError

from storefront.data.models.order import OrderModel
from storefront.domain.errors import (
    DependencyError,
    EmptyCart,
    ForbiddenError,
    InternalError,
    OrderNotFound,
    PaymentFailed,
    ProductNotFound,
    ValidationError,
)
from storefront.domain.ports import CartStore, CatalogStore, Identity, OrderLedger, PaymentGateway
from storefront.domain.schemas import OrderLine, OrderOut
from storefront.services.cart_service import decode_lines
from storefront.services.event_service import EventService
from storefront.utils.deadline import Deadline
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

ORDER_ACCEPTED = "Order-Accepted"
ORDER_STATUSES = (ORDER_ACCEPTED, "Processing", "Shipped", "Delivered", "Cancelled")

_order_lines = TypeAdapter(List[OrderLine])


@dataclass
class PlacedOrder:
    order: OrderOut
    cart_cleared: bool


class OrderService:
    """
    Turns a user's cart into a paid order.

    The steps commit one by one, there is no transaction spanning payment,
    order insert and cart delete. A failed order insert voids the payment;
    a failed cart delete leaves the order in place and is reported through
    PlacedOrder.cart_cleared.
    """

    def __init__(
        self,
        carts: CartStore,
        catalog: CatalogStore,
        payments: PaymentGateway,
        ledger: OrderLedger,
        events=EventService,
        deadline: Deadline | None = None,
    ):
        self.carts = carts
        self.catalog = catalog
        self.payments = payments
        self.ledger = ledger
        self.events = events
        self.deadline = deadline or Deadline.none()

    def place_order(self, user_id: str) -> PlacedOrder:
        """
        Use Case: placing an order from the cart.

        1. read the cart (EmptyCart / MalformedCart)
        2. price every line from the live catalog (ProductNotFound)
        3. charge the total (PaymentFailed)
        4. store the order as Order-Accepted
        5. delete the cart, unless it changed since step 1
        """
        if not user_id:
            raise ValidationError("Invalid user ID")

        self.deadline.check("cart read")
        cart = self.carts.get(user_id)
        if cart is None or not cart.product_info:
            raise EmptyCart()

        # captured now, the row object is expired by later commits
        cart_version = cart.version
        cart_lines = decode_lines(cart.product_info)
        if not cart_lines:
            raise EmptyCart()

        # cart prices are display-only, the catalog price is what gets charged
        order_lines: List[OrderLine] = []
        total = Decimal("0.00")
        for item in cart_lines:
            self.deadline.check(f"catalog lookup of product {item.product_id}")
            product = self.catalog.get_by_id(item.product_id)
            if product is None:
                logger.info(f"Order for {user_id} rejected, product {item.product_id} no longer exists")
                raise ProductNotFound(item.product_id)

            price = Decimal(product.price)
            order_lines.append(
                OrderLine(
                    product_id=product.id,
                    name=product.name,
                    image=product.image,
                    price=price,
                    quantity=item.quantity,
                )
            )
            total += price * item.quantity

        self.deadline.check("payment")
        try:
            payment = self.payments.charge(user_id, total)
        except PaymentFailed:
            raise
        except DependencyError as e:
            logger.error(f"Payment for user {user_id} failed: {e}")
            raise PaymentFailed() from e

        if payment is None or not payment.transaction_id:
            logger.error(f"Payment for user {user_id} returned no transaction id")
            raise PaymentFailed()

        try:
            self.deadline.check("order insert")
            created = self.ledger.insert(
                OrderModel(
                    payment_id=payment.transaction_id,
                    user_id=user_id,
                    product_info=_order_lines.dump_json(order_lines, by_alias=True).decode(),
                    status=ORDER_ACCEPTED,
                    total=total,
                )
            )
        except Exception:
            self._void_payment(payment.transaction_id, user_id)
            raise

        logger.info(f"Order {created.id} created for user {user_id}, payment {payment.transaction_id}, total {total}")

        # the order is committed at this point, so the cart delete runs even past the deadline
        try:
            cart_cleared = self.carts.delete(user_id, cart_version)
        except DependencyError as e:
            cart_cleared = False
            logger.error(f"Order {created.id} stored but cart of {user_id} was not cleared: {e}")
        else:
            if not cart_cleared:
                logger.warning(f"Cart of {user_id} changed while order {created.id} was placed, kept the newer cart")

        self.events.order_placed(user_id, created.id, payment.transaction_id, str(total))

        return PlacedOrder(order=self._to_out(created, order_lines), cart_cleared=cart_cleared)

    def list_orders(self, user_id: str) -> List[OrderOut]:
        if not user_id:
            raise ValidationError("Invalid user ID")
        self.deadline.check("order list")
        return [self._to_out(o) for o in self.ledger.get_by_user(user_id)]

    def get_order(self, order_id: int, identity: Identity) -> OrderOut:
        return self._to_out(self._load_owned(order_id, identity))

    def update_status(self, order_id: int, status: str, identity: Identity) -> OrderOut:
        if status not in ORDER_STATUSES:
            raise ValidationError(f"Invalid status, expected one of: {', '.join(ORDER_STATUSES)}")

        order = self._load_owned(order_id, identity)
        previous = order.status
        order.status = status
        self.deadline.check("order update")
        updated = self.ledger.update(order)

        logger.info(f"Order {order_id} status {previous} -> {status} by {identity.user_id}")
        return self._to_out(updated)

    # helpers
    def _load_owned(self, order_id: int, identity: Identity) -> OrderModel:
        if order_id <= 0:
            raise ValidationError("Invalid order ID")
        self.deadline.check("order read")
        order = self.ledger.get_by_id(order_id)
        if order is None:
            raise OrderNotFound()
        if order.user_id != identity.user_id and not identity.is_admin:
            raise ForbiddenError("Order does not belong to user")
        return order

    def _void_payment(self, transaction_id: str, user_id: str) -> None:
        try:
            self.payments.void(transaction_id)
        except Exception as e:
            logger.error(f"Payment {transaction_id} of user {user_id} is orphaned, void failed: {e}")

    @staticmethod
    def _to_out(order: OrderModel, lines: List[OrderLine] | None = None) -> OrderOut:
        if lines is None:
            try:
                lines = _order_lines.validate_json(order.product_info)
            except SchemaError as e:
                logger.error(f"Order {order.id} has unreadable lines: {e}")
                raise InternalError("Stored order could not be read") from e

        return OrderOut(
            id=order.id,
            payment_id=order.payment_id,
            user_id=order.user_id,
            lines=lines,
            status=order.status,
            total=order.total,
            created_at=order.created_at,
        )
