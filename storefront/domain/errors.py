# storefront/domain/errors.py
"""
Error taxonomy shared by services and the HTTP layer.

Every error carries the HTTP status it maps to and a client-safe message.
Driver errors and tracebacks are logged where they happen and never end up
in `message`.
"""


class AppError(Exception):
    status_code = 500
    retryable = False
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class AuthError(AppError):
    status_code = 401
    default_message = "Authentication required"


class ForbiddenError(AppError):
    status_code = 403
    default_message = "Not authorized"


class ConflictError(AppError):
    status_code = 409
    default_message = "Conflict"


class DependencyError(AppError):
    status_code = 503
    retryable = True
    default_message = "A backing service is unavailable"


class InternalError(AppError):
    status_code = 500


# cart
class InvalidCartData(ValidationError):
    default_message = "Invalid product ID, quantity, or price"


class EmptyCart(ValidationError):
    default_message = "Cart is empty"


class CartNotFound(NotFoundError):
    default_message = "Cart not found"


class ProductNotInCart(NotFoundError):
    default_message = "Product not found in cart"


class CartConflict(ConflictError):
    default_message = "Cart was modified by another request, please retry"


class MalformedCart(InternalError):
    default_message = "Stored cart could not be read"


# catalog
class ProductNotFound(NotFoundError):
    default_message = "Product not found"

    def __init__(self, product_id: int | None = None, message: str | None = None):
        self.product_id = product_id
        if message is None and product_id is not None:
            message = f"Product with ID {product_id} not found"
        super().__init__(message)


# orders / payments
class OrderNotFound(NotFoundError):
    default_message = "Order not found"


class PaymentFailed(DependencyError):
    status_code = 502
    retryable = False
    default_message = "Payment processing failed"


class DeadlineExceeded(DependencyError):
    status_code = 504
    default_message = "Request deadline exceeded"


# users
class UserNotFound(NotFoundError):
    default_message = "User not found"


class UserAlreadyExists(ConflictError):
    default_message = "User already exists"


class EmailInUse(ConflictError):
    default_message = "Email already in use"
