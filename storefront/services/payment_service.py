# storefront/services/payment_service.py
import uuid
from decimal import Decimal

from storefront.data.models.payment import PaymentModel
from storefront.domain.errors import PaymentFailed
from storefront.domain.ports import PaymentResult
from storefront.repos.payment_repo import PaymentRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class PaymentService:
    """
    Payment simulator.
    Records the attempt as pending, then immediately marks it successful.
    No real gateway is called.
    """

    def __init__(self, repo: PaymentRepo):
        self.repo = repo

    def charge(self, user_id: str, amount: Decimal) -> PaymentResult:
        if not user_id:
            raise PaymentFailed("User ID is required for payment")
        if amount <= 0:
            raise PaymentFailed("Payment amount must be greater than 0")

        payment_id = f"pay_{uuid.uuid4().hex}"
        self.repo.create(
            PaymentModel(
                payment_id=payment_id,
                user_id=user_id,
                total_amount=amount,
                status="pending",
            )
        )

        # simulated gateway: always accepts
        updated = self.repo.update_status(payment_id, "success")
        if updated is None:
            logger.error(f"Payment {payment_id} vanished before it could be confirmed")
            raise PaymentFailed()

        logger.info(f"Payment {payment_id} for user {user_id} succeeded, amount {amount}")
        return PaymentResult(transaction_id=updated.payment_id, status=updated.status)

    def void(self, transaction_id: str) -> None:
        """Compensating action when the order for a payment could not be stored."""
        voided = self.repo.update_status(transaction_id, "voided")
        if voided is None:
            logger.error(f"Cannot void unknown payment {transaction_id}")
            return
        logger.warning(f"Payment {transaction_id} voided")
