# storefront/repos/payment_repo.py
from storefront.data.models.payment import PaymentModel
from storefront.repos.base import BaseRepo, store_call


class PaymentRepo(BaseRepo):

    @store_call("create payment")
    def create(self, payment: PaymentModel) -> PaymentModel:
        self.db.add(payment)
        self.db.commit()
        self.db.refresh(payment)
        return payment

    @store_call("get payment")
    def get(self, payment_id: str) -> PaymentModel | None:
        return self.db.get(PaymentModel, payment_id)

    @store_call("update payment status")
    def update_status(self, payment_id: str, status: str) -> PaymentModel | None:
        payment = self.db.get(PaymentModel, payment_id)
        if payment:
            payment.status = status
            self.db.commit()
            self.db.refresh(payment)
        return payment
