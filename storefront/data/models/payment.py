from sqlalchemy import Column, String, DateTime, Numeric
from datetime import datetime, timezone

from storefront.data.database import Base


class PaymentModel(Base):
    __tablename__ = "payments"

    payment_id = Column(String(64), primary_key=True)
    user_id = Column(String(255), nullable=False, index=True)
    total_amount = Column(Numeric(12, 2), nullable=False)
    status = Column(String(16), nullable=False, default="pending")  # pending, success, voided
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
