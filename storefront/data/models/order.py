from sqlalchemy import Column, Integer, String, Text, DateTime, Numeric
from datetime import datetime, timezone

from storefront.data.database import Base


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, autoincrement=True)
    payment_id = Column(String(64), nullable=False, index=True)
    user_id = Column(String(255), nullable=False, index=True)

    # JSON snapshot of the order lines
    product_info = Column(Text, nullable=False)
    status = Column(String(32), nullable=False, default="Order-Accepted")
    total = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
