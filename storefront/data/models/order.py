from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric
from sqlalchemy.orm import relationship

from storefront.data.database import Base
from storefront.domain.statuses import OrderStatus


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    order_status = Column(String, nullable=False, default=OrderStatus.NOT_PROCESSED.value)

    # payment intent, po utworzeniu zmienia sie tylko payment_status
    payment_intent_id = Column(String(32), nullable=False, unique=True)
    payment_method = Column(String, nullable=False)
    payment_amount = Column(Numeric(10, 2), nullable=False)
    payment_currency = Column(String(3), nullable=False)
    payment_status = Column(String, nullable=False)
    payment_created_at = Column(DateTime(timezone=True), nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )
