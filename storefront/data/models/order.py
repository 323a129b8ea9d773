from sqlalchemy import Column, Integer, String, Text, DateTime, Numeric, Boolean
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from storefront.data.database import Base


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False, index=True)

    phone = Column(String(20), nullable=False, index=True)
    postal_code = Column(String(10), nullable=False)
    address = Column(Text, nullable=False)

    status = Column(String, nullable=False, default="processing")  # processing, shipped, invalid, ...
    shipped = Column(Boolean, nullable=False, default=False)
    total_price = Column(Numeric(14, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.id",
    )
