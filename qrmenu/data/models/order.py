from datetime import datetime, timezone

from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Numeric, Text, Enum
from sqlalchemy.orm import relationship

from qrmenu.data.database import Base
from qrmenu.domain.status import OrderStatus, INITIAL_STATUS


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    restaurant_id = Column(Integer, ForeignKey("restaurants.id"), nullable=False, index=True)

    status = Column(
        Enum(OrderStatus, native_enum=False, length=20),
        nullable=False,
        default=INITIAL_STATUS,
    )
    total = Column(Numeric(10, 2), nullable=False)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )

    customer_name = Column(String(255), nullable=True)
    customer_email = Column(String(255), nullable=True)
    customer_phone = Column(String(50), nullable=True)
    special_requests = Column(Text, nullable=True)

    lines = relationship(
        "OrderLineModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderLineModel.product_id",
    )
