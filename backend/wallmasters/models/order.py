"""Order model."""
import uuid
from datetime import datetime

from sqlalchemy import JSON, Column, Float, String

from wallmasters.database import Base

GUEST_USER = "guest"

ORDER_STATUSES = ("pending", "processed", "shipped", "delivered", "cancelled")
PAYMENT_STATUSES = ("unpaid", "paid", "refunded")
PAYMENT_METHODS = ("cash_on_delivery",)


class Order(Base):
    """A placed order. ``user`` is a user id or ``"guest"``."""

    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    order_id = Column(String(20), unique=True, nullable=False, index=True)
    user = Column(String(36), nullable=False, default=GUEST_USER, index=True)
    products = Column(JSON, nullable=False)  # [{productId, name, size, quantity, price, image}]
    total_price = Column(Float, nullable=False)
    shipping_address = Column(JSON, nullable=False)
    order_status = Column(String(20), nullable=False, default="pending")
    payment_status = Column(String(20), nullable=False, default="unpaid")
    payment_method = Column(String(30), nullable=False, default="cash_on_delivery")
    created_at = Column(String(26), default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String(26), default=lambda: datetime.utcnow().isoformat(), onupdate=lambda: datetime.utcnow().isoformat())
