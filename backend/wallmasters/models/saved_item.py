"""Saved-for-later product model."""
import uuid
from datetime import datetime

from sqlalchemy import Column, Float, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship

from wallmasters.database import Base


class SavedItem(Base):
    """Product a user saved for later."""

    __tablename__ = "saved_items"
    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="uq_saved_items_user_product"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(String(100), nullable=False)
    name = Column(String(255), nullable=False)
    price = Column(Float, nullable=False)
    image = Column(String(1024))
    saved_at = Column(String(26), default=lambda: datetime.utcnow().isoformat())

    user = relationship("User", back_populates="saved_items")
