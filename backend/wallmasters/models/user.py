"""User model."""
import uuid
from datetime import datetime

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from wallmasters.database import Base


def normalize_email(email: str) -> str:
    return email.strip().lower()


class User(Base):
    """Customer account.

    ``refresh_token`` holds the single live refresh token for the account.
    Issuing a new one overwrites it, which ends the session on any other
    device: one session per user.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    refresh_token = Column(String(1024), index=True)
    reset_token = Column(String(64), index=True)
    reset_token_expires_at = Column(String(26))
    created_at = Column(String(26), default=lambda: datetime.utcnow().isoformat())
    updated_at = Column(String(26), default=lambda: datetime.utcnow().isoformat(), onupdate=lambda: datetime.utcnow().isoformat())

    # Relationships
    addresses = relationship(
        "Address",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="Address.created_at",
    )
    saved_items = relationship("SavedItem", back_populates="user", cascade="all, delete-orphan")
