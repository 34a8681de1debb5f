"""Saved shipping address model and its duplicate rule."""
import uuid
from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import Boolean, Column, ForeignKey, String, event
from sqlalchemy.orm import Session, relationship

from wallmasters.database import Base
from wallmasters.errors import ConflictError

# Fields that identify an address; country and is_default are not part of it.
ADDRESS_IDENTITY_FIELDS = ("name", "email", "mobile_no", "house_no", "street", "city", "postal_code")

DUPLICATE_ADDRESS_MESSAGE = "Duplicate address detected."


def _normalize(value) -> str:
    return (value or "").strip().lower()


def _field(address, field: str):
    if isinstance(address, dict):
        return address.get(field)
    return getattr(address, field, None)


def address_key(address) -> tuple[str, ...]:
    """Normalized identity tuple for an Address row or a plain dict."""
    return tuple(_normalize(_field(address, field)) for field in ADDRESS_IDENTITY_FIELDS)


def is_duplicate(existing: Iterable, candidate) -> bool:
    """True when any existing address has the same normalized identity."""
    candidate_key = address_key(candidate)
    return any(address_key(address) == candidate_key for address in existing)


class Address(Base):
    """A saved shipping address belonging to a user."""

    __tablename__ = "addresses"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    mobile_no = Column(String(30), nullable=False)
    house_no = Column(String(50), nullable=False)
    street = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False)
    postal_code = Column(String(20))
    country = Column(String(100))
    is_default = Column(Boolean, default=False, nullable=False)
    created_at = Column(String(26), default=lambda: datetime.utcnow().isoformat())

    user = relationship("User", back_populates="addresses")


def _siblings(session: Session, address: Address) -> list[Address]:
    if address.user is not None:
        return [other for other in address.user.addresses if other is not address]

    persisted = session.query(Address).filter(Address.user_id == address.user_id).all()
    pending = [
        obj for obj in session.new
        if isinstance(obj, Address) and obj.user_id == address.user_id
    ]
    return [other for other in {id(o): o for o in persisted + pending}.values() if other is not address]


@event.listens_for(Session, "before_flush")
def reject_duplicate_addresses(session: Session, flush_context, instances) -> None:
    """Apply the duplicate rule to every write, not only the API path."""
    changed = [
        obj for obj in list(session.new) + list(session.dirty)
        if isinstance(obj, Address)
    ]
    if not changed:
        return

    with session.no_autoflush:
        for address in changed:
            if is_duplicate(_siblings(session, address), address):
                raise ConflictError(DUPLICATE_ADDRESS_MESSAGE)
