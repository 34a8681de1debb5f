"""Address book operations for a signed-in user."""
import logging

from sqlalchemy.orm import Session

from wallmasters.errors import ConflictError, NotFoundError
from wallmasters.models.address import DUPLICATE_ADDRESS_MESSAGE, Address, is_duplicate
from wallmasters.models.user import User

logger = logging.getLogger(__name__)


def list_addresses(user: User) -> list[Address]:
    return list(user.addresses)


def _find_address(user: User, address_id: str) -> Address:
    for address in user.addresses:
        if address.id == address_id:
            return address
    raise NotFoundError("Address not found")


def add_address(db: Session, user: User, data: dict) -> list[Address]:
    """Save a new address. Duplicates are rejected, never merged.

    The first address a user saves becomes their default.
    """
    if is_duplicate(user.addresses, data):
        raise ConflictError(DUPLICATE_ADDRESS_MESSAGE)

    address = Address(**data, is_default=not user.addresses)
    user.addresses.append(address)
    db.commit()
    db.refresh(user)
    logger.debug(f"Saved address {address.id} for user {user.id}")
    return list(user.addresses)


def delete_address(db: Session, user: User, address_id: str) -> list[Address]:
    """Remove an address; a lone survivor is always the default."""
    address = _find_address(user, address_id)
    user.addresses.remove(address)

    if len(user.addresses) == 1:
        user.addresses[0].is_default = True

    db.commit()
    db.refresh(user)
    return list(user.addresses)


def set_default_address(db: Session, user: User, address_id: str) -> list[Address]:
    target = _find_address(user, address_id)
    for address in user.addresses:
        address.is_default = address is target

    db.commit()
    db.refresh(user)
    return list(user.addresses)
