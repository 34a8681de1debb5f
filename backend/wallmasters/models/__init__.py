"""SQLAlchemy models package."""
from wallmasters.models.user import User
from wallmasters.models.address import Address
from wallmasters.models.order import Order
from wallmasters.models.saved_item import SavedItem

__all__ = [
    "User",
    "Address",
    "Order",
    "SavedItem",
]
