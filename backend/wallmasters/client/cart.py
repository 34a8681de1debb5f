"""Shopping cart keyed to the current identity: a guest or a signed-in user."""
import logging
from typing import Optional

from wallmasters.client.storage import SessionStorage

logger = logging.getLogger(__name__)

GUEST_CART_KEY = "guestCart"


def cart_key(user_id: Optional[str]) -> str:
    return f"cart_{user_id}" if user_id else GUEST_CART_KEY


def _same_line(item: dict, item_id: str, size: Optional[str]) -> bool:
    return item["id"] == item_id and item.get("size") == size


class CartStore:
    """Cart lines are dicts with at least ``id``, ``size`` and ``quantity``.

    A line is identified by ``(id, size)``. Every change is persisted under
    the current identity's key.
    """

    def __init__(self, storage: SessionStorage, user_id: Optional[str] = None):
        self.storage = storage
        self.user_id = user_id
        self.items: list[dict] = self._load(user_id)

    def _load(self, user_id: Optional[str]) -> list[dict]:
        return [dict(item) for item in self.storage.get(cart_key(user_id), [])]

    def _save(self) -> None:
        self.storage.set(cart_key(self.user_id), self.items)

    def set_user(self, user_id: Optional[str], merge_guest: bool = False) -> None:
        """Switch identity and load that identity's cart.

        With ``merge_guest`` the guest cart is folded into the user's cart and
        then emptied; otherwise the user's cart simply replaces it.
        """
        guest_items = self._load(None) if merge_guest and user_id else []
        self.user_id = user_id
        self.items = self._load(user_id)

        if guest_items:
            for item in guest_items:
                self._add_line(item)
            self._save()
            self.storage.set(GUEST_CART_KEY, [])
            logger.debug(f"Merged {len(guest_items)} guest cart lines into user {user_id}")

    def _add_line(self, item: dict) -> None:
        for line in self.items:
            if _same_line(line, item["id"], item.get("size")):
                line["quantity"] += item["quantity"]
                return
        self.items.append(dict(item))

    def add(self, item: dict) -> None:
        self._add_line(item)
        self._save()

    def remove(self, item_id: str, size: Optional[str] = None) -> None:
        self.items = [line for line in self.items if not _same_line(line, item_id, size)]
        self._save()

    def increment(self, item_id: str, size: Optional[str] = None) -> None:
        for line in self.items:
            if _same_line(line, item_id, size):
                line["quantity"] += 1
        self._save()

    def decrement(self, item_id: str, size: Optional[str] = None) -> None:
        """Drop the line instead of going below one."""
        for line in self.items:
            if _same_line(line, item_id, size):
                if line["quantity"] > 1:
                    line["quantity"] -= 1
                else:
                    self.items.remove(line)
                break
        self._save()

    def clean(self) -> None:
        self.items = []
        self._save()
