"""Order placement and lookup."""
from datetime import date
import logging
import random

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from wallmasters.errors import ServerFaultError
from wallmasters.models.order import GUEST_USER, Order
from wallmasters.services import mailer

logger = logging.getLogger(__name__)

ORDER_ID_ATTEMPTS = 5


def generate_order_id(today: date | None = None) -> str:
    """``ORD-YYYYMMDD-NNNN`` with a random four digit suffix."""
    day = today or date.today()
    return f"ORD-{day.strftime('%Y%m%d')}-{random.randint(1000, 9999)}"


def place_order(db: Session, data: dict, user_id: str | None = None) -> Order:
    """Persist an order for ``user_id`` (or a guest) and send the emails.

    Mail failures are logged but the order stands.
    """
    for _ in range(ORDER_ID_ATTEMPTS):
        order = Order(
            order_id=generate_order_id(),
            user=user_id or GUEST_USER,
            products=data["products"],
            total_price=data["totalPrice"],
            shipping_address=data["shippingAddress"],
        )
        db.add(order)
        try:
            db.commit()
            break
        except IntegrityError:
            db.rollback()
            logger.warning(f"Order id collision on {order.order_id}, retrying")
    else:
        raise ServerFaultError("Order placement failed")

    db.refresh(order)
    logger.info(f"Placed order {order.order_id} for {order.user}")

    if not mailer.send_order_confirmation(order):
        logger.warning(f"Confirmation emails for order {order.order_id} were not sent")

    return order


def list_orders(db: Session, user_id: str) -> list[Order]:
    return (
        db.query(Order)
        .filter(Order.user == user_id)
        .order_by(Order.created_at.desc())
        .all()
    )
