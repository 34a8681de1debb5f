"""Order API endpoints."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from wallmasters.api.deps import get_current_user_id, get_db, get_optional_user_id
from wallmasters.schemas.order import OrderCreate, OrderPlacedResponse, OrderResponse
from wallmasters.services import orders as order_service

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", response_model=OrderPlacedResponse, status_code=status.HTTP_201_CREATED)
def place_order(
    order_data: OrderCreate,
    db: Session = Depends(get_db),
    user_id: str | None = Depends(get_optional_user_id),
):
    """Place a cash-on-delivery order as the signed-in user or as a guest."""
    order = order_service.place_order(db, order_data.model_dump(by_alias=True), user_id)
    return OrderPlacedResponse(
        message="Order placed successfully",
        order=OrderResponse.model_validate(order),
    )


@router.get("", response_model=list[OrderResponse])
def get_my_orders(
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return [OrderResponse.model_validate(order) for order in order_service.list_orders(db, user_id)]
