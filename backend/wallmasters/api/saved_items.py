"""Saved-for-later API endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from wallmasters.api.deps import get_current_user, get_db
from wallmasters.errors import BadRequestError, NotFoundError
from wallmasters.models.saved_item import SavedItem
from wallmasters.models.user import User
from wallmasters.schemas.auth import MessageResponse
from wallmasters.schemas.order import SavedItemCreate, SavedItemResponse

router = APIRouter(prefix="/saved-items", tags=["saved-items"])


@router.post("", response_model=MessageResponse)
def save_for_later(
    payload: SavedItemCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    product = payload.product
    if any(item.product_id == product.product_id for item in current_user.saved_items):
        raise BadRequestError("Product already saved.")

    current_user.saved_items.append(SavedItem(
        product_id=product.product_id,
        name=product.name,
        price=product.price,
        image=product.images[0],
    ))
    db.commit()
    return MessageResponse(message="Product saved for later.")


@router.get("", response_model=list[SavedItemResponse])
def get_saved_items(current_user: User = Depends(get_current_user)):
    return [SavedItemResponse.model_validate(item) for item in current_user.saved_items]


@router.delete("/{product_id}", response_model=MessageResponse)
def delete_saved_item(
    product_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    item = next((i for i in current_user.saved_items if i.product_id == product_id), None)
    if item is None:
        raise NotFoundError("Product not found in saved items.")

    current_user.saved_items.remove(item)
    db.commit()
    return MessageResponse(message="Item removed from saved items.")
