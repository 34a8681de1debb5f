"""Saved address API endpoints."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from wallmasters.api.deps import get_current_user, get_db
from wallmasters.models.user import User
from wallmasters.schemas.address import AddressCreate, AddressListResponse, AddressResponse
from wallmasters.services import addresses as address_service

router = APIRouter(prefix="/addresses", tags=["addresses"])


def _listing(message: str, addresses) -> AddressListResponse:
    return AddressListResponse(
        message=message,
        saved_addresses=[AddressResponse.model_validate(address) for address in addresses],
    )


@router.get("", response_model=list[AddressResponse])
def get_addresses(current_user: User = Depends(get_current_user)):
    """Get the current user's saved addresses."""
    return [AddressResponse.model_validate(a) for a in address_service.list_addresses(current_user)]


@router.post("", response_model=AddressListResponse, status_code=status.HTTP_201_CREATED)
def save_address(
    payload: AddressCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Save a new address; 409 if it matches one already saved."""
    addresses = address_service.add_address(db, current_user, payload.address.model_dump())
    return _listing("Address saved successfully.", addresses)


@router.delete("/{address_id}", response_model=AddressListResponse)
def delete_address(
    address_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    addresses = address_service.delete_address(db, current_user, address_id)
    return _listing("Address deleted successfully", addresses)


@router.put("/{address_id}/default", response_model=AddressListResponse)
def set_default_address(
    address_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    addresses = address_service.set_default_address(db, current_user, address_id)
    return _listing("Default address updated successfully", addresses)
