"""Address book schemas."""
from pydantic import BaseModel, Field


class AddressFields(BaseModel):
    """Address as sent by the storefront."""

    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=1, max_length=255)
    mobile_no: str = Field(..., alias="mobileNo", min_length=1, max_length=30)
    house_no: str = Field(..., alias="houseNo", min_length=1, max_length=50)
    street: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    postal_code: str | None = Field(None, alias="postalCode", max_length=20)
    country: str | None = Field(None, max_length=100)

    class Config:
        populate_by_name = True


class AddressCreate(BaseModel):
    """Request body: ``{"address": {...}}``."""

    address: AddressFields


class AddressResponse(AddressFields):
    id: str = Field(..., alias="_id")
    is_default: bool = Field(..., alias="isDefault")

    class Config:
        from_attributes = True
        populate_by_name = True


class AddressListResponse(BaseModel):
    message: str
    saved_addresses: list[AddressResponse] = Field(..., alias="savedAddresses")

    class Config:
        populate_by_name = True
