"""Order and saved-item schemas."""
from pydantic import BaseModel, EmailStr, Field


class OrderProduct(BaseModel):
    product_id: str = Field(..., alias="productId")
    name: str
    size: str | None = None
    quantity: int = Field(..., ge=1)
    price: float = Field(..., ge=0)
    image: str | None = None

    class Config:
        populate_by_name = True


class ShippingAddress(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    mobile_no: str = Field(..., alias="mobileNo", min_length=1)
    house_no: str = Field(..., alias="houseNo", min_length=1)
    street: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    postal_code: str | None = Field(None, alias="postalCode")

    class Config:
        populate_by_name = True


class OrderCreate(BaseModel):
    """Checkout request. Payment is always cash on delivery."""

    products: list[OrderProduct] = Field(..., min_length=1)
    total_price: float = Field(..., alias="totalPrice", ge=0)
    shipping_address: ShippingAddress = Field(..., alias="shippingAddress")

    class Config:
        populate_by_name = True


class OrderResponse(BaseModel):
    order_id: str = Field(..., alias="orderId")
    user: str
    products: list[dict]
    total_price: float = Field(..., alias="totalPrice")
    shipping_address: dict = Field(..., alias="shippingAddress")
    order_status: str = Field(..., alias="orderStatus")
    payment_status: str = Field(..., alias="paymentStatus")
    payment_method: str = Field(..., alias="paymentMethod")
    created_at: str = Field(..., alias="createdAt")

    class Config:
        from_attributes = True
        populate_by_name = True


class OrderPlacedResponse(BaseModel):
    message: str
    order: OrderResponse


class SavedProduct(BaseModel):
    product_id: str = Field(..., alias="productId", min_length=1)
    name: str
    price: float = Field(..., ge=0)
    images: list[str] = Field(..., min_length=1)

    class Config:
        populate_by_name = True


class SavedItemCreate(BaseModel):
    """Request body: ``{"product": {...}}``."""

    product: SavedProduct


class SavedItemResponse(BaseModel):
    product_id: str = Field(..., alias="productId")
    name: str
    price: float
    image: str | None = None

    class Config:
        from_attributes = True
        populate_by_name = True


class ContactMessage(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    comment: str = Field(..., min_length=1)
