"""Order schemas for checkout and the admin order viewer."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from storefront.models.order import OrderStatus


class CheckoutItem(BaseModel):
    model_config = ConfigDict(extra="forbid")

    product_id: int = Field(..., ge=1)
    quantity: int = Field(..., ge=1)


class CheckoutRequest(BaseModel):
    """Canonical checkout payload; unknown keys are rejected instead of guessed."""

    model_config = ConfigDict(extra="forbid")

    customer_name: str = Field(..., min_length=2, max_length=255)
    email: EmailStr
    phone: str = Field(..., min_length=10, max_length=50)
    address: str | None = None
    comment: str | None = None
    items: list[CheckoutItem] = Field(..., min_length=1)


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    name: str
    price: Decimal = Field(..., decimal_places=2)
    quantity: int
    image_url: str
    subtotal: Decimal = Field(..., decimal_places=2)


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    status: OrderStatus
    customer_name: str
    email: str
    phone: str
    address: str
    comment: str
    total_amount: Decimal = Field(..., decimal_places=2)
    created_at: datetime
    updated_at: datetime
    items: list[OrderItemResponse]


class OrderSummary(BaseModel):
    id: int
    status: OrderStatus
    customer_name: str
    email: str
    phone: str
    total_amount: Decimal = Field(..., decimal_places=2)
    created_at: datetime
    items_count: int
    total_items: int


class OrderListResponse(BaseModel):
    items: list[OrderSummary]
    total: int
    limit: int
    offset: int


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
