from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
import uuid
from datetime import datetime


def _decimal_text(value):
    """Accepts JSON numbers for decimal fields and keeps them as text."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        raise ValueError("expected a decimal string")
    if isinstance(value, (int, float)):
        return str(value)
    return value


class OrderItemModifierRequest(BaseModel):
    """A modifier selected on an order item."""
    modifier_id: Optional[str] = None
    quantity: int = 1


class OrderItemRequest(BaseModel):
    """
    Schema for a single item in the order request.
    Required fields are checked by the validation pipeline, not here, so that
    errors come back in a fixed order with the item index.
    """
    product_id: Optional[str] = None
    variant_id: Optional[str] = None
    quantity: Optional[int] = None
    notes: Optional[str] = None
    discount_type: Optional[str] = None
    discount_value: Optional[str] = None
    modifiers: List[OrderItemModifierRequest] = Field(default_factory=list)

    @field_validator("discount_value", mode="before")
    @classmethod
    def coerce_decimal_text(cls, value):
        return _decimal_text(value)


class CreateOrderRequest(BaseModel):
    """Schema for the full order creation request body."""
    order_type: Optional[str] = None
    table_number: Optional[str] = None
    customer_id: Optional[str] = None
    notes: Optional[str] = None
    discount_type: Optional[str] = None
    discount_value: Optional[str] = None
    catering_date: Optional[str] = None  # RFC 3339
    catering_dp_amount: Optional[str] = None
    delivery_platform: Optional[str] = None
    delivery_address: Optional[str] = None
    items: Optional[List[OrderItemRequest]] = None

    @field_validator("discount_value", "catering_dp_amount", mode="before")
    @classmethod
    def coerce_decimal_text(cls, value):
        return _decimal_text(value)


class OrderItemModifierResponse(BaseModel):
    id: uuid.UUID
    modifier_id: uuid.UUID
    quantity: int
    unit_price: str  # Use string for Decimal type serialization


class OrderItemResponse(BaseModel):
    """Schema for an item inside the order response."""
    id: uuid.UUID
    product_id: uuid.UUID
    variant_id: Optional[uuid.UUID] = None
    quantity: int
    unit_price: str
    discount_type: Optional[str] = None
    discount_value: Optional[str] = None
    discount_amount: str
    subtotal: str
    notes: Optional[str] = None
    status: str
    station: Optional[str] = None
    modifiers: List[OrderItemModifierResponse] = Field(default_factory=list)


class OrderSummaryResponse(BaseModel):
    """Order header as returned by the list endpoint."""
    id: uuid.UUID
    outlet_id: uuid.UUID
    order_number: str
    customer_id: Optional[uuid.UUID] = None
    order_type: str
    status: str
    table_number: Optional[str] = None
    notes: Optional[str] = None
    subtotal: str
    discount_type: Optional[str] = None
    discount_value: Optional[str] = None
    discount_amount: str
    tax_amount: str
    total_amount: str
    catering_date: Optional[datetime] = None
    catering_status: Optional[str] = None
    catering_dp_amount: Optional[str] = None
    delivery_platform: Optional[str] = None
    delivery_address: Optional[str] = None
    created_by: uuid.UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class OrderResponse(OrderSummaryResponse):
    """Schema for a created or fetched order with its items."""
    items: List[OrderItemResponse] = Field(default_factory=list)


class OrderListResponse(BaseModel):
    orders: List[OrderSummaryResponse]
    limit: int
    offset: int
