"""
Pydantic Schemas for Request/Response Validation

Python attributes are snake_case; the JSON wire format is camelCase
to match the staff dashboard front end.
"""

import math
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from orderdesk.models import OrderStatus


MAX_ITEM_PRICE = 1_000_000
MAX_ITEM_QTY = 1_000


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# ORDER PAYLOAD
# =============================================================================

class OrderItem(CamelModel):
    """Single line item in an order."""
    name: str = Field(..., min_length=1, max_length=100, examples=["Margherita"])
    price: float = Field(
        ..., ge=0, le=MAX_ITEM_PRICE, allow_inf_nan=False, examples=[249.0]
    )
    qty: int = Field(..., ge=1, le=MAX_ITEM_QTY, examples=[2])

    @property
    def line_total(self) -> float:
        return self.price * self.qty


class OrderPayload(CamelModel):
    """
    Customer-facing part of an order, sent alongside the payment proof.

    Unknown keys (including any client-computed ``total``) are ignored.
    """
    order_type: Optional[str] = Field(None, max_length=30, examples=["dine-in"])
    customer_name: Optional[str] = Field(None, max_length=100)
    registration_number: Optional[str] = Field(None, max_length=50)
    mobile: Optional[str] = Field(None, max_length=20)
    table_number: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = Field(None, max_length=255)
    items: List[OrderItem] = Field(..., min_length=1)

    @model_validator(mode="after")
    def check_total_is_finite(self) -> "OrderPayload":
        if not math.isfinite(sum(item.line_total for item in self.items)):
            raise ValueError("order total must be a finite number")
        return self


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class CreatePaymentOrderRequest(CamelModel):
    amount: float = Field(
        ..., gt=0, le=MAX_ITEM_PRICE * MAX_ITEM_QTY, allow_inf_nan=False, examples=[498.0]
    )


class VerifyOrderRequest(CamelModel):
    """Gateway payment proof plus the order to create on success."""
    gateway_order_id: str = Field(..., min_length=1)
    gateway_payment_id: str = Field(..., min_length=1)
    signature: str
    order_payload: OrderPayload


class StatusUpdateRequest(CamelModel):
    status: OrderStatus


class ManagerLoginRequest(CamelModel):
    username: str
    password: str


class ChangeCredentialsRequest(CamelModel):
    current_user: str
    current_password: str
    new_user: str
    new_password: str


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class OrderResponse(CamelModel):
    """Response schema for a single order."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    id: int
    order_type: Optional[str]
    customer_name: Optional[str]
    registration_number: Optional[str]
    mobile: Optional[str]
    table_number: Optional[str]
    address: Optional[str]
    items: List[OrderItem]
    total: float
    status: OrderStatus
    gateway_order_id: Optional[str]
    gateway_payment_id: Optional[str]
    created_at: datetime
    updated_at: Optional[datetime]


class VerifyOrderResponse(CamelModel):
    success: bool
    order: Optional[OrderResponse] = None


class SalesSummary(CamelModel):
    total: float
    count: int


class TopDish(CamelModel):
    """Best-selling dish of a day, keyed the way the dashboard expects."""
    name: str = Field(..., alias="_id")
    count: int


class ManagerLoginResponse(CamelModel):
    success: bool
    message: Optional[str] = None


class SuccessResponse(CamelModel):
    success: bool


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None


class HealthResponse(CamelModel):
    """Health check response."""
    status: str
    database: str
    payment_gateway: str
    listeners: int
    timestamp: datetime
