"""Checkout and order schemas."""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from app.models.order import OrderStatus
from app.schemas.base import CamelModel, Page


class CheckoutItem(CamelModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0, le=1000)


class CheckoutRequest(CamelModel):
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_email: EmailStr
    customer_phone: Optional[str] = Field(None, max_length=30)
    street_address: str = Field(..., min_length=1, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    province: str = Field(..., min_length=1, max_length=100)
    postal_code: str = Field(..., min_length=1, max_length=20)
    items: list[CheckoutItem] = Field(..., min_length=1)
    shipping_cost: float = Field(0.0, ge=0)
    payment_provider: Optional[str] = None
    notes: Optional[str] = None


class OrderItemResponse(CamelModel):
    id: int
    product_id: Optional[int] = None
    product_name: str
    product_sku: str
    quantity: int
    unit_price: float
    total_price: float


class OrderStatusHistoryResponse(CamelModel):
    status: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


class OrderResponse(CamelModel):
    id: int
    order_number: str
    customer_name: str
    customer_email: str
    customer_phone: Optional[str] = None
    street_address: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    postal_code: Optional[str] = None
    status: str
    payment_status: str
    payment_provider: Optional[str] = None
    payment_reference: Optional[str] = None
    subtotal: float
    shipping_cost: float
    total: float
    tracking_number: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: list[OrderItemResponse] = Field(default_factory=list)
    status_history: list[OrderStatusHistoryResponse] = Field(default_factory=list)


class OrderListResponse(Page):
    items: list[OrderResponse]


class OrderUpdate(CamelModel):
    status: Optional[OrderStatus] = None
    tracking_number: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None


class CheckoutResponse(CamelModel):
    order: OrderResponse
    payment_url: Optional[str] = None
    payment_error: Optional[str] = None


class FulfillmentResponse(CamelModel):
    order: OrderResponse
    waybill_number: Optional[str] = None
    email_sent: bool = False
    warnings: list[str] = Field(default_factory=list)
