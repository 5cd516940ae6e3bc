"""Payment provider data types."""

from typing import Literal, Optional

from app.schemas.base import CamelModel

PaymentOutcome = Literal["success", "failed", "pending", "cancelled"]


class PaymentCustomer(CamelModel):
    name: str
    email: str
    phone: Optional[str] = None


class PaymentLineItem(CamelModel):
    name: str
    quantity: int
    price: float


class PaymentRequest(CamelModel):
    amount: float
    currency: str = "ZAR"
    order_id: str
    order_number: str
    customer: PaymentCustomer
    items: list[PaymentLineItem]
    return_url: str
    cancel_url: str
    notify_url: Optional[str] = None


class PaymentResult(CamelModel):
    success: bool
    payment_id: Optional[str] = None
    redirect_url: Optional[str] = None
    error: Optional[str] = None


class WebhookResult(CamelModel):
    success: bool
    status: PaymentOutcome
    payment_id: Optional[str] = None
    order_id: Optional[str] = None
    amount: Optional[float] = None
    error: Optional[str] = None


class RefundRequest(CamelModel):
    payment_id: str
    amount: Optional[float] = None  # full refund when omitted
    reason: Optional[str] = None


class RefundResult(CamelModel):
    success: bool
    refund_id: Optional[str] = None
    amount: Optional[float] = None
    error: Optional[str] = None


class AmountLimits(CamelModel):
    min: float
    max: float
    currency: str = "ZAR"
