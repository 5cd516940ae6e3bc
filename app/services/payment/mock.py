import logging
import uuid
from typing import Any

from app.schemas.payment import (
    AmountLimits,
    PaymentRequest,
    PaymentResult,
    RefundRequest,
    RefundResult,
    WebhookResult,
)
from app.services.payment.base import PaymentProvider

logger = logging.getLogger(__name__)


class MockPaymentProvider(PaymentProvider):
    """Approves everything. Development and tests only."""

    name = "mock"
    display_name = "Mock Payment Provider"

    def __init__(self):
        self.payments: dict[str, PaymentRequest] = {}

    def is_configured(self) -> bool:
        return True

    async def initiate_payment(self, request: PaymentRequest) -> PaymentResult:
        payment_id = f"mock_pay_{uuid.uuid4().hex[:12]}"
        self.payments[payment_id] = request
        sep = "&" if "?" in request.return_url else "?"
        logger.info(f"Mock payment {payment_id} created for order {request.order_number}")
        return PaymentResult(
            success=True,
            payment_id=payment_id,
            redirect_url=f"{request.return_url}{sep}payment_id={payment_id}&status=success",
        )

    def verify_webhook_signature(self, data: dict[str, Any]) -> bool:
        return True

    async def process_webhook(self, data: dict[str, Any]) -> WebhookResult:
        status = str(data.get("status", "success")).lower()
        if status not in ("success", "failed", "pending", "cancelled"):
            status = "pending"
        amount = data.get("amount")
        return WebhookResult(
            success=True,
            status=status,
            payment_id=data.get("payment_id"),
            order_id=data.get("order_id"),
            amount=float(amount) if amount is not None else None,
        )

    async def process_refund(self, request: RefundRequest) -> RefundResult:
        original = self.payments.get(request.payment_id)
        amount = request.amount
        if amount is None and original is not None:
            amount = original.amount
        return RefundResult(
            success=True,
            refund_id=f"mock_ref_{uuid.uuid4().hex[:12]}",
            amount=amount,
        )

    def get_amount_limits(self) -> AmountLimits:
        return AmountLimits(min=1.0, max=10_000_000.0)
