"""
PayFast payment gateway.

PayFast is redirect based: ``initiate_payment`` builds a signed checkout URL
and the buyer completes payment on PayFast's hosted page. PayFast then posts
an ITN (instant transaction notification) to ``notify_url`` which
``process_webhook`` verifies.

Signature: MD5 over the non-empty fields in key order, url-encoded and joined
with ``&``, with ``passphrase`` appended when one is set.
"""

import hashlib
import hmac
import logging
from typing import Any, Optional
from urllib.parse import quote_plus, urlencode

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

SANDBOX_URL = "https://sandbox.payfast.co.za/eng/process"
PRODUCTION_URL = "https://www.payfast.co.za/eng/process"

STATUS_MAP = {
    "COMPLETE": "success",
    "FAILED": "failed",
    "CANCELLED": "cancelled",
}


def generate_signature(data: dict[str, Any], passphrase: Optional[str] = None) -> str:
    pairs = []
    for key in sorted(data):
        if key == "signature":
            continue
        value = data[key]
        if value is None or str(value).strip() == "":
            continue
        pairs.append(f"{key}={quote_plus(str(value).strip())}")

    payload = "&".join(pairs)
    if passphrase:
        payload += f"&passphrase={quote_plus(passphrase.strip())}"
    return hashlib.md5(payload.encode()).hexdigest()


class PayFastProvider(PaymentProvider):
    name = "payfast"
    display_name = "PayFast"

    def __init__(
        self,
        merchant_id: Optional[str],
        merchant_key: Optional[str],
        passphrase: Optional[str],
        sandbox: bool = True,
    ):
        self.merchant_id = merchant_id
        self.merchant_key = merchant_key
        self.passphrase = passphrase
        self.sandbox = sandbox

    @property
    def process_url(self) -> str:
        return SANDBOX_URL if self.sandbox else PRODUCTION_URL

    def is_configured(self) -> bool:
        return bool(self.merchant_id and self.merchant_key and self.passphrase)

    def build_payment_data(self, request: PaymentRequest) -> dict[str, str]:
        first_name, _, last_name = request.customer.name.partition(" ")
        item_name = ", ".join(item.name for item in request.items)[:100] or request.order_number

        data = {
            "merchant_id": self.merchant_id or "",
            "merchant_key": self.merchant_key or "",
            "return_url": request.return_url,
            "cancel_url": request.cancel_url,
            "notify_url": request.notify_url or "",
            "name_first": first_name,
            "name_last": last_name,
            "email_address": request.customer.email,
            "m_payment_id": request.order_id,
            "amount": f"{request.amount:.2f}",
            "item_name": item_name,
            "item_description": f"Order {request.order_number}",
        }
        data = {k: v for k, v in data.items() if v}
        data["signature"] = generate_signature(data, self.passphrase)
        return data

    async def initiate_payment(self, request: PaymentRequest) -> PaymentResult:
        if not self.is_configured():
            return PaymentResult(success=False, error="PayFast is not configured")

        limits = self.get_amount_limits()
        if request.amount < limits.min or request.amount > limits.max:
            return PaymentResult(
                success=False,
                error=f"Amount must be between {limits.min:.2f} and {limits.max:.2f} {limits.currency}",
            )

        data = self.build_payment_data(request)
        logger.info(f"PayFast checkout created for order {request.order_number}")
        return PaymentResult(
            success=True,
            payment_id=request.order_id,
            redirect_url=f"{self.process_url}?{urlencode(data)}",
        )

    def verify_webhook_signature(self, data: dict[str, Any]) -> bool:
        received = data.get("signature")
        if not received:
            return False
        return hmac.compare_digest(generate_signature(data, self.passphrase), str(received).lower())

    async def process_webhook(self, data: dict[str, Any]) -> WebhookResult:
        if not self.verify_webhook_signature(data):
            logger.warning(
                "PayFast ITN signature mismatch",
                extra={"m_payment_id": data.get("m_payment_id")},
            )
            return WebhookResult(success=False, status="failed", error="Invalid signature")

        status = STATUS_MAP.get(str(data.get("payment_status", "")).upper(), "pending")
        try:
            amount = float(data["amount_gross"]) if data.get("amount_gross") else None
        except ValueError:
            amount = None

        return WebhookResult(
            success=True,
            status=status,
            payment_id=data.get("pf_payment_id"),
            order_id=data.get("m_payment_id"),
            amount=amount,
        )

    async def process_refund(self, request: RefundRequest) -> RefundResult:
        # PayFast exposes no refund API for this integration
        return RefundResult(
            success=False,
            error="PayFast refunds must be processed from the merchant dashboard",
        )

    def get_supported_payment_methods(self) -> list[str]:
        return ["card", "eft", "instant_eft", "scan_to_pay"]

    def get_amount_limits(self) -> AmountLimits:
        return AmountLimits(min=5.0, max=1_000_000.0)
