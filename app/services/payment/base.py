from abc import abstractmethod
from typing import Any

from app.schemas.payment import (
    AmountLimits,
    PaymentRequest,
    PaymentResult,
    RefundRequest,
    RefundResult,
    WebhookResult,
)
from app.services.providers.base import BaseProvider


class PaymentProvider(BaseProvider):
    """Payment gateway adapter."""

    @abstractmethod
    async def initiate_payment(self, request: PaymentRequest) -> PaymentResult: ...

    @abstractmethod
    async def process_webhook(self, data: dict[str, Any]) -> WebhookResult: ...

    @abstractmethod
    def verify_webhook_signature(self, data: dict[str, Any]) -> bool: ...

    @abstractmethod
    async def process_refund(self, request: RefundRequest) -> RefundResult: ...

    def get_supported_payment_methods(self) -> list[str]:
        return ["card"]

    @abstractmethod
    def get_amount_limits(self) -> AmountLimits: ...
