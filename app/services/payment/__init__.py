"""Payment providers and the registry factory used at application startup."""

from app.config import Settings
from app.services.payment.base import PaymentProvider
from app.services.payment.mock import MockPaymentProvider
from app.services.payment.payfast import PayFastProvider, generate_signature
from app.services.providers.registry import ProviderRegistry

PaymentProviderRegistry = ProviderRegistry[PaymentProvider]


def build_payment_registry(settings: Settings) -> PaymentProviderRegistry:
    registry: PaymentProviderRegistry = ProviderRegistry(
        "payment", default_provider=settings.PAYMENT_PROVIDER
    )
    registry.register_provider(
        PayFastProvider(
            merchant_id=settings.PAYFAST_MERCHANT_ID,
            merchant_key=settings.PAYFAST_MERCHANT_KEY,
            passphrase=settings.PAYFAST_PASSPHRASE,
            sandbox=settings.PAYFAST_SANDBOX,
        )
    )
    if settings.mock_providers_enabled:
        registry.register_provider(MockPaymentProvider())
    return registry


__all__ = [
    "PaymentProvider",
    "PaymentProviderRegistry",
    "PayFastProvider",
    "MockPaymentProvider",
    "build_payment_registry",
    "generate_signature",
]
