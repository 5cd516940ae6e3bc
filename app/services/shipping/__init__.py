"""Shipping providers and the registry factory used at application startup."""

from app.config import Settings
from app.services.shipping.base import ShippingProvider
from app.services.shipping.courier_guy import CourierGuyProvider
from app.services.shipping.mock import MockShippingProvider
from app.services.shipping.registry import ShippingProviderRegistry, pick_best_quote


def build_shipping_registry(settings: Settings) -> ShippingProviderRegistry:
    registry = ShippingProviderRegistry(default_provider=settings.SHIPPING_PROVIDER)
    registry.register_provider(
        CourierGuyProvider(
            api_key=settings.COURIER_GUY_API_KEY,
            api_url=settings.COURIER_GUY_API_URL,
        )
    )
    if settings.mock_providers_enabled:
        registry.register_provider(MockShippingProvider())
    return registry


__all__ = [
    "ShippingProvider",
    "ShippingProviderRegistry",
    "CourierGuyProvider",
    "MockShippingProvider",
    "build_shipping_registry",
    "pick_best_quote",
]
