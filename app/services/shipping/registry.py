import asyncio
import logging
from typing import Literal, Optional

from app.schemas.shipping import ShippingQuote, ShippingQuoteRequest
from app.services.providers.registry import ProviderRegistry
from app.services.shipping.base import ShippingProvider

logger = logging.getLogger(__name__)


class ShippingProviderRegistry(ProviderRegistry[ShippingProvider]):
    """Shipping registry with multi-courier quoting."""

    def __init__(self, default_provider: Optional[str] = None):
        super().__init__("shipping", default_provider=default_provider)

    async def get_all_quotes(self, request: ShippingQuoteRequest) -> list[ShippingQuote]:
        """Quote every configured courier that can carry the parcel, concurrently.

        Couriers that fail or decline are left out of the result.
        """
        providers = [p for p in self.get_configured_providers() if p.accepts(request)]
        results = await asyncio.gather(
            *(p.get_quote(request) for p in providers),
            return_exceptions=True,
        )

        quotes = []
        for provider, result in zip(providers, results):
            if isinstance(result, Exception):
                logger.error(f"Error getting quote from {provider.name}: {result}")
                continue
            if result is not None:
                quotes.append(result)
        return quotes

    async def get_best_quote(
        self,
        request: ShippingQuoteRequest,
        preference: Literal["cheapest", "fastest"] = "cheapest",
    ) -> Optional[ShippingQuote]:
        return pick_best_quote(await self.get_all_quotes(request), preference)


def pick_best_quote(
    quotes: list[ShippingQuote],
    preference: Literal["cheapest", "fastest"] = "cheapest",
) -> Optional[ShippingQuote]:
    if not quotes:
        return None
    if preference == "fastest":
        return min(quotes, key=lambda q: q.estimated_days)
    return min(quotes, key=lambda q: q.cost)
