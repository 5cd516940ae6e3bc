from abc import abstractmethod
from typing import Optional

from app.schemas.shipping import (
    ShippingQuote,
    ShippingQuoteRequest,
    TrackingInfo,
    Waybill,
    WaybillRequest,
)
from app.services.providers.base import BaseProvider

ALL_SERVICE_TYPES = ["standard", "express", "overnight"]


class ShippingProvider(BaseProvider):
    """Courier adapter. Every call returns None/False on failure."""

    @abstractmethod
    async def get_quote(self, request: ShippingQuoteRequest) -> Optional[ShippingQuote]: ...

    @abstractmethod
    async def create_waybill(self, request: WaybillRequest) -> Optional[Waybill]: ...

    @abstractmethod
    async def get_tracking(self, waybill_number: str) -> Optional[TrackingInfo]: ...

    @abstractmethod
    async def cancel_waybill(self, waybill_number: str, reason: Optional[str] = None) -> bool: ...

    @abstractmethod
    def get_max_weight(self) -> float:
        """Heaviest parcel accepted, in kg."""

    def get_supported_service_types(self) -> list[str]:
        return list(ALL_SERVICE_TYPES)

    def accepts(self, request: ShippingQuoteRequest) -> bool:
        if request.weight > self.get_max_weight():
            return False
        if request.service_type and request.service_type not in self.get_supported_service_types():
            return False
        return True


def estimate_cost(
    request: ShippingQuoteRequest,
    per_kg: float,
    base: float = 50.0,
    interprovincial_multiplier: float = 1.5,
) -> float:
    multiplier = 1.0 if same_province(request) else interprovincial_multiplier
    return round((base + request.weight * per_kg) * multiplier, 2)


def same_province(request: ShippingQuoteRequest) -> bool:
    return request.origin.province.strip().lower() == request.destination.province.strip().lower()
