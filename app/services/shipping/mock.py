import logging
import secrets
import time
from datetime import datetime, timedelta, timezone
from typing import Optional

from app.schemas.shipping import (
    ShippingQuote,
    ShippingQuoteRequest,
    TrackingEvent,
    TrackingInfo,
    Waybill,
    WaybillRequest,
)
from app.services.shipping.base import ShippingProvider, same_province, estimate_cost

logger = logging.getLogger(__name__)

TRACKING_STAGES = ["created", "picked_up", "in_transit", "out_for_delivery", "delivered"]


class MockShippingProvider(ShippingProvider):
    """In-memory courier. Development and tests only."""

    name = "mock"
    display_name = "Mock Shipping Provider"

    def __init__(self):
        self.waybills: dict[str, dict] = {}

    def is_configured(self) -> bool:
        return True

    def get_max_weight(self) -> float:
        return 100.0

    async def get_quote(self, request: ShippingQuoteRequest) -> Optional[ShippingQuote]:
        return ShippingQuote(
            provider=self.name,
            service_type=request.service_type or "standard",
            estimated_days=2 if same_province(request) else 4,
            cost=estimate_cost(request, per_kg=10),
        )

    async def create_waybill(self, request: WaybillRequest) -> Optional[Waybill]:
        waybill_number = f"MOCK{int(time.time() * 1000)}{secrets.token_hex(3).upper()}"
        created = datetime.now(timezone.utc)
        self.waybills[waybill_number] = {"status": "created", "created": created, "request": request}
        logger.info(f"Mock waybill {waybill_number} created for order {request.order_id}")
        return Waybill(
            waybill_number=waybill_number,
            tracking_url=f"/tracking/{waybill_number}",
            cost=0,
            estimated_delivery=created + timedelta(days=3),
            provider=self.name,
        )

    async def get_tracking(self, waybill_number: str) -> Optional[TrackingInfo]:
        waybill = self.waybills.get(waybill_number)
        if waybill is None:
            return None

        created = waybill["created"]
        if waybill["status"] == "cancelled":
            status = "cancelled"
            days = 0
        else:
            days = (datetime.now(timezone.utc) - created).days
            status = TRACKING_STAGES[min(days, len(TRACKING_STAGES) - 1)]

        history = [TrackingEvent(status="created", location="Origin", timestamp=created, notes="Waybill created")]
        if status != "created":
            history.append(
                TrackingEvent(
                    status=status,
                    location="In Transit",
                    timestamp=datetime.now(timezone.utc),
                    notes=f"Status updated to {status}",
                )
            )
        return TrackingInfo(
            status=status,
            current_location="Destination" if status == "delivered" else "In Transit",
            estimated_delivery=created + timedelta(days=3),
            history=history,
        )

    async def cancel_waybill(self, waybill_number: str, reason: Optional[str] = None) -> bool:
        waybill = self.waybills.get(waybill_number)
        if waybill is None:
            return False
        waybill["status"] = "cancelled"
        return True
