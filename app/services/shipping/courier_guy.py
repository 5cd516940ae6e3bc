"""
The Courier Guy REST adapter.

Quotes fall back to a local estimate when the API is unreachable or errors,
so checkout can always show a shipping price. Waybill, tracking and cancel
calls return None/False on failure.
"""

import logging
from datetime import datetime
from typing import Any, Optional

import httpx

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


class CourierGuyProvider(ShippingProvider):
    name = "courier-guy"
    display_name = "The Courier Guy"

    def __init__(self, api_key: Optional[str], api_url: str, timeout: float = 20.0):
        self.api_key = api_key
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def get_max_weight(self) -> float:
        return 70.0

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def _request(self, method: str, path: str, payload: Optional[dict] = None) -> dict[str, Any]:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.request(
                method,
                f"{self.api_url}{path}",
                json=payload,
                headers=self._headers(),
            )
        response.raise_for_status()
        return response.json()

    async def get_quote(self, request: ShippingQuoteRequest) -> Optional[ShippingQuote]:
        if not self.is_configured():
            logger.warning("The Courier Guy API key not configured")
            return None

        payload = request.model_dump(mode="json", exclude_none=True)
        payload["service_type"] = request.service_type or "standard"
        try:
            data = await self._request("POST", "/api/v1/quotes", payload)
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Courier Guy quote failed, using estimate: {e}")
            return self._estimate(request)

        return ShippingQuote(
            provider=self.name,
            service_type=data.get("service_type") or request.service_type or "standard",
            estimated_days=data.get("estimated_days") or 3,
            cost=data.get("cost") or 0,
            currency=data.get("currency") or "ZAR",
        )

    def _estimate(self, request: ShippingQuoteRequest) -> ShippingQuote:
        return ShippingQuote(
            provider=self.name,
            service_type=request.service_type or "standard",
            estimated_days=3 if same_province(request) else 5,
            cost=estimate_cost(request, per_kg=15),
        )

    async def create_waybill(self, request: WaybillRequest) -> Optional[Waybill]:
        if not self.is_configured():
            logger.warning("The Courier Guy API key not configured")
            return None

        payload = {
            "origin": request.origin.model_dump(mode="json"),
            "destination": request.destination.model_dump(mode="json"),
            "items": [item.model_dump(mode="json") for item in request.items],
            "service_type": request.service_type,
            "reference": request.reference,
        }
        try:
            data = await self._request("POST", "/api/v1/waybills", payload)
        except (httpx.HTTPError, ValueError) as e:
            logger.error(
                "Courier Guy waybill creation failed",
                extra={"order_id": request.order_id, "error": str(e)},
            )
            return None

        waybill_number = data.get("waybill_number")
        if not waybill_number:
            logger.error("Courier Guy waybill response missing waybill_number")
            return None

        return Waybill(
            waybill_number=waybill_number,
            tracking_url=data.get("tracking_url") or f"{self.api_url}/tracking/{waybill_number}",
            cost=data.get("cost") or 0,
            estimated_delivery=_parse_datetime(data.get("estimated_delivery")),
            provider=self.name,
        )

    async def get_tracking(self, waybill_number: str) -> Optional[TrackingInfo]:
        if not self.is_configured():
            return None

        try:
            data = await self._request("GET", f"/api/v1/tracking/{waybill_number}")
            return TrackingInfo(
                status=data["status"],
                current_location=data.get("current_location"),
                estimated_delivery=_parse_datetime(data.get("estimated_delivery")),
                history=[
                    TrackingEvent(
                        status=item["status"],
                        location=item.get("location"),
                        timestamp=item["timestamp"],
                        notes=item.get("notes"),
                    )
                    for item in data.get("history") or []
                ],
            )
        except (httpx.HTTPError, ValueError, KeyError) as e:
            logger.error(f"Courier Guy tracking lookup failed for {waybill_number}: {e}")
            return None

    async def cancel_waybill(self, waybill_number: str, reason: Optional[str] = None) -> bool:
        if not self.is_configured():
            return False

        try:
            await self._request("POST", f"/api/v1/waybills/{waybill_number}/cancel", {"reason": reason})
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Courier Guy cancel failed for {waybill_number}: {e}")
            return False
        return True


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
