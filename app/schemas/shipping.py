"""Shipping provider data types."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field

from app.schemas.base import CamelModel

ServiceType = Literal["standard", "express", "overnight"]


class Location(CamelModel):
    city: str
    province: str
    postal_code: str


class Dimensions(CamelModel):
    length: float  # cm
    width: float
    height: float


class ShippingQuoteRequest(CamelModel):
    origin: Location
    destination: Location
    weight: float = Field(..., gt=0)  # kg
    dimensions: Optional[Dimensions] = None
    service_type: Optional[ServiceType] = None


class ShippingQuote(CamelModel):
    provider: str
    service_type: str
    estimated_days: int
    cost: float
    currency: str = "ZAR"


class ShippingQuotesResponse(CamelModel):
    quotes: list[ShippingQuote]
    best: Optional[ShippingQuote] = None


class Address(CamelModel):
    name: str
    address: str
    city: str
    province: str
    postal_code: str
    phone: Optional[str] = None
    email: Optional[str] = None


class WaybillItem(CamelModel):
    description: str
    quantity: int
    weight: float
    value: float


class WaybillRequest(CamelModel):
    order_id: str
    origin: Address
    destination: Address
    items: list[WaybillItem]
    service_type: ServiceType = "standard"
    reference: str


class Waybill(CamelModel):
    waybill_number: str
    tracking_url: str
    cost: float
    estimated_delivery: Optional[datetime] = None
    provider: str


class TrackingEvent(CamelModel):
    status: str
    location: Optional[str] = None
    timestamp: datetime
    notes: Optional[str] = None


class TrackingInfo(CamelModel):
    status: str
    current_location: Optional[str] = None
    estimated_delivery: Optional[datetime] = None
    history: list[TrackingEvent] = Field(default_factory=list)
