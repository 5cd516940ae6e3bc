"""Inventory event log schemas."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import Field

from app.models.inventory_event import InventoryEventType, ReferenceType
from app.schemas.base import CamelModel
from app.schemas.supplier import SupplierSyncResult


class ProductSummary(CamelModel):
    id: int
    name: str
    sku: str


class InventoryEventResponse(CamelModel):
    id: int
    product_id: int
    event_type: str
    quantity_change: int
    quantity_before: Optional[int] = None
    quantity_after: Optional[int] = None
    reference_type: Optional[str] = None
    reference_id: Optional[int] = None
    notes: Optional[str] = None
    created_by_user_id: Optional[int] = None
    created_at: datetime
    product: Optional[ProductSummary] = None


class InventoryHistoryResponse(CamelModel):
    events: list[InventoryEventResponse]
    total: int
    limit: int
    offset: int = 0


class InventoryEventFilters(CamelModel):
    product_id: Optional[int] = None
    event_type: Optional[InventoryEventType] = None
    reference_type: Optional[ReferenceType] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    limit: int = Field(50, ge=1, le=500)
    offset: int = Field(0, ge=0)


class SupplierDeliveryRequest(CamelModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0)
    supplier_id: Optional[int] = Field(None, gt=0)
    notes: Optional[str] = Field(None, max_length=500)


class LowStockProduct(CamelModel):
    id: int
    name: str
    sku: str
    stock_status: str
    category_name: Optional[str] = None


class LowStockAlert(CamelModel):
    products: list[LowStockProduct]
    total_count: int
    critical_count: int  # OUT_OF_STOCK
    warning_count: int  # LOW_STOCK


class LowStockAlertSent(CamelModel):
    sent: bool
    recipient: Optional[str] = None
    total_count: int


class DiscrepancyResolution(CamelModel):
    action: Literal["accept_supplier", "keep_local", "manual_adjust"]
    manual_value: Optional[int] = None


class SyncAllResponse(CamelModel):
    success: bool
    results: list[SupplierSyncResult]
    message: str


class StockAdjustmentResult(CamelModel):
    product_id: int
    stock_status: str
    event: Optional[InventoryEventResponse] = None
