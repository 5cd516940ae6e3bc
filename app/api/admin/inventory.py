"""Admin inventory API: event history, low stock, deliveries and supplier reconciliation."""

from datetime import datetime
from fastapi import APIRouter, Query, status
from typing import Optional
import logging

from app.api.deps import DbSession, CurrentUser, EmailProviders, SupplierFeeds
from app.config import settings
from app.exceptions import ErrorCode, NotFoundError, StoreException, ValidationError
from app.models.inventory_event import InventoryEventType, ReferenceType
from app.models.product import Product
from app.models.supplier import Supplier
from app.schemas.inventory import (
    DiscrepancyResolution,
    InventoryEventFilters,
    InventoryEventResponse,
    InventoryHistoryResponse,
    LowStockAlert,
    LowStockAlertSent,
    StockAdjustmentResult,
    SupplierDeliveryRequest,
    SyncAllResponse,
)
from app.services.inventory_tracking import (
    get_product_inventory_history,
    load_event,
    query_inventory_events,
    track_supplier_delivery,
)
from app.services.low_stock import get_low_stock_products, send_low_stock_alert
from app.services.supplier_sync import handle_sync_discrepancy, sync_all_suppliers

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/history", response_model=InventoryHistoryResponse)
async def inventory_history(
    db: DbSession,
    current_user: CurrentUser,
    product_id: Optional[int] = None,
    event_type: Optional[InventoryEventType] = None,
    reference_type: Optional[ReferenceType] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
):
    """Inventory events, newest first.

    With only ``product_id`` given this is the product's movement history.
    """
    filters = InventoryEventFilters(
        product_id=product_id,
        event_type=event_type,
        reference_type=reference_type,
        start_date=start_date,
        end_date=end_date,
        limit=limit,
        offset=offset,
    )
    events, total = await query_inventory_events(db, filters)
    return InventoryHistoryResponse(
        events=[InventoryEventResponse.model_validate(e) for e in events],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/products/{product_id}/history", response_model=list[InventoryEventResponse])
async def product_history(
    product_id: int,
    db: DbSession,
    current_user: CurrentUser,
    limit: int = Query(50, ge=1, le=500),
):
    if await db.get(Product, product_id) is None:
        raise NotFoundError("Product", product_id)
    return await get_product_inventory_history(db, product_id, limit=limit)


@router.get("/low-stock", response_model=LowStockAlert)
async def low_stock(db: DbSession, current_user: CurrentUser):
    return await get_low_stock_products(db)


@router.post("/low-stock/alert", response_model=LowStockAlertSent)
async def low_stock_alert(
    db: DbSession,
    current_user: CurrentUser,
    email_providers: EmailProviders,
    recipient: Optional[str] = None,
):
    """Email the low-stock summary to ``recipient``, the configured alert address or the caller."""
    alert = await get_low_stock_products(db)
    admin_email = recipient or settings.ADMIN_ALERT_EMAIL or current_user.email

    sent = await send_low_stock_alert(
        email_providers.get_default_provider(),
        admin_email,
        alert,
        site_url=settings.SITE_URL,
    )
    return LowStockAlertSent(
        sent=sent and alert.total_count > 0,
        recipient=admin_email if alert.total_count else None,
        total_count=alert.total_count,
    )


@router.post(
    "/supplier-delivery",
    response_model=InventoryEventResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_supplier_delivery(
    delivery: SupplierDeliveryRequest,
    db: DbSession,
    current_user: CurrentUser,
):
    if await db.get(Product, delivery.product_id) is None:
        raise NotFoundError("Product", delivery.product_id)
    if delivery.supplier_id is not None and await db.get(Supplier, delivery.supplier_id) is None:
        raise NotFoundError("Supplier", delivery.supplier_id)

    event = await track_supplier_delivery(
        db,
        product_id=delivery.product_id,
        quantity=delivery.quantity,
        supplier_id=delivery.supplier_id,
        notes=delivery.notes,
    )
    if event is None:
        raise StoreException(
            status_code=500,
            code=ErrorCode.INTERNAL_ERROR,
            detail="Delivery could not be recorded",
        )
    return await load_event(db, event.id)


@router.post("/sync-suppliers", response_model=SyncAllResponse)
async def sync_suppliers(db: DbSession, current_user: CurrentUser, feeds: SupplierFeeds):
    """Pull every active supplier's feed and reconcile it."""
    results = await sync_all_suppliers(db, feeds)
    return SyncAllResponse(
        success=all(r.success for r in results),
        results=results,
        message=f"Synced {len(results)} supplier(s)",
    )


@router.post("/discrepancies/{product_id}", response_model=StockAdjustmentResult)
async def resolve_discrepancy(
    product_id: int,
    resolution: DiscrepancyResolution,
    db: DbSession,
    current_user: CurrentUser,
):
    if resolution.action == "manual_adjust" and resolution.manual_value is None:
        raise ValidationError("manualValue is required for manual_adjust")

    stock_status = await handle_sync_discrepancy(
        db,
        product_id,
        resolution.action,
        manual_value=resolution.manual_value,
        user_id=current_user.id,
    )
    return StockAdjustmentResult(product_id=product_id, stock_status=stock_status)
