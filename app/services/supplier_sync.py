"""
Supplier catalog sync.

Applies a supplier's product feed to the local catalog: prices get the
supplier's markup, stock status follows the feed's quantity, and every
stock movement is written to the inventory event log.

Each product is committed on its own. A failing product is rolled back,
reported in the result and skipped; the rest of the batch continues.
"""
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Mapping, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.exceptions import BusinessRuleError, NotFoundError
from app.models.inventory_event import InventoryEvent, InventoryEventType, ReferenceType
from app.models.product import Product, StockStatus
from app.models.supplier import Supplier
from app.schemas.supplier import ExternalProduct, SupplierSyncResult
from app.services.inventory_tracking import record_event, track_stock_status_change

logger = logging.getLogger(__name__)

SYNC_NOTES = "Automatic sync from supplier feed"

#: Fetches a supplier's current catalog. ``None`` means the feed had nothing to offer.
SupplierFeed = Callable[[Supplier], Awaitable[Optional[Sequence[ExternalProduct]]]]

MERGED_FIELDS = ("name", "description", "material", "diameter", "length")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def local_sku(supplier_code: str, supplier_sku: str) -> str:
    return f"{supplier_code}-{supplier_sku}"


def apply_markup(price: float, markup_percent: float) -> float:
    return round(price * (1 + markup_percent / 100), 2)


async def _sync_product(
    db: AsyncSession,
    supplier_id: int,
    supplier_code: str,
    markup: float,
    data: ExternalProduct,
) -> bool:
    """Apply one feed row. Returns False when no local product matches."""
    sku = local_sku(supplier_code, data.supplier_sku)
    result = await db.execute(select(Product).where(Product.sku == sku))
    product = result.scalar_one_or_none()
    if product is None:
        return False

    product_id = product.id
    previous_stock = 1 if product.stock_status == StockStatus.IN_STOCK.value else 0

    for field in MERGED_FIELDS:
        value = getattr(data, field)
        if value is not None:
            setattr(product, field, value)

    product.price = apply_markup(data.price, markup)
    product.supplier_price = data.price
    product.stock_status = (
        StockStatus.IN_STOCK.value if data.stock_quantity > 0 else StockStatus.OUT_OF_STOCK.value
    )
    product.last_synced_at = _utcnow()
    await db.commit()

    # Quantity is compared against a 0/1 stand-in for the previous stock level
    if data.stock_quantity != previous_stock:
        change = data.stock_quantity - previous_stock
        await record_event(
            db,
            product_id=product_id,
            event_type=(
                InventoryEventType.SUPPLIER_DELIVERY if change > 0 else InventoryEventType.STOCK_REMOVED
            ),
            quantity_change=change,
            reference_type=ReferenceType.SUPPLIER_DELIVERY,
            reference_id=supplier_id,
            notes=SYNC_NOTES,
        )
    return True


async def sync_supplier_products(
    db: AsyncSession,
    supplier_id: int,
    external_products: Sequence[ExternalProduct],
) -> SupplierSyncResult:
    """Reconcile a supplier's feed with local products.

    Raises NotFoundError for an unknown supplier and BusinessRuleError for an
    inactive one, before any product is touched. Feed rows without a matching
    local product are skipped; new products are never created.
    """
    supplier = await db.get(Supplier, supplier_id)
    if supplier is None:
        raise NotFoundError("Supplier", supplier_id)
    if not supplier.is_active:
        raise BusinessRuleError(f"Supplier {supplier.name} is not active")

    # Rollbacks below expire the instance, so keep plain values
    supplier_name = supplier.name
    supplier_code = supplier.code
    markup = supplier.default_markup if supplier.default_markup is not None else 30.0

    result = SupplierSyncResult(
        supplier_id=supplier_id,
        supplier_name=supplier_name,
        last_sync_at=_utcnow(),
    )

    for data in external_products:
        try:
            updated = await _sync_product(db, supplier_id, supplier_code, markup, data)
        except Exception as e:
            await db.rollback()
            result.errors.append(f"Product {data.supplier_sku}: {e}")
            logger.warning(
                "Failed to sync product from supplier",
                extra={"supplier_id": supplier_id, "supplier_sku": data.supplier_sku, "error": str(e)},
            )
            continue

        if updated:
            result.products_updated += 1
        else:
            result.products_skipped += 1
            result.errors.append(f"Product {data.supplier_sku}: Category mapping required")

    try:
        supplier = await db.get(Supplier, supplier_id)
        if supplier is None:
            result.success = False
            result.errors.append(f"Supplier {supplier_id} was removed during sync")
            logger.error(f"Supplier {supplier_id} disappeared during sync")
        else:
            supplier.updated_at = _utcnow()
            await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        result.success = False
        result.errors.append(str(e))
        logger.error(f"Failed to stamp supplier {supplier_id} after sync: {e}")

    logger.info(
        "Supplier sync completed",
        extra={
            "supplier_id": supplier_id,
            "supplier_name": supplier_name,
            "updated": result.products_updated,
            "created": result.products_created,
            "skipped": result.products_skipped,
        },
    )
    return result


def _failed_result(supplier_id: int, supplier_name: str, error: str) -> SupplierSyncResult:
    return SupplierSyncResult(
        supplier_id=supplier_id,
        supplier_name=supplier_name,
        success=False,
        errors=[error],
        last_sync_at=_utcnow(),
    )


async def sync_all_suppliers(
    db: AsyncSession,
    feeds: Mapping[str, SupplierFeed],
) -> list[SupplierSyncResult]:
    """Sync every active supplier that has a feed, keyed by supplier code.

    One supplier failing never stops the others.
    """
    rows = await db.execute(
        select(Supplier.id, Supplier.name, Supplier.code)
        .where(Supplier.is_active.is_(True))
        .order_by(Supplier.id)
    )
    suppliers = rows.all()

    results = []
    for supplier_id, name, code in suppliers:
        feed = feeds.get(code)
        if feed is None:
            logger.warning(f"No product feed configured for supplier {name}", extra={"supplier_id": supplier_id})
            results.append(_failed_result(supplier_id, name, "No product feed configured"))
            continue

        logger.info(f"Syncing supplier: {name}", extra={"supplier_id": supplier_id})
        try:
            supplier = await db.get(Supplier, supplier_id)
            products = await feed(supplier)
            if products is None:
                results.append(_failed_result(supplier_id, name, "Supplier feed returned no data"))
                continue
            results.append(await sync_supplier_products(db, supplier_id, products))
        except Exception as e:
            await db.rollback()
            logger.error(
                "Supplier sync failed",
                extra={"supplier_id": supplier_id, "operation": "sync_all_suppliers", "error": str(e)},
            )
            results.append(_failed_result(supplier_id, name, str(getattr(e, "detail", e))))

    return results


async def handle_sync_discrepancy(
    db: AsyncSession,
    product_id: int,
    action: str,
    manual_value: Optional[int] = None,
    user_id: Optional[int] = None,
) -> str:
    """Resolve a stock disagreement between supplier and local catalog.

    ``accept_supplier`` and ``keep_local`` leave the product as is;
    ``manual_adjust`` sets stock status from ``manual_value``. Returns the
    product's resulting stock status.
    """
    product = await db.get(Product, product_id)
    if product is None or product.supplier_id is None:
        raise NotFoundError("Supplier product", product_id)

    old_status = product.stock_status

    if action == "manual_adjust" and manual_value is not None:
        new_status = StockStatus.IN_STOCK.value if manual_value > 0 else StockStatus.OUT_OF_STOCK.value
        if new_status != old_status:
            product.stock_status = new_status
            await db.commit()
            await track_stock_status_change(db, product_id, old_status, new_status, user_id=user_id)
        logger.info("Manual adjustment applied", extra={"product_id": product_id, "value": manual_value})
        return new_status

    if action == "accept_supplier":
        logger.info("Accepted supplier values", extra={"product_id": product_id, "action": action})
    elif action == "keep_local":
        logger.info("Kept local values", extra={"product_id": product_id, "action": action})
    return old_status


async def get_supplier_sync_logs(
    db: AsyncSession, supplier_id: int, limit: int = 50
) -> list[InventoryEvent]:
    """Supplier-referenced events for the supplier's products, newest first."""
    result = await db.execute(
        select(InventoryEvent)
        .join(Product, Product.id == InventoryEvent.product_id)
        .where(
            Product.supplier_id == supplier_id,
            InventoryEvent.reference_type == ReferenceType.SUPPLIER_DELIVERY.value,
        )
        .options(selectinload(InventoryEvent.product))
        .order_by(InventoryEvent.created_at.desc(), InventoryEvent.id.desc())
        .limit(limit)
    )
    return list(result.scalars().all())
