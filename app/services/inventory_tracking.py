"""
Inventory event log.

Append-only audit trail of stock movements. Writes are fire-and-forget: a
failure to record an event is logged and swallowed so it never blocks the
order, sync or adjustment that caused it.

Callers commit their own change before recording. A failed write rolls the
session back, which expires loaded instances, so read any attributes you need
afterwards into locals first.
"""
import logging
from typing import Iterable, Optional, Union

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.inventory_event import InventoryEvent, InventoryEventType, ReferenceType
from app.schemas.inventory import InventoryEventFilters

logger = logging.getLogger(__name__)

EventType = Union[InventoryEventType, str]


def _value(member) -> Optional[str]:
    if member is None:
        return None
    return member.value if hasattr(member, "value") else str(member)


async def record_event(
    db: AsyncSession,
    product_id: int,
    event_type: EventType,
    quantity_change: int,
    quantity_before: Optional[int] = None,
    quantity_after: Optional[int] = None,
    reference_type: Optional[Union[ReferenceType, str]] = None,
    reference_id: Optional[int] = None,
    notes: Optional[str] = None,
    created_by_user_id: Optional[int] = None,
) -> Optional[InventoryEvent]:
    """Insert and commit one inventory event. Returns None on failure."""
    event = InventoryEvent(
        product_id=product_id,
        event_type=_value(event_type),
        quantity_change=quantity_change,
        quantity_before=quantity_before,
        quantity_after=quantity_after,
        reference_type=_value(reference_type),
        reference_id=reference_id,
        notes=notes,
        created_by_user_id=created_by_user_id,
    )
    try:
        db.add(event)
        await db.commit()
    except Exception as e:
        # Never let audit logging break the operation that triggered it
        await db.rollback()
        logger.error(
            "Failed to record inventory event",
            extra={
                "product_id": product_id,
                "event_type": _value(event_type),
                "error": str(e),
            },
        )
        return None

    logger.debug(f"Inventory event {event.id}: product {product_id} {_value(event_type)} {quantity_change:+d}")
    return event


async def load_event(db: AsyncSession, event_id: int) -> Optional[InventoryEvent]:
    """One event with its product loaded."""
    result = await db.execute(
        select(InventoryEvent)
        .where(InventoryEvent.id == event_id)
        .options(selectinload(InventoryEvent.product))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def track_order_fulfillment(db: AsyncSession, order_id: int, items: Iterable) -> list[InventoryEvent]:
    """One ORDER_FULFILLMENT event per line item.

    ``items`` are order items (or anything with ``product_id`` and ``quantity``);
    lines whose product has since been deleted are skipped.
    """
    lines = [(item.product_id, item.quantity) for item in items]
    events = []
    for product_id, quantity in lines:
        if product_id is None:
            continue
        event = await record_event(
            db,
            product_id=product_id,
            event_type=InventoryEventType.ORDER_FULFILLMENT,
            quantity_change=-quantity,
            reference_type=ReferenceType.ORDER,
            reference_id=order_id,
            notes=f"Order fulfillment - {quantity} units",
        )
        if event is not None:
            events.append(event)
    return events


async def track_supplier_delivery(
    db: AsyncSession,
    product_id: int,
    quantity: int,
    supplier_id: Optional[int] = None,
    notes: Optional[str] = None,
) -> Optional[InventoryEvent]:
    return await record_event(
        db,
        product_id=product_id,
        event_type=InventoryEventType.SUPPLIER_DELIVERY,
        quantity_change=quantity,
        reference_type=ReferenceType.SUPPLIER_DELIVERY if supplier_id else ReferenceType.MANUAL,
        reference_id=supplier_id,
        notes=notes or f"Supplier delivery - {quantity} units",
    )


async def track_manual_adjustment(
    db: AsyncSession,
    product_id: int,
    quantity_change: int,
    quantity_before: int,
    quantity_after: int,
    user_id: Optional[int] = None,
    notes: Optional[str] = None,
) -> Optional[InventoryEvent]:
    return await record_event(
        db,
        product_id=product_id,
        event_type=InventoryEventType.MANUAL_ADJUSTMENT,
        quantity_change=quantity_change,
        quantity_before=quantity_before,
        quantity_after=quantity_after,
        reference_type=ReferenceType.MANUAL,
        notes=notes or f"Manual adjustment: {quantity_change:+d} units",
        created_by_user_id=user_id,
    )


async def track_stock_status_change(
    db: AsyncSession,
    product_id: int,
    old_status: str,
    new_status: str,
    user_id: Optional[int] = None,
) -> Optional[InventoryEvent]:
    return await record_event(
        db,
        product_id=product_id,
        event_type=InventoryEventType.STOCK_STATUS_CHANGE,
        quantity_change=0,
        reference_type=ReferenceType.MANUAL if user_id else ReferenceType.SYSTEM,
        notes=f"Stock status changed from {_value(old_status)} to {_value(new_status)}",
        created_by_user_id=user_id,
    )


async def get_product_inventory_history(
    db: AsyncSession, product_id: int, limit: int = 50
) -> list[InventoryEvent]:
    """Events for one product, newest first."""
    result = await db.execute(
        select(InventoryEvent)
        .where(InventoryEvent.product_id == product_id)
        .options(selectinload(InventoryEvent.product))
        .order_by(InventoryEvent.created_at.desc(), InventoryEvent.id.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


async def query_inventory_events(
    db: AsyncSession, filters: InventoryEventFilters
) -> tuple[list[InventoryEvent], int]:
    """Filtered, paginated events with the product loaded. Returns (events, total)."""
    query = select(InventoryEvent)

    if filters.product_id is not None:
        query = query.where(InventoryEvent.product_id == filters.product_id)
    if filters.event_type is not None:
        query = query.where(InventoryEvent.event_type == _value(filters.event_type))
    if filters.reference_type is not None:
        query = query.where(InventoryEvent.reference_type == _value(filters.reference_type))
    if filters.start_date is not None:
        query = query.where(InventoryEvent.created_at >= filters.start_date)
    if filters.end_date is not None:
        query = query.where(InventoryEvent.created_at <= filters.end_date)

    total_result = await db.execute(select(func.count()).select_from(query.subquery()))
    total = total_result.scalar() or 0

    result = await db.execute(
        query.options(selectinload(InventoryEvent.product))
        .order_by(InventoryEvent.created_at.desc(), InventoryEvent.id.desc())
        .offset(filters.offset)
        .limit(filters.limit)
    )
    return list(result.scalars().all()), total
