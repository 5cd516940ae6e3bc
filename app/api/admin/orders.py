from fastapi import APIRouter, Query
from sqlalchemy import select, func, or_
from sqlalchemy.orm import selectinload
from typing import Optional
import logging

from app.api.deps import DbSession, CurrentUser, EmailProviders, ShippingProviders
from app.config import settings
from app.models.order import Order, OrderStatus, OrderStatusHistory
from app.schemas.order import (
    FulfillmentResponse,
    OrderListResponse,
    OrderResponse,
    OrderUpdate,
)
from app.services.orders import fulfill_order, load_order

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=OrderListResponse)
async def list_orders(
    db: DbSession,
    current_user: CurrentUser,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    status: Optional[OrderStatus] = None,
    search: Optional[str] = None,  # order number, customer name or email
):
    query = select(Order)
    if status is not None:
        query = query.where(Order.status == status.value)
    if search:
        pattern = f"%{search}%"
        query = query.where(
            or_(
                Order.order_number.ilike(pattern),
                Order.customer_name.ilike(pattern),
                Order.customer_email.ilike(pattern),
            )
        )

    total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar() or 0
    result = await db.execute(
        query.options(selectinload(Order.items), selectinload(Order.status_history))
        .order_by(Order.created_at.desc(), Order.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    return OrderListResponse(
        items=[OrderResponse.model_validate(o) for o in result.scalars().all()],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: int, db: DbSession, current_user: CurrentUser):
    return await load_order(db, order_id)


@router.patch("/{order_id}", response_model=OrderResponse)
async def update_order(
    order_id: int,
    data: OrderUpdate,
    db: DbSession,
    current_user: CurrentUser,
):
    """Update status, tracking number or notes. Status changes are kept in the history."""
    order = await load_order(db, order_id)
    update_data = data.model_dump(exclude_unset=True)

    new_status = update_data.pop("status", None)
    for field, value in update_data.items():
        setattr(order, field, value)

    if new_status is not None and new_status.value != order.status:
        order.status = new_status.value
        order.status_history.append(
            OrderStatusHistory(status=new_status.value, notes=f"Status updated by {current_user.email}")
        )
        logger.info("Order status changed", extra={"order_id": order_id, "status": new_status.value})

    await db.commit()
    return await load_order(db, order_id)


@router.post("/{order_id}/fulfill", response_model=FulfillmentResponse)
async def fulfill(
    order_id: int,
    db: DbSession,
    current_user: CurrentUser,
    shipping_providers: ShippingProviders,
    email_providers: EmailProviders,
):
    """Start fulfillment: PROCESSING, inventory events, waybill, customer email."""
    return await fulfill_order(
        db,
        order_id,
        shipping_provider=shipping_providers.get_default_provider(),
        email_provider=email_providers.get_default_provider(),
        settings=settings,
    )
