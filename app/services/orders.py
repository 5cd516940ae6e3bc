"""
Order lifecycle: checkout, payment notifications and fulfillment.

Fulfillment moves a PENDING or CONFIRMED order to PROCESSING, writes the
inventory events, then books a waybill and emails the customer. Courier and
email failures are reported as warnings and never undo the status change.
"""
import html
import logging
import secrets
import string
import time
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.config import Settings
from app.exceptions import BusinessRuleError, NotFoundError, ValidationError
from app.models.order import (
    FULFILLABLE_STATUSES,
    Order,
    OrderItem,
    OrderStatus,
    OrderStatusHistory,
    PaymentStatus,
)
from app.models.product import Product, StockStatus
from app.schemas.email import EmailOptions
from app.schemas.order import CheckoutRequest, FulfillmentResponse, OrderResponse
from app.schemas.payment import WebhookResult
from app.schemas.shipping import Address, WaybillItem, WaybillRequest
from app.services.email.base import EmailProvider
from app.services.inventory_tracking import track_order_fulfillment
from app.services.shipping.base import ShippingProvider

logger = logging.getLogger(__name__)

ESTIMATED_KG_PER_LINE = 0.5


def generate_order_number() -> str:
    suffix = "".join(secrets.choice(string.ascii_uppercase + string.digits) for _ in range(7))
    return f"ORD-{int(time.time() * 1000)}-{suffix}"


async def load_order(db: AsyncSession, order_id: int) -> Order:
    """Fresh copy of the order with items and status history loaded."""
    result = await db.execute(
        select(Order)
        .where(Order.id == order_id)
        .options(selectinload(Order.items), selectinload(Order.status_history))
        .execution_options(populate_existing=True)
    )
    order = result.scalar_one_or_none()
    if order is None:
        raise NotFoundError("Order", order_id)
    return order


async def create_order(db: AsyncSession, checkout: CheckoutRequest) -> Order:
    """Create a PENDING order, snapshotting product names, SKUs and prices."""
    product_ids = {item.product_id for item in checkout.items}
    result = await db.execute(select(Product).where(Product.id.in_(product_ids)))
    products = {p.id: p for p in result.scalars().all()}

    missing = sorted(product_ids - products.keys())
    if missing:
        raise ValidationError(f"Unknown product(s): {', '.join(str(i) for i in missing)}")

    unavailable = [
        products[i].sku for i in sorted(product_ids) if products[i].stock_status == StockStatus.OUT_OF_STOCK.value
    ]
    if unavailable:
        raise BusinessRuleError(f"Out of stock: {', '.join(unavailable)}")

    order = Order(
        order_number=generate_order_number(),
        customer_name=checkout.customer_name,
        customer_email=checkout.customer_email,
        customer_phone=checkout.customer_phone,
        street_address=checkout.street_address,
        city=checkout.city,
        province=checkout.province,
        postal_code=checkout.postal_code,
        status=OrderStatus.PENDING.value,
        payment_status=PaymentStatus.PENDING.value,
        shipping_cost=checkout.shipping_cost,
        notes=checkout.notes,
    )

    subtotal = 0.0
    for line in checkout.items:
        product = products[line.product_id]
        line_total = round(product.price * line.quantity, 2)
        subtotal += line_total
        order.items.append(
            OrderItem(
                product_id=product.id,
                product_name=product.name,
                product_sku=product.sku,
                quantity=line.quantity,
                unit_price=product.price,
                total_price=line_total,
            )
        )
    order.subtotal = round(subtotal, 2)
    order.total = round(subtotal + checkout.shipping_cost, 2)
    order.status_history.append(OrderStatusHistory(status=OrderStatus.PENDING.value, notes="Order placed"))

    db.add(order)
    await db.commit()
    order_id = order.id

    logger.info("Order created", extra={"order_id": order_id, "order_number": order.order_number})
    return await load_order(db, order_id)


async def apply_payment_webhook(
    db: AsyncSession, result: WebhookResult, provider_name: str
) -> Optional[Order]:
    """Record a verified payment notification on its order.

    A successful payment marks the order PAID and moves a PENDING order to
    CONFIRMED. Returns None when the notification names no known order.
    """
    try:
        order_id = int(result.order_id)
    except (TypeError, ValueError):
        logger.warning(f"Payment notification without a usable order id: {result.order_id!r}")
        return None

    try:
        order = await load_order(db, order_id)
    except NotFoundError:
        logger.warning("Payment notification for unknown order", extra={"order_id": order_id})
        return None

    order.payment_provider = provider_name
    if result.payment_id:
        order.payment_reference = result.payment_id

    if result.status == "success":
        if result.amount is not None and abs(result.amount - order.total) > 0.01:
            logger.error(
                "Payment amount mismatch",
                extra={"order_id": order_id, "expected": order.total, "received": result.amount},
            )
        else:
            order.payment_status = PaymentStatus.PAID.value
            if order.status == OrderStatus.PENDING.value:
                order.status = OrderStatus.CONFIRMED.value
                order.status_history.append(
                    OrderStatusHistory(status=OrderStatus.CONFIRMED.value, notes=f"Payment received via {provider_name}")
                )
    elif result.status in ("failed", "cancelled"):
        order.payment_status = PaymentStatus.FAILED.value

    await db.commit()
    logger.info(
        "Payment notification applied",
        extra={"order_id": order_id, "payment_status": result.status, "provider": provider_name},
    )
    return await load_order(db, order_id)


def warehouse_address(settings: Settings) -> Address:
    return Address(
        name=settings.WAREHOUSE_NAME,
        address=settings.WAREHOUSE_ADDRESS,
        city=settings.WAREHOUSE_CITY,
        province=settings.WAREHOUSE_PROVINCE,
        postal_code=settings.WAREHOUSE_POSTAL_CODE,
        phone=settings.WAREHOUSE_PHONE,
        email=settings.WAREHOUSE_EMAIL,
    )


def build_waybill_request(order: Order, origin: Address) -> WaybillRequest:
    """Waybill for the whole order. Weight is estimated per line."""
    items = list(order.items)
    total_weight = max(1.0, len(items) * ESTIMATED_KG_PER_LINE)
    per_line = total_weight / len(items) if items else total_weight
    return WaybillRequest(
        order_id=order.order_number,
        origin=origin,
        destination=Address(
            name=order.customer_name,
            address=order.street_address or "",
            city=order.city or "",
            province=order.province or "",
            postal_code=order.postal_code or "",
            phone=order.customer_phone,
            email=order.customer_email,
        ),
        items=[
            WaybillItem(
                description=item.product_name,
                quantity=item.quantity,
                weight=per_line,
                value=round(item.unit_price * item.quantity, 2),
            )
            for item in items
        ],
        service_type="standard",
        reference=order.order_number,
    )


def render_shipped_email(order: Order, tracking_number: str, site_url: str) -> str:
    rows = "".join(
        f'<tr><td style="padding: 10px;">{i}</td>'
        f'<td style="padding: 10px;">{html.escape(item.product_name)}</td>'
        f'<td style="padding: 10px; text-align: center;">{item.quantity}</td></tr>'
        for i, item in enumerate(order.items, start=1)
    )
    order_url = f"{site_url.rstrip('/')}/orders/{order.order_number}"
    return f"""<!DOCTYPE html>
<html>
<body style="font-family: Arial, sans-serif; color: #333;">
  <h1>Your Order Has Shipped!</h1>
  <p>Hi {html.escape(order.customer_name)},</p>
  <p>Your order #{order.order_number} has been shipped and is on its way to you.</p>
  <p><strong>Tracking Number:</strong> {html.escape(tracking_number)}</p>
  <table style="width: 100%; border-collapse: collapse;">
    <thead><tr><th>#</th><th>Product</th><th>Qty</th></tr></thead>
    <tbody>{rows}</tbody>
  </table>
  <p><a href="{order_url}">Track Your Order</a></p>
  <p>TASSA - Twines and Straps SA</p>
</body>
</html>"""


async def fulfill_order(
    db: AsyncSession,
    order_id: int,
    shipping_provider: Optional[ShippingProvider],
    email_provider: Optional[EmailProvider],
    settings: Settings,
) -> FulfillmentResponse:
    order = await load_order(db, order_id)
    if order.status not in FULFILLABLE_STATUSES:
        raise BusinessRuleError(f"Order cannot be fulfilled. Current status: {order.status}")

    items = list(order.items)
    order.status = OrderStatus.PROCESSING.value
    order.status_history.append(
        OrderStatusHistory(status=OrderStatus.PROCESSING.value, notes="Order fulfillment started")
    )
    await db.commit()
    logger.info("Order fulfillment started", extra={"order_id": order_id})

    await track_order_fulfillment(db, order_id, items)

    warnings: list[str] = []
    waybill_number = None
    email_sent = False

    order = await load_order(db, order_id)
    if shipping_provider is None:
        warnings.append("No shipping provider configured; waybill not created")
    else:
        try:
            waybill = await shipping_provider.create_waybill(
                build_waybill_request(order, warehouse_address(settings))
            )
        except Exception as e:
            logger.error(f"Waybill creation raised for order {order_id}: {e}")
            waybill = None

        if waybill is None:
            warnings.append(f"Waybill could not be created with {shipping_provider.display_name}")
        else:
            waybill_number = waybill.waybill_number
            order.tracking_number = waybill_number
            order.status = OrderStatus.SHIPPED.value
            order.status_history.append(
                OrderStatusHistory(
                    status=OrderStatus.SHIPPED.value,
                    notes=f"Waybill created: {waybill_number} (Provider: {waybill.provider})",
                )
            )
            await db.commit()
            order = await load_order(db, order_id)

    if waybill_number:
        if email_provider is None:
            warnings.append("No email provider configured; shipping notification not sent")
        else:
            try:
                result = await email_provider.send_email(
                    EmailOptions(
                        to=order.customer_email,
                        subject=f"Your Order #{order.order_number} Has Shipped!",
                        html_content=render_shipped_email(order, waybill_number, settings.SITE_URL),
                        tags=["order-shipped", "delivery-notification"],
                    )
                )
                email_sent = result.success
                if not result.success:
                    warnings.append(f"Shipping notification failed: {result.error}")
            except Exception as e:
                logger.error(f"Shipping notification raised for order {order_id}: {e}")
                warnings.append("Shipping notification failed")

    return FulfillmentResponse(
        order=OrderResponse.model_validate(order),
        waybill_number=waybill_number,
        email_sent=email_sent,
        warnings=warnings,
    )
