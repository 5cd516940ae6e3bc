"""
Low stock alerts.

Finds products flagged LOW_STOCK or OUT_OF_STOCK and emails the admin a
summary through the configured email provider.
"""
import html
import logging
from typing import Optional

from sqlalchemy import case, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.product import Product, StockStatus
from app.schemas.email import EmailOptions
from app.schemas.inventory import LowStockAlert, LowStockProduct
from app.services.email.base import EmailProvider

logger = logging.getLogger(__name__)

ATTENTION_STATUSES = (StockStatus.LOW_STOCK.value, StockStatus.OUT_OF_STOCK.value)


async def get_low_stock_products(db: AsyncSession) -> LowStockAlert:
    """Products needing attention, OUT_OF_STOCK first, then by name."""
    severity = case((Product.stock_status == StockStatus.OUT_OF_STOCK.value, 0), else_=1)
    result = await db.execute(
        select(Product)
        .where(Product.stock_status.in_(ATTENTION_STATUSES))
        .options(selectinload(Product.category))
        .order_by(severity, Product.name)
    )
    products = [
        LowStockProduct(
            id=p.id,
            name=p.name,
            sku=p.sku,
            stock_status=p.stock_status,
            category_name=p.category.name if p.category else None,
        )
        for p in result.scalars().all()
    ]

    critical = sum(1 for p in products if p.stock_status == StockStatus.OUT_OF_STOCK.value)
    return LowStockAlert(
        products=products,
        total_count=len(products),
        critical_count=critical,
        warning_count=len(products) - critical,
    )


def _product_list(products: list[LowStockProduct]) -> str:
    rows = "".join(
        f"<li><strong>{html.escape(p.name)}</strong> (SKU: {html.escape(p.sku)})"
        f" - Category: {html.escape(p.category_name or 'Uncategorised')}</li>"
        for p in products
    )
    return f"<ul>{rows}</ul>"


def render_low_stock_email(alert: LowStockAlert, site_url: str) -> str:
    critical = [p for p in alert.products if p.stock_status == StockStatus.OUT_OF_STOCK.value]
    warning = [p for p in alert.products if p.stock_status == StockStatus.LOW_STOCK.value]

    sections = [
        "<h2>Low Stock Alert</h2>",
        f"<p>You have <strong>{alert.total_count}</strong> product(s) that need attention:</p>",
    ]
    if critical:
        sections.append(f'<h3 style="color: #dc2626;">Out of Stock ({len(critical)})</h3>')
        sections.append(_product_list(critical))
    if warning:
        sections.append(f'<h3 style="color: #f59e0b;">Low Stock ({len(warning)})</h3>')
        sections.append(_product_list(warning))
    sections.append(
        f'<p><a href="{site_url.rstrip("/")}/admin/products?status=LOW_STOCK" '
        'style="background-color: #2563eb; color: white; padding: 10px 20px; '
        'text-decoration: none; border-radius: 5px;">View Low Stock Products</a></p>'
    )
    sections.append(
        '<p style="margin-top: 20px; color: #6b7280; font-size: 12px;">'
        "This is an automated alert.</p>"
    )
    return "\n".join(sections)


async def send_low_stock_alert(
    email_provider: Optional[EmailProvider],
    admin_email: str,
    alert: LowStockAlert,
    site_url: str = "http://localhost:3000",
) -> bool:
    """Email the alert. True when sent or when there is nothing to report."""
    if alert.total_count == 0:
        return True

    if email_provider is None:
        logger.warning("No email provider configured for low stock alerts")
        return False

    result = await email_provider.send_email(
        EmailOptions(
            to=admin_email,
            subject=f"Low Stock Alert: {alert.total_count} product(s) need attention",
            html_content=render_low_stock_email(alert, site_url),
            tags=["low-stock"],
        )
    )
    if not result.success:
        logger.error(
            "Failed to send low stock alert",
            extra={"provider": email_provider.name, "error": result.error},
        )
    return result.success
