"""Tests for low stock detection and alert emails."""

import pytest

from app.schemas.inventory import LowStockAlert, LowStockProduct
from app.services.email import MockEmailProvider
from app.services.low_stock import get_low_stock_products, render_low_stock_email, send_low_stock_alert


@pytest.fixture
def empty_alert() -> LowStockAlert:
    return LowStockAlert(products=[], total_count=0, critical_count=0, warning_count=0)


class TestGetLowStockProducts:
    @pytest.mark.asyncio
    async def test_out_of_stock_first_then_by_name(self, test_db, make_product):
        await make_product(sku="A-1", name="Braided Cord", stock_status="LOW_STOCK")
        await make_product(sku="A-2", name="Zebra Strap", stock_status="OUT_OF_STOCK")
        await make_product(sku="A-3", name="Anchor Line", stock_status="LOW_STOCK")
        await make_product(sku="A-4", name="Baling Twine", stock_status="IN_STOCK")

        alert = await get_low_stock_products(test_db)

        assert [p.name for p in alert.products] == ["Zebra Strap", "Anchor Line", "Braided Cord"]
        assert alert.total_count == 3
        assert alert.critical_count == 1
        assert alert.warning_count == 2
        assert alert.products[0].category_name == "Ropes"

    @pytest.mark.asyncio
    async def test_nothing_low(self, test_db, make_product):
        await make_product()

        alert = await get_low_stock_products(test_db)

        assert alert.total_count == 0
        assert alert.products == []


class TestSendLowStockAlert:
    @pytest.mark.asyncio
    async def test_sends_summary(self, test_db, make_product):
        await make_product(sku="A-1", name="Braided Cord", stock_status="LOW_STOCK")
        await make_product(sku="A-2", name="Zebra Strap", stock_status="OUT_OF_STOCK")
        alert = await get_low_stock_products(test_db)
        provider = MockEmailProvider()

        sent = await send_low_stock_alert(provider, "ops@example.com", alert)

        assert sent is True
        assert len(provider.sent_emails) == 1
        email = provider.sent_emails[0]
        assert email.recipients == ["ops@example.com"]
        assert email.subject == "Low Stock Alert: 2 product(s) need attention"
        assert "Out of Stock (1)" in email.html_content
        assert "Low Stock (1)" in email.html_content

    @pytest.mark.asyncio
    async def test_nothing_to_report_sends_nothing(self, empty_alert):
        provider = MockEmailProvider()

        assert await send_low_stock_alert(provider, "ops@example.com", empty_alert) is True
        assert provider.sent_emails == []

    @pytest.mark.asyncio
    async def test_no_provider(self, test_db, make_product):
        await make_product(stock_status="OUT_OF_STOCK")
        alert = await get_low_stock_products(test_db)

        assert await send_low_stock_alert(None, "ops@example.com", alert) is False


def test_render_escapes_names():
    alert = LowStockAlert(
        products=[LowStockProduct(id=1, name="<Rope & Co>", sku="R1", stock_status="LOW_STOCK")],
        total_count=1,
        critical_count=0,
        warning_count=1,
    )

    body = render_low_stock_email(alert, "https://shop.example/")

    assert "&lt;Rope &amp; Co&gt;" in body
    assert "Uncategorised" in body
    assert "https://shop.example/admin/products?status=LOW_STOCK" in body
