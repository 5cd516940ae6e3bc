"""Tests for the admin inventory endpoints (/api/admin/inventory)."""

import pytest

from app.main import app
from app.schemas.supplier import ExternalProduct

INVENTORY_PREFIX = "/api/admin/inventory"


class TestHistory:
    @pytest.mark.asyncio
    async def test_filtered_history(self, authenticated_client, make_product, supplier):
        product = await make_product()
        for quantity in (5, 8):
            await authenticated_client.post(
                f"{INVENTORY_PREFIX}/supplier-delivery",
                json={"productId": product.id, "quantity": quantity, "supplierId": supplier.id},
            )
        await authenticated_client.patch(f"/api/admin/products/{product.id}", json={"stockStatus": "LOW_STOCK"})

        response = await authenticated_client.get(
            f"{INVENTORY_PREFIX}/history", params={"event_type": "SUPPLIER_DELIVERY", "limit": 1}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert data["limit"] == 1
        assert len(data["events"]) == 1
        assert data["events"][0]["quantityChange"] == 8
        assert data["events"][0]["product"]["sku"] == product.sku

    @pytest.mark.asyncio
    async def test_unknown_product_history(self, authenticated_client):
        response = await authenticated_client.get(f"{INVENTORY_PREFIX}/products/999/history")

        assert response.status_code == 404


class TestSupplierDelivery:
    @pytest.mark.asyncio
    async def test_records_event(self, authenticated_client, make_product, supplier):
        product = await make_product()

        response = await authenticated_client.post(
            f"{INVENTORY_PREFIX}/supplier-delivery",
            json={"productId": product.id, "quantity": 40, "supplierId": supplier.id, "notes": "PO-1182"},
        )

        assert response.status_code == 201
        event = response.json()
        assert event["eventType"] == "SUPPLIER_DELIVERY"
        assert event["quantityChange"] == 40
        assert event["referenceId"] == supplier.id
        assert event["notes"] == "PO-1182"
        assert event["product"] == {"id": product.id, "name": product.name, "sku": product.sku}

    @pytest.mark.asyncio
    async def test_quantity_must_be_positive(self, authenticated_client, make_product):
        product = await make_product()

        response = await authenticated_client.post(
            f"{INVENTORY_PREFIX}/supplier-delivery", json={"productId": product.id, "quantity": 0}
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_supplier(self, authenticated_client, make_product):
        product = await make_product()

        response = await authenticated_client.post(
            f"{INVENTORY_PREFIX}/supplier-delivery",
            json={"productId": product.id, "quantity": 3, "supplierId": 999},
        )

        assert response.status_code == 404


class TestLowStock:
    @pytest.mark.asyncio
    async def test_summary(self, authenticated_client, make_product):
        await make_product(sku="A-1", name="Anchor Line", stock_status="LOW_STOCK")
        await make_product(sku="B-1", name="Boat Rope", stock_status="OUT_OF_STOCK")

        response = await authenticated_client.get(f"{INVENTORY_PREFIX}/low-stock")

        data = response.json()
        assert data["totalCount"] == 2
        assert data["criticalCount"] == 1
        assert data["products"][0]["sku"] == "B-1"

    @pytest.mark.asyncio
    async def test_alert_emails_current_user(self, authenticated_client, make_product, mock_email):
        await make_product(stock_status="LOW_STOCK")

        response = await authenticated_client.post(f"{INVENTORY_PREFIX}/low-stock/alert")

        assert response.status_code == 200
        assert response.json() == {"sent": True, "recipient": "test@example.com", "totalCount": 1}
        assert mock_email.sent_emails[0].recipients == ["test@example.com"]

    @pytest.mark.asyncio
    async def test_alert_with_nothing_low(self, authenticated_client, make_product, mock_email):
        await make_product()

        response = await authenticated_client.post(
            f"{INVENTORY_PREFIX}/low-stock/alert", params={"recipient": "ops@example.com"}
        )

        assert response.json()["sent"] is False
        assert mock_email.sent_emails == []


class TestSyncSuppliers:
    @pytest.mark.asyncio
    async def test_without_feeds(self, authenticated_client, supplier):
        response = await authenticated_client.post(f"{INVENTORY_PREFIX}/sync-suppliers")

        data = response.json()
        assert data["success"] is False
        assert data["results"][0]["errors"] == ["No product feed configured"]

    @pytest.mark.asyncio
    async def test_with_feed(self, authenticated_client, supplier, make_product):
        await make_product(sku="CC-001", supplier_id=supplier.id)

        async def feed(s):
            return [ExternalProduct(supplier_sku="001", price=20.0, stock_quantity=0)]

        app.state.supplier_feeds = {"CC": feed}
        response = await authenticated_client.post(f"{INVENTORY_PREFIX}/sync-suppliers")

        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Synced 1 supplier(s)"
        assert data["results"][0]["productsUpdated"] == 1


class TestDiscrepancies:
    @pytest.mark.asyncio
    async def test_manual_adjust(self, authenticated_client, supplier, make_product):
        product = await make_product(sku="CC-001", supplier_id=supplier.id)

        response = await authenticated_client.post(
            f"{INVENTORY_PREFIX}/discrepancies/{product.id}",
            json={"action": "manual_adjust", "manualValue": 0},
        )

        assert response.status_code == 200
        assert response.json()["stockStatus"] == "OUT_OF_STOCK"

    @pytest.mark.asyncio
    async def test_manual_adjust_needs_value(self, authenticated_client, supplier, make_product):
        product = await make_product(sku="CC-001", supplier_id=supplier.id)

        response = await authenticated_client.post(
            f"{INVENTORY_PREFIX}/discrepancies/{product.id}", json={"action": "manual_adjust"}
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_unknown_action(self, authenticated_client, supplier, make_product):
        product = await make_product(sku="CC-001", supplier_id=supplier.id)

        response = await authenticated_client.post(
            f"{INVENTORY_PREFIX}/discrepancies/{product.id}", json={"action": "delete_everything"}
        )

        assert response.status_code == 422
