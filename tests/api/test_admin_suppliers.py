"""Tests for the admin supplier endpoints (/api/admin/suppliers)."""

import pytest

from tests.factories import SupplierFactory

SUPPLIERS_PREFIX = "/api/admin/suppliers"


class TestSupplierCrud:
    @pytest.mark.asyncio
    async def test_create(self, authenticated_client):
        payload = SupplierFactory(name="Coastal Cordage", code="CC", default_markup=35.0)

        response = await authenticated_client.post(SUPPLIERS_PREFIX, json=payload)

        assert response.status_code == 201
        data = response.json()
        assert data["code"] == "CC"
        assert data["defaultMarkup"] == 35.0
        assert data["productCount"] == 0
        assert data["isActive"] is True

    @pytest.mark.asyncio
    async def test_duplicate_code(self, authenticated_client, supplier):
        response = await authenticated_client.post(SUPPLIERS_PREFIX, json=SupplierFactory(code=supplier.code))

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_invalid_email(self, authenticated_client):
        response = await authenticated_client.post(SUPPLIERS_PREFIX, json=SupplierFactory(email="not-an-email"))

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_list_with_product_counts(self, authenticated_client, supplier, make_product):
        await make_product(sku="CC-001", supplier_id=supplier.id)
        await make_product(sku="CC-002", supplier_id=supplier.id)

        response = await authenticated_client.get(SUPPLIERS_PREFIX)

        assert response.status_code == 200
        assert response.json()["total"] == 1
        assert response.json()["items"][0]["productCount"] == 2

    @pytest.mark.asyncio
    async def test_update(self, authenticated_client, supplier):
        response = await authenticated_client.patch(
            f"{SUPPLIERS_PREFIX}/{supplier.id}", json={"isActive": False, "leadTimeDays": 10}
        )

        assert response.status_code == 200
        assert response.json()["isActive"] is False
        assert response.json()["leadTimeDays"] == 10

    @pytest.mark.asyncio
    async def test_update_null_required_fields_rejected(self, authenticated_client, supplier):
        response = await authenticated_client.patch(
            f"{SUPPLIERS_PREFIX}/{supplier.id}", json={"defaultMarkup": None, "isActive": None}
        )

        assert response.status_code == 422
        assert response.json()["detail"] == "Fields cannot be null: default_markup, is_active"
        unchanged = await authenticated_client.get(f"{SUPPLIERS_PREFIX}/{supplier.id}")
        assert unchanged.json()["defaultMarkup"] == 30.0
        assert unchanged.json()["isActive"] is True

    @pytest.mark.asyncio
    async def test_delete_unlinks_products(self, authenticated_client, supplier, make_product):
        product = await make_product(sku="CC-001", supplier_id=supplier.id)

        response = await authenticated_client.delete(f"{SUPPLIERS_PREFIX}/{supplier.id}")
        follow_up = await authenticated_client.get(f"/api/admin/products/{product.id}")

        assert response.status_code == 204
        assert follow_up.json()["supplierId"] is None


class TestSupplierSync:
    @pytest.mark.asyncio
    async def test_sync_feed(self, authenticated_client, supplier, make_product):
        product = await make_product(sku="CC-001", supplier_id=supplier.id)

        response = await authenticated_client.post(
            f"{SUPPLIERS_PREFIX}/{supplier.id}/sync",
            json={
                "products": [
                    {"supplierSku": "001", "price": 100.0, "stockQuantity": 5},
                    {"supplierSku": "999", "price": 10.0, "stockQuantity": 1},
                ]
            },
        )

        assert response.status_code == 200
        result = response.json()
        assert result["success"] is True
        assert result["productsUpdated"] == 1
        assert result["productsSkipped"] == 1
        assert result["errors"] == ["Product 999: Category mapping required"]

        updated = (await authenticated_client.get(f"/api/admin/products/{product.id}")).json()
        assert updated["price"] == 130.0
        assert updated["supplierPrice"] == 100.0

        logs = await authenticated_client.get(f"{SUPPLIERS_PREFIX}/{supplier.id}/sync-logs")
        assert [e["quantityChange"] for e in logs.json()] == [4]
        assert logs.json()[0]["product"]["sku"] == "CC-001"

    @pytest.mark.asyncio
    async def test_inactive_supplier_rejected(self, authenticated_client, test_db, supplier):
        supplier.is_active = False
        await test_db.commit()

        response = await authenticated_client.post(
            f"{SUPPLIERS_PREFIX}/{supplier.id}/sync",
            json={"products": [{"supplierSku": "001", "price": 1.0, "stockQuantity": 1}]},
        )

        assert response.status_code == 400
        assert response.json()["code"] == "BIZ_001"

    @pytest.mark.asyncio
    async def test_unknown_supplier(self, authenticated_client):
        response = await authenticated_client.post(f"{SUPPLIERS_PREFIX}/999/sync", json={"products": []})

        assert response.status_code == 404
