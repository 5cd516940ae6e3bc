"""Admin supplier API, including manual feed sync."""

from fastapi import APIRouter, Query, status
from sqlalchemy import select, func, or_
from typing import Optional
import logging

from app.api.deps import DbSession, CurrentUser
from app.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.product import Product
from app.models.supplier import Supplier
from app.schemas.inventory import InventoryEventResponse
from app.schemas.supplier import (
    SupplierCreate,
    SupplierUpdate,
    SupplierResponse,
    SupplierListResponse,
    SupplierSyncRequest,
    SupplierSyncResult,
)
from app.services.supplier_sync import get_supplier_sync_logs, sync_supplier_products

logger = logging.getLogger(__name__)
router = APIRouter()

NON_NULLABLE_FIELDS = ("name", "code", "default_markup", "is_active")


def _reject_nulls(update_data: dict) -> None:
    nulls = [field for field in NON_NULLABLE_FIELDS if field in update_data and update_data[field] is None]
    if nulls:
        raise ValidationError(f"Fields cannot be null: {', '.join(nulls)}")


async def _product_counts(db: DbSession, supplier_ids: list[int]) -> dict[int, int]:
    if not supplier_ids:
        return {}
    result = await db.execute(
        select(Product.supplier_id, func.count(Product.id))
        .where(Product.supplier_id.in_(supplier_ids))
        .group_by(Product.supplier_id)
    )
    return dict(result.all())


def supplier_to_response(supplier: Supplier, product_count: int = 0) -> SupplierResponse:
    response = SupplierResponse.model_validate(supplier)
    response.product_count = product_count
    return response


async def _get_supplier_or_404(db: DbSession, supplier_id: int) -> Supplier:
    supplier = await db.get(Supplier, supplier_id, populate_existing=True)
    if supplier is None:
        raise NotFoundError("Supplier", supplier_id)
    return supplier


async def _check_code_free(db: DbSession, code: str, exclude_id: Optional[int] = None) -> None:
    query = select(Supplier.id).where(Supplier.code == code)
    if exclude_id is not None:
        query = query.where(Supplier.id != exclude_id)
    if (await db.execute(query)).first() is not None:
        raise ConflictError(f"Supplier code '{code}' already exists")


@router.get("", response_model=SupplierListResponse)
async def list_suppliers(
    db: DbSession,
    current_user: CurrentUser,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    is_active: Optional[bool] = None,
    search: Optional[str] = None,
):
    query = select(Supplier)
    if is_active is not None:
        query = query.where(Supplier.is_active == is_active)
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(Supplier.name.ilike(pattern), Supplier.code.ilike(pattern)))

    total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar() or 0
    result = await db.execute(
        query.order_by(Supplier.name, Supplier.id).offset((page - 1) * page_size).limit(page_size)
    )
    suppliers = result.scalars().all()
    counts = await _product_counts(db, [s.id for s in suppliers])

    return SupplierListResponse(
        items=[supplier_to_response(s, counts.get(s.id, 0)) for s in suppliers],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post("", response_model=SupplierResponse, status_code=status.HTTP_201_CREATED)
async def create_supplier(data: SupplierCreate, db: DbSession, current_user: CurrentUser):
    await _check_code_free(db, data.code)

    supplier = Supplier(**data.model_dump())
    db.add(supplier)
    await db.commit()
    await db.refresh(supplier)

    logger.info("Supplier created", extra={"supplier_id": supplier.id, "code": supplier.code})
    return supplier_to_response(supplier)


@router.get("/{supplier_id}", response_model=SupplierResponse)
async def get_supplier(supplier_id: int, db: DbSession, current_user: CurrentUser):
    supplier = await _get_supplier_or_404(db, supplier_id)
    counts = await _product_counts(db, [supplier_id])
    return supplier_to_response(supplier, counts.get(supplier_id, 0))


@router.patch("/{supplier_id}", response_model=SupplierResponse)
async def update_supplier(
    supplier_id: int,
    data: SupplierUpdate,
    db: DbSession,
    current_user: CurrentUser,
):
    supplier = await _get_supplier_or_404(db, supplier_id)
    update_data = data.model_dump(exclude_unset=True)
    _reject_nulls(update_data)

    if update_data.get("code") and update_data["code"] != supplier.code:
        await _check_code_free(db, update_data["code"], exclude_id=supplier_id)

    for field, value in update_data.items():
        setattr(supplier, field, value)
    await db.commit()

    supplier = await _get_supplier_or_404(db, supplier_id)
    counts = await _product_counts(db, [supplier_id])
    return supplier_to_response(supplier, counts.get(supplier_id, 0))


@router.delete("/{supplier_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_supplier(supplier_id: int, db: DbSession, current_user: CurrentUser):
    """Delete a supplier. Its products stay in the catalog, unlinked."""
    supplier = await _get_supplier_or_404(db, supplier_id)
    await db.delete(supplier)
    await db.commit()
    logger.info("Supplier deleted", extra={"supplier_id": supplier_id})


@router.post("/{supplier_id}/sync", response_model=SupplierSyncResult)
async def sync_supplier(
    supplier_id: int,
    request: SupplierSyncRequest,
    db: DbSession,
    current_user: CurrentUser,
):
    """Apply a pushed product feed to this supplier's catalog."""
    return await sync_supplier_products(db, supplier_id, request.products)


@router.get("/{supplier_id}/sync-logs", response_model=list[InventoryEventResponse])
async def supplier_sync_logs(
    supplier_id: int,
    db: DbSession,
    current_user: CurrentUser,
    limit: int = Query(50, ge=1, le=500),
):
    await _get_supplier_or_404(db, supplier_id)
    return await get_supplier_sync_logs(db, supplier_id, limit=limit)
