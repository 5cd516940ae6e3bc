"""Admin catalog API. Stock changes made here are written to the inventory event log."""

from fastapi import APIRouter, Query, status
from sqlalchemy import select, func, or_
from typing import Optional
import logging

from app.api.deps import DbSession, CurrentUser
from app.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.category import Category
from app.models.inventory_event import InventoryEvent
from app.models.product import Product, StockStatus
from app.models.supplier import Supplier
from app.schemas.inventory import InventoryEventResponse, StockAdjustmentResult
from app.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    ProductListResponse,
    StockAdjustment,
)
from app.services.inventory_tracking import load_event, track_manual_adjustment, track_stock_status_change

logger = logging.getLogger(__name__)
router = APIRouter()

NON_NULLABLE_FIELDS = ("sku", "name", "price", "stock_status", "category_id")


def _reject_nulls(update_data: dict) -> None:
    nulls = [field for field in NON_NULLABLE_FIELDS if field in update_data and update_data[field] is None]
    if nulls:
        raise ValidationError(f"Fields cannot be null: {', '.join(nulls)}")


async def get_product_or_404(db: DbSession, product_id: int) -> Product:
    product = await db.get(Product, product_id)
    if product is None:
        raise NotFoundError("Product", product_id)
    return product


async def _check_references(db: DbSession, category_id: Optional[int], supplier_id: Optional[int]) -> None:
    if category_id is not None and await db.get(Category, category_id) is None:
        raise ValidationError(f"Category {category_id} does not exist")
    if supplier_id is not None and await db.get(Supplier, supplier_id) is None:
        raise ValidationError(f"Supplier {supplier_id} does not exist")


async def _check_sku_free(db: DbSession, sku: str, exclude_id: Optional[int] = None) -> None:
    query = select(Product.id).where(Product.sku == sku)
    if exclude_id is not None:
        query = query.where(Product.id != exclude_id)
    if (await db.execute(query)).first() is not None:
        raise ConflictError(f"SKU '{sku}' already exists")


@router.get("", response_model=ProductListResponse)
async def list_products(
    db: DbSession,
    current_user: CurrentUser,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    category_id: Optional[int] = None,
    supplier_id: Optional[int] = None,
    stock_status: Optional[StockStatus] = None,
    search: Optional[str] = None,  # SKU or name
):
    query = select(Product)

    if category_id is not None:
        query = query.where(Product.category_id == category_id)
    if supplier_id is not None:
        query = query.where(Product.supplier_id == supplier_id)
    if stock_status is not None:
        query = query.where(Product.stock_status == stock_status.value)
    if search:
        pattern = f"%{search}%"
        query = query.where(or_(Product.sku.ilike(pattern), Product.name.ilike(pattern)))

    total = (await db.execute(select(func.count()).select_from(query.subquery()))).scalar() or 0

    result = await db.execute(
        query.order_by(Product.name, Product.id).offset((page - 1) * page_size).limit(page_size)
    )
    return ProductListResponse(
        items=[ProductResponse.model_validate(p) for p in result.scalars().all()],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(data: ProductCreate, db: DbSession, current_user: CurrentUser):
    await _check_sku_free(db, data.sku)
    await _check_references(db, data.category_id, data.supplier_id)

    product = Product(**data.model_dump(mode="json"))
    db.add(product)
    await db.commit()
    await db.refresh(product)

    logger.info("Product created", extra={"product_id": product.id, "sku": product.sku})
    return product


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int, db: DbSession, current_user: CurrentUser):
    return await get_product_or_404(db, product_id)


@router.patch("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    data: ProductUpdate,
    db: DbSession,
    current_user: CurrentUser,
):
    """Partial update. A stock status change is recorded as an inventory event."""
    product = await get_product_or_404(db, product_id)
    update_data = data.model_dump(mode="json", exclude_unset=True)
    _reject_nulls(update_data)

    if update_data.get("sku") and update_data["sku"] != product.sku:
        await _check_sku_free(db, update_data["sku"], exclude_id=product_id)
    await _check_references(db, update_data.get("category_id"), update_data.get("supplier_id"))

    old_status = product.stock_status
    for field, value in update_data.items():
        setattr(product, field, value)
    new_status = product.stock_status
    user_id = current_user.id
    await db.commit()

    if "stock_status" in update_data and new_status != old_status:
        await track_stock_status_change(db, product_id, old_status, new_status, user_id=user_id)

    return await _reload(db, product_id)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(product_id: int, db: DbSession, current_user: CurrentUser):
    product = await get_product_or_404(db, product_id)
    has_history = await db.execute(
        select(InventoryEvent.id).where(InventoryEvent.product_id == product_id).limit(1)
    )
    if has_history.first() is not None:
        raise ConflictError("Product has inventory history and cannot be deleted; mark it OUT_OF_STOCK instead")
    await db.delete(product)
    await db.commit()
    logger.info("Product deleted", extra={"product_id": product_id})


@router.post("/{product_id}/adjust", response_model=StockAdjustmentResult)
async def adjust_stock(
    product_id: int,
    adjustment: StockAdjustment,
    db: DbSession,
    current_user: CurrentUser,
):
    """Record a manual stock count correction, optionally updating stock status."""
    product = await get_product_or_404(db, product_id)
    quantity_after = adjustment.quantity_before + adjustment.quantity_change
    if quantity_after < 0:
        raise ValidationError(
            f"Adjustment would leave negative stock ({adjustment.quantity_before} {adjustment.quantity_change:+d})"
        )

    user_id = current_user.id
    old_status = product.stock_status
    new_status = adjustment.stock_status.value if adjustment.stock_status else old_status
    if new_status != old_status:
        product.stock_status = new_status
        await db.commit()

    event = await track_manual_adjustment(
        db,
        product_id=product_id,
        quantity_change=adjustment.quantity_change,
        quantity_before=adjustment.quantity_before,
        quantity_after=quantity_after,
        user_id=user_id,
        notes=adjustment.notes,
    )
    if new_status != old_status:
        await track_stock_status_change(db, product_id, old_status, new_status, user_id=user_id)

    if event is not None:
        event = await load_event(db, event.id)
    return StockAdjustmentResult(
        product_id=product_id,
        stock_status=new_status,
        event=InventoryEventResponse.model_validate(event) if event is not None else None,
    )


async def _reload(db: DbSession, product_id: int) -> Product:
    product = await db.get(Product, product_id, populate_existing=True)
    if product is None:
        raise NotFoundError("Product", product_id)
    return product
