"""Storefront catalog. Read-only and unauthenticated."""

from fastapi import APIRouter, Query
from sqlalchemy import select, func, or_
from typing import Optional

from app.api.deps import DbSession
from app.exceptions import NotFoundError
from app.models.category import Category
from app.models.product import Product, StockStatus
from app.schemas.product import ProductListResponse, ProductResponse

router = APIRouter()


@router.get("", response_model=ProductListResponse)
async def list_products(
    db: DbSession,
    page: int = Query(1, ge=1),
    page_size: int = Query(24, ge=1, le=100),
    category: Optional[str] = None,  # category slug
    search: Optional[str] = None,
    stock_status: Optional[StockStatus] = None,
):
    query = select(Product)
    if category:
        query = query.join(Category, Category.id == Product.category_id).where(Category.slug == category)
    if stock_status is not None:
        query = query.where(Product.stock_status == stock_status.value)
    if search:
        pattern = f"%{search}%"
        query = query.where(
            or_(
                Product.name.ilike(pattern),
                Product.description.ilike(pattern),
                Product.material.ilike(pattern),
            )
        )

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


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int, db: DbSession):
    product = await db.get(Product, product_id)
    if product is None:
        raise NotFoundError("Product", product_id)
    return product
