"""Catalog schemas for request/response validation."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from app.models.product import StockStatus
from app.schemas.base import CamelModel, Page


class CategoryCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=120, pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
    description: Optional[str] = None


class CategoryResponse(CamelModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None


class ProductBase(CamelModel):
    sku: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    material: Optional[str] = Field(None, max_length=100)
    diameter: Optional[float] = Field(None, gt=0)
    length: Optional[float] = Field(None, gt=0)
    color: Optional[str] = Field(None, max_length=50)
    price: float = Field(..., ge=0)
    supplier_price: Optional[float] = Field(None, ge=0)
    stock_status: StockStatus = StockStatus.IN_STOCK
    image_url: Optional[str] = Field(None, max_length=500)
    category_id: int
    supplier_id: Optional[int] = None


class ProductCreate(ProductBase):
    pass


class ProductUpdate(CamelModel):
    """All fields optional; only fields sent by the client are applied."""

    sku: Optional[str] = Field(None, min_length=1, max_length=100)
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    material: Optional[str] = Field(None, max_length=100)
    diameter: Optional[float] = Field(None, gt=0)
    length: Optional[float] = Field(None, gt=0)
    color: Optional[str] = Field(None, max_length=50)
    price: Optional[float] = Field(None, ge=0)
    supplier_price: Optional[float] = Field(None, ge=0)
    stock_status: Optional[StockStatus] = None
    image_url: Optional[str] = Field(None, max_length=500)
    category_id: Optional[int] = None
    supplier_id: Optional[int] = None


class ProductResponse(ProductBase):
    id: int
    stock_status: str
    last_synced_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProductListResponse(Page):
    items: list[ProductResponse]


class StockAdjustment(CamelModel):
    """Manual stock adjustment recorded against a product."""

    quantity_change: int = Field(..., description="Positive to add, negative to subtract")
    quantity_before: int = Field(..., ge=0)
    notes: Optional[str] = Field(None, max_length=500)
    stock_status: Optional[StockStatus] = None
