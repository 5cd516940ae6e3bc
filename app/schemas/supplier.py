"""Supplier and supplier-sync schemas."""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from app.schemas.base import CamelModel, Page


class SupplierBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    code: str = Field(..., min_length=1, max_length=20, pattern=r"^[A-Za-z0-9_]+$")
    contact_name: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    website: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = None
    notes: Optional[str] = None
    default_markup: float = Field(30.0, ge=0, le=1000)
    payment_terms: Optional[str] = Field(None, max_length=100)
    lead_time_days: Optional[int] = Field(None, ge=0)
    min_order_value: Optional[float] = Field(None, ge=0)
    is_active: bool = True


class SupplierCreate(SupplierBase):
    pass


class SupplierUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    code: Optional[str] = Field(None, min_length=1, max_length=20, pattern=r"^[A-Za-z0-9_]+$")
    contact_name: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=30)
    website: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = None
    notes: Optional[str] = None
    default_markup: Optional[float] = Field(None, ge=0, le=1000)
    payment_terms: Optional[str] = Field(None, max_length=100)
    lead_time_days: Optional[int] = Field(None, ge=0)
    min_order_value: Optional[float] = Field(None, ge=0)
    is_active: Optional[bool] = None


class SupplierResponse(SupplierBase):
    id: int
    email: Optional[str] = None
    product_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SupplierListResponse(Page):
    items: list[SupplierResponse]


class ExternalProduct(CamelModel):
    """One row of a supplier's catalog feed.

    Descriptive fields are optional: ``None`` (or omitted) means "keep the
    local value", anything else, including an empty string, overwrites it.
    """

    supplier_sku: str = Field(..., min_length=1, max_length=80)
    price: float = Field(..., ge=0)
    stock_quantity: int
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    material: Optional[str] = None
    diameter: Optional[float] = None
    length: Optional[float] = None


class SupplierSyncRequest(CamelModel):
    products: list[ExternalProduct]


class SupplierSyncResult(CamelModel):
    supplier_id: int
    supplier_name: str = ""
    success: bool = True
    products_updated: int = 0
    products_created: int = 0
    products_skipped: int = 0
    errors: list[str] = Field(default_factory=list)
    last_sync_at: datetime
