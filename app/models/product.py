"""Product model for the rope and twine catalog."""
import enum

from sqlalchemy import Column, String, DateTime, Text, Integer, Float, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.database import Base


class StockStatus(str, enum.Enum):
    """Coarse availability. Exact on-hand quantity is not tracked on Product."""

    IN_STOCK = "IN_STOCK"
    LOW_STOCK = "LOW_STOCK"
    OUT_OF_STOCK = "OUT_OF_STOCK"


class Product(Base):
    """Catalog product."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)

    # Identification
    sku = Column(String(100), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    # Rope attributes
    material = Column(String(100), nullable=True)
    diameter = Column(Float, nullable=True)  # mm
    length = Column(Float, nullable=True)  # m
    color = Column(String(50), nullable=True)

    # Pricing
    price = Column(Float, nullable=False)
    supplier_price = Column(Float, nullable=True)

    stock_status = Column(String(20), nullable=False, default=StockStatus.IN_STOCK.value, index=True)

    image_url = Column(String(500), nullable=True)

    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id", ondelete="SET NULL"), nullable=True, index=True)

    last_synced_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    category = relationship("Category", back_populates="products")
    supplier = relationship("Supplier", back_populates="products")

    def __repr__(self):
        return f"<Product {self.sku} - {self.name}>"

    @property
    def is_in_stock(self) -> bool:
        return self.stock_status == StockStatus.IN_STOCK.value
