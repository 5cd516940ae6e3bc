import enum
from datetime import datetime, timezone

from sqlalchemy import Column, String, Integer, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.database import Base


class InventoryEventType(str, enum.Enum):
    STOCK_ADDED = "STOCK_ADDED"
    STOCK_REMOVED = "STOCK_REMOVED"
    STOCK_ADJUSTED = "STOCK_ADJUSTED"
    SUPPLIER_DELIVERY = "SUPPLIER_DELIVERY"
    ORDER_FULFILLMENT = "ORDER_FULFILLMENT"
    MANUAL_ADJUSTMENT = "MANUAL_ADJUSTMENT"
    STOCK_STATUS_CHANGE = "STOCK_STATUS_CHANGE"


class ReferenceType(str, enum.Enum):
    ORDER = "ORDER"
    SUPPLIER_DELIVERY = "SUPPLIER_DELIVERY"
    MANUAL = "MANUAL"
    SYSTEM = "SYSTEM"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InventoryEvent(Base):
    """Append-only audit row for one stock movement.

    Rows are inserted by app.services.inventory_tracking and never updated
    or deleted.
    """

    __tablename__ = "inventory_events"

    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="RESTRICT"), nullable=False, index=True)
    event_type = Column(String(30), nullable=False, index=True)
    quantity_change = Column(Integer, nullable=False)  # positive = stock in
    quantity_before = Column(Integer, nullable=True)
    quantity_after = Column(Integer, nullable=True)
    reference_type = Column(String(30), nullable=True, index=True)
    reference_id = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)
    created_by_user_id = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)

    # Loaded only on request (selectinload); never lazily
    product = relationship("Product", lazy="raise")

    def __repr__(self):
        return f"<InventoryEvent {self.id} product={self.product_id} {self.event_type} {self.quantity_change:+d}>"
