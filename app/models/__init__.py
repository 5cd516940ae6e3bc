from app.models.user import User
from app.models.category import Category
from app.models.supplier import Supplier
from app.models.product import Product, StockStatus
from app.models.inventory_event import InventoryEvent, InventoryEventType, ReferenceType
from app.models.order import Order, OrderItem, OrderStatusHistory, OrderStatus, PaymentStatus

__all__ = [
    "User",
    "Category",
    "Supplier",
    "Product",
    "StockStatus",
    "InventoryEvent",
    "InventoryEventType",
    "ReferenceType",
    "Order",
    "OrderItem",
    "OrderStatusHistory",
    "OrderStatus",
    "PaymentStatus",
]
