from fastapi import APIRouter
from app.api.admin import (
    auth,
    products,
    categories,
    suppliers,
    inventory,
    orders,
    providers,
    upload,
)

admin_router = APIRouter()

admin_router.include_router(auth.router, prefix="/auth", tags=["admin-auth"])
admin_router.include_router(products.router, prefix="/products", tags=["admin-products"])
admin_router.include_router(categories.router, prefix="/categories", tags=["admin-categories"])
admin_router.include_router(suppliers.router, prefix="/suppliers", tags=["admin-suppliers"])
admin_router.include_router(inventory.router, prefix="/inventory", tags=["admin-inventory"])
admin_router.include_router(orders.router, prefix="/orders", tags=["admin-orders"])
admin_router.include_router(providers.router, prefix="/providers", tags=["admin-providers"])
admin_router.include_router(upload.router, prefix="/upload", tags=["admin-upload"])
