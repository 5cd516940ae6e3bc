from fastapi import APIRouter
from app.api.store import products, checkout, shipping, webhooks

store_router = APIRouter()

store_router.include_router(products.router, prefix="/products", tags=["store-products"])
store_router.include_router(checkout.router, prefix="/checkout", tags=["store-checkout"])
store_router.include_router(shipping.router, prefix="/shipping", tags=["store-shipping"])
store_router.include_router(webhooks.router, prefix="/webhooks", tags=["webhooks"])
