"""
TASSA Store API - Main Application

SECURITY FEATURES:
- Conditional API docs (disabled in production)
- Structured logging without sensitive data
- RFC 7807 error bodies; internal details hidden outside DEBUG
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from app.api.admin.router import admin_router
from app.api.store.router import store_router
from app.config import settings
from app.database import init_db
from app.exceptions import StoreException, create_exception_handlers
from app.middleware import CorrelationIdMiddleware, CorrelationLogFilter
from app.services.email import build_email_registry
from app.services.payment import build_payment_registry
from app.services.shipping import build_shipping_registry
# Import all models to register them with SQLAlchemy metadata before init_db()
from app.models import (  # noqa: F401
    User, Category, Supplier, Product, InventoryEvent, Order, OrderItem, OrderStatusHistory
)

VERSION = "1.0.0"

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s",
)
for handler in logging.getLogger().handlers:
    handler.addFilter(CorrelationLogFilter())
logger = logging.getLogger(__name__)


def install_providers(app: FastAPI) -> None:
    """Build the integration registries and attach them to app.state."""
    app.state.email_providers = build_email_registry(settings)
    app.state.payment_providers = build_payment_registry(settings)
    app.state.shipping_providers = build_shipping_registry(settings)
    app.state.supplier_feeds = {}

    for registry in (app.state.email_providers, app.state.payment_providers, app.state.shipping_providers):
        default = registry.get_default_provider()
        logger.info(
            f"{registry.kind} providers: {len(registry.get_configured_providers())}/{len(registry)} configured, "
            f"default={default.name if default else None}"
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting TASSA Store API...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    # SECURITY: Don't log full database URL, just prefix
    if settings.DATABASE_URL:
        logger.info(f"Database URL prefix: {settings.DATABASE_URL[:30]}...")
    try:
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        # SECURITY: Don't log full exception details which may contain credentials
        logger.error(f"Database initialization failed: {type(e).__name__}")
        logger.warning("App starting without database - some features may not work")

    install_providers(app)
    yield
    logger.info("Shutting down TASSA Store API...")


app = FastAPI(
    title="TASSA Store API",
    description="Storefront and back-office API for Twines and Straps SA",
    version=VERSION,
    docs_url="/docs" if settings.docs_enabled else None,
    redoc_url="/redoc" if settings.docs_enabled else None,
    lifespan=lifespan,
)

# SECURITY: Restrict origins to known frontend URLs
allowed_origins = list(dict.fromkeys([settings.FRONTEND_URL, settings.SITE_URL]))
if not settings.is_production:
    allowed_origins.extend(["http://localhost:3000", "http://localhost:5173"])

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Correlation-ID", "X-Request-ID"],
)
app.add_middleware(CorrelationIdMiddleware)

handlers = create_exception_handlers(allowed_origins, debug=settings.DEBUG)
app.add_exception_handler(StoreException, handlers["store"])
app.add_exception_handler(StarletteHTTPException, handlers["http"])
app.add_exception_handler(RequestValidationError, handlers["validation"])
app.add_exception_handler(Exception, handlers["generic"])

app.include_router(admin_router, prefix="/api/admin")
app.include_router(store_router, prefix="/api")

app.mount(
    settings.UPLOAD_URL_PREFIX,
    StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
    name="uploads",
)


@app.get("/")
async def root():
    response = {
        "name": "TASSA Store API",
        "version": VERSION,
        "health": "/health",
    }
    if settings.docs_enabled:
        response["docs"] = "/docs"
    return response


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "version": VERSION,
        "environment": settings.ENVIRONMENT,
    }


# For running with uvicorn directly (development only)
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=5001,
        reload=settings.DEBUG,
    )
