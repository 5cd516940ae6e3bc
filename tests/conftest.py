import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool

from app.main import app
from app.database import Base, get_db
from app.api.deps import get_password_hash, create_access_token
from app.models.category import Category
from app.models.product import Product, StockStatus
from app.models.supplier import Supplier
from app.models.user import User
from app.services.email import EmailProviderRegistry, MockEmailProvider
from app.services.payment import PaymentProviderRegistry, MockPaymentProvider
from app.services.providers.registry import ProviderRegistry
from app.services.shipping import ShippingProviderRegistry, MockShippingProvider

# Test database URL (SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///./test.db"


@pytest_asyncio.fixture
async def test_db():
    """Create test database and tables."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=NullPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def mock_email() -> MockEmailProvider:
    return MockEmailProvider()


@pytest.fixture
def mock_shipping() -> MockShippingProvider:
    return MockShippingProvider()


@pytest.fixture
def mock_payment() -> MockPaymentProvider:
    return MockPaymentProvider()


@pytest.fixture
def providers(mock_email, mock_shipping, mock_payment):
    """Registries holding only mock providers."""
    email: EmailProviderRegistry = ProviderRegistry("email", default_provider="mock")
    email.register_provider(mock_email)

    payment: PaymentProviderRegistry = ProviderRegistry("payment", default_provider="mock")
    payment.register_provider(mock_payment)

    shipping = ShippingProviderRegistry(default_provider="mock")
    shipping.register_provider(mock_shipping)

    return {"email": email, "payment": payment, "shipping": shipping}


@pytest_asyncio.fixture
async def test_user(test_db: AsyncSession):
    """Create a test user."""
    user = User(
        email="test@example.com",
        hashed_password=get_password_hash("testpassword123"),
        first_name="Test",
        last_name="User",
        is_active=True,
    )
    test_db.add(user)
    await test_db.commit()
    await test_db.refresh(user)
    return user


@pytest_asyncio.fixture
async def client(test_db: AsyncSession, providers):
    """Create test client with overridden database and mock providers.

    ASGITransport does not run the lifespan, so registries are installed here.
    """

    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    app.state.email_providers = providers["email"]
    app.state.payment_providers = providers["payment"]
    app.state.shipping_providers = providers["shipping"]
    app.state.supplier_feeds = {}

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def authenticated_client(client: AsyncClient, test_user: User):
    """Create authenticated test client."""
    token = create_access_token({"sub": str(test_user.id), "email": test_user.email})
    client.headers["Authorization"] = f"Bearer {token}"
    return client


@pytest_asyncio.fixture
async def category(test_db: AsyncSession) -> Category:
    category = Category(name="Ropes", slug="ropes")
    test_db.add(category)
    await test_db.commit()
    await test_db.refresh(category)
    return category


@pytest_asyncio.fixture
async def supplier(test_db: AsyncSession) -> Supplier:
    supplier = Supplier(name="Coastal Cordage", code="CC", default_markup=30.0, is_active=True)
    test_db.add(supplier)
    await test_db.commit()
    await test_db.refresh(supplier)
    return supplier


@pytest_asyncio.fixture
async def make_product(test_db: AsyncSession, category: Category):
    """Insert a product; keyword arguments override the defaults."""

    async def _make(**overrides) -> Product:
        fields = {
            "sku": "ROPE-001",
            "name": "Sisal Rope 12mm",
            "price": 100.0,
            "stock_status": StockStatus.IN_STOCK.value,
            "category_id": category.id,
        }
        fields.update(overrides)
        product = Product(**fields)
        test_db.add(product)
        await test_db.commit()
        await test_db.refresh(product)
        return product

    return _make
