from pydantic_settings import BaseSettings
from pydantic import field_validator
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    DATABASE_URL: str = "postgresql+asyncpg://localhost:5432/tassa_store"

    @field_validator('DATABASE_URL', mode='before')
    @classmethod
    def convert_database_url(cls, v: str) -> str:
        """Convert postgresql:// to postgresql+asyncpg:// for async support."""
        if v and v.startswith('postgresql://'):
            return v.replace('postgresql://', 'postgresql+asyncpg://', 1)
        return v

    # Auth
    SECRET_KEY: str = "development-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 8

    # CORS / links
    FRONTEND_URL: str = "http://localhost:3000"
    SITE_URL: str = "http://localhost:3000"

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    SQL_ECHO: bool = False
    ENABLE_MOCK_PROVIDERS: bool = False

    # Email
    EMAIL_PROVIDER: str = "brevo"
    BREVO_API_KEY: str | None = None
    BREVO_SENDER_EMAIL: str = "noreply@twinesandstraps.co.za"
    BREVO_SENDER_NAME: str = "TASSA - Twines and Straps SA"
    SENDGRID_API_KEY: str | None = None
    SENDGRID_FROM_EMAIL: str = "noreply@twinesandstraps.co.za"
    SENDGRID_FROM_NAME: str = "TASSA - Twines and Straps SA"
    ADMIN_ALERT_EMAIL: str | None = None

    # Payment
    PAYMENT_PROVIDER: str = "payfast"
    PAYFAST_MERCHANT_ID: str | None = None
    PAYFAST_MERCHANT_KEY: str | None = None
    PAYFAST_PASSPHRASE: str | None = None
    PAYFAST_SANDBOX: bool = True

    # Shipping
    SHIPPING_PROVIDER: str = "courier-guy"
    COURIER_GUY_API_KEY: str | None = None
    COURIER_GUY_API_URL: str = "https://api.thecourierguy.co.za"

    # Dispatch warehouse (waybill origin)
    WAREHOUSE_NAME: str = "TASSA Warehouse"
    WAREHOUSE_ADDRESS: str = "123 Warehouse Street"
    WAREHOUSE_CITY: str = "Johannesburg"
    WAREHOUSE_PROVINCE: str = "Gauteng"
    WAREHOUSE_POSTAL_CODE: str = "2000"
    WAREHOUSE_PHONE: str = "+27 63 969 0773"
    WAREHOUSE_EMAIL: str = "admin@tassa.co.za"

    # Uploads
    UPLOAD_DIR: str = "public/uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def sqlalchemy_echo(self) -> bool:
        """SQL echo leaks bound parameters, so it never runs in production."""
        return self.SQL_ECHO and not self.is_production

    @property
    def docs_enabled(self) -> bool:
        return not self.is_production

    @property
    def mock_providers_enabled(self) -> bool:
        return self.ENABLE_MOCK_PROVIDERS or self.ENVIRONMENT == "development"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
