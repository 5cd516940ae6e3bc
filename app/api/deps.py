"""
FastAPI Dependencies

Database sessions, admin authentication and the provider registries built at
startup.

SECURITY NOTES:
- JWT payloads are never logged
- Bearer token is the primary auth method, the ``session`` cookie is a fallback
"""

from typing import Annotated
from fastapi import Depends, Cookie, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from jose import JWTError, jwt
import bcrypt
from datetime import datetime, timedelta, timezone
import logging

from app.database import get_db
from app.config import settings
from app.exceptions import ForbiddenError, UnauthorizedError
from app.models.user import User
from app.schemas.auth import TokenData
from app.services.email import EmailProviderRegistry
from app.services.payment import PaymentProviderRegistry
from app.services.shipping import ShippingProviderRegistry

logger = logging.getLogger(__name__)

SESSION_COOKIE = "session"

security = HTTPBearer(auto_error=False)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Create a signed JWT carrying ``data`` plus an ``exp`` claim."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


async def get_current_user(
    db: Annotated[AsyncSession, Depends(get_db)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)] = None,
    session_token: Annotated[str | None, Cookie(alias=SESSION_COOKIE)] = None,
) -> User:
    """
    Resolve the admin user from a Bearer token or the session cookie.

    Raises UnauthorizedError for a missing, invalid or expired token and
    ForbiddenError for a disabled account.
    """
    if credentials:
        token, auth_method = credentials.credentials, "bearer"
    elif session_token:
        token, auth_method = session_token, "cookie"
    else:
        raise UnauthorizedError()

    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        sub = payload.get("sub")
        if sub is None:
            raise UnauthorizedError("Could not validate credentials")
        token_data = TokenData(user_id=int(sub), email=payload.get("email"))
    except JWTError:
        # SECURITY: Don't log token decode errors with details
        logger.warning("JWT validation failed", extra={"auth_method": auth_method})
        raise UnauthorizedError("Could not validate credentials")
    except ValueError:
        logger.warning("Invalid token format", extra={"auth_method": auth_method})
        raise UnauthorizedError("Could not validate credentials")

    result = await db.execute(select(User).where(User.id == token_data.user_id))
    user = result.scalar_one_or_none()

    if user is None:
        raise UnauthorizedError("Could not validate credentials")
    if not user.is_active:
        raise ForbiddenError("User account is disabled")

    logger.debug("User authenticated", extra={"user_id": user.id, "auth_method": auth_method})
    return user


def get_email_providers(request: Request) -> EmailProviderRegistry:
    return request.app.state.email_providers


def get_payment_providers(request: Request) -> PaymentProviderRegistry:
    return request.app.state.payment_providers


def get_shipping_providers(request: Request) -> ShippingProviderRegistry:
    return request.app.state.shipping_providers


def get_supplier_feeds(request: Request) -> dict:
    return getattr(request.app.state, "supplier_feeds", {})


# Type aliases for dependency injection
DbSession = Annotated[AsyncSession, Depends(get_db)]
CurrentUser = Annotated[User, Depends(get_current_user)]
EmailProviders = Annotated[EmailProviderRegistry, Depends(get_email_providers)]
PaymentProviders = Annotated[PaymentProviderRegistry, Depends(get_payment_providers)]
ShippingProviders = Annotated[ShippingProviderRegistry, Depends(get_shipping_providers)]
SupplierFeeds = Annotated[dict, Depends(get_supplier_feeds)]
