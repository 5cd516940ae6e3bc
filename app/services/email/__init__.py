"""Email providers and the registry factory used at application startup."""

from app.config import Settings
from app.services.email.base import EmailProvider
from app.services.email.brevo import BrevoProvider
from app.services.email.mock import MockEmailProvider
from app.services.email.sendgrid import SendGridProvider
from app.services.providers.registry import ProviderRegistry

EmailProviderRegistry = ProviderRegistry[EmailProvider]


def build_email_registry(settings: Settings) -> EmailProviderRegistry:
    registry: EmailProviderRegistry = ProviderRegistry("email", default_provider=settings.EMAIL_PROVIDER)
    registry.register_provider(
        BrevoProvider(
            api_key=settings.BREVO_API_KEY,
            sender_email=settings.BREVO_SENDER_EMAIL,
            sender_name=settings.BREVO_SENDER_NAME,
        )
    )
    registry.register_provider(
        SendGridProvider(
            api_key=settings.SENDGRID_API_KEY,
            from_email=settings.SENDGRID_FROM_EMAIL,
            from_name=settings.SENDGRID_FROM_NAME,
        )
    )
    if settings.mock_providers_enabled:
        registry.register_provider(MockEmailProvider())
        registry.set_default_provider(MockEmailProvider.name)
    return registry


__all__ = [
    "EmailProvider",
    "EmailProviderRegistry",
    "BrevoProvider",
    "SendGridProvider",
    "MockEmailProvider",
    "build_email_registry",
]
