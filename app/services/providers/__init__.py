from app.services.providers.base import BaseProvider
from app.services.providers.registry import ProviderRegistry

__all__ = ["BaseProvider", "ProviderRegistry"]
