"""
Provider registry.

One registry per integration kind (email, payment, shipping) is built at
application startup, stored on ``app.state`` and handed to request handlers
through FastAPI dependencies. Nothing here is a module-level singleton.
"""

import logging
from typing import Generic, Optional, TypeVar

from app.services.providers.base import BaseProvider

logger = logging.getLogger(__name__)

P = TypeVar("P", bound=BaseProvider)


class ProviderRegistry(Generic[P]):
    """Registry of adapters keyed by ``provider.name`` in registration order."""

    def __init__(self, kind: str, default_provider: Optional[str] = None):
        self.kind = kind
        self._providers: dict[str, P] = {}
        self._default_provider = default_provider

    def register_provider(self, provider: P) -> None:
        if provider.name in self._providers:
            logger.info(f"Replacing {self.kind} provider '{provider.name}'")
        self._providers[provider.name] = provider

    def get_provider(self, name: str) -> Optional[P]:
        return self._providers.get(name)

    def get_all_providers(self) -> list[P]:
        return list(self._providers.values())

    def get_configured_providers(self) -> list[P]:
        return [p for p in self._providers.values() if p.is_configured()]

    @property
    def default_provider_name(self) -> Optional[str]:
        return self._default_provider

    def set_default_provider(self, name: str) -> None:
        """Change the preferred provider. Unknown names are ignored."""
        if name in self._providers:
            self._default_provider = name
        else:
            logger.warning(f"Ignoring unknown default {self.kind} provider '{name}'")

    def get_default_provider(self) -> Optional[P]:
        """Configured default, else first configured provider, else None."""
        if self._default_provider:
            provider = self._providers.get(self._default_provider)
            if provider is not None and provider.is_configured():
                return provider

        configured = self.get_configured_providers()
        return configured[0] if configured else None

    def resolve(self, name: Optional[str] = None) -> Optional[P]:
        """Named provider when a name is given, otherwise the default."""
        if name:
            return self.get_provider(name)
        return self.get_default_provider()

    def describe(self) -> dict:
        default = self.get_default_provider()
        return {
            "kind": self.kind,
            "default": default.name if default else None,
            "providers": [p.describe() for p in self._providers.values()],
        }

    def __len__(self) -> int:
        return len(self._providers)

    def __contains__(self, name: str) -> bool:
        return name in self._providers
