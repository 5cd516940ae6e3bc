from abc import ABC, abstractmethod


class BaseProvider(ABC):
    """Common surface of every pluggable external-API adapter.

    Adapters report their own readiness through ``is_configured`` and convert
    network or API failures into result objects instead of raising.
    """

    #: Registry key, e.g. "brevo" or "courier-guy".
    name: str
    #: Human-readable label for the admin provider screen.
    display_name: str

    @abstractmethod
    def is_configured(self) -> bool:
        """Return True when all credentials the adapter needs are present."""

    def describe(self) -> dict:
        return {
            "name": self.name,
            "display_name": self.display_name,
            "configured": self.is_configured(),
        }
