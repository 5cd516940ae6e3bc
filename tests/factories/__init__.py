"""
Test factories for generating realistic test data.

Uses factory_boy for declarative test data generation. Factories build
request payload dicts in snake_case; the API accepts either case.
"""

from .catalog import CategoryFactory, ProductFactory
from .supplier import SupplierFactory, ExternalProductFactory
from .order import CheckoutFactory, CheckoutItemFactory

__all__ = [
    "CategoryFactory",
    "ProductFactory",
    "SupplierFactory",
    "ExternalProductFactory",
    "CheckoutFactory",
    "CheckoutItemFactory",
]
