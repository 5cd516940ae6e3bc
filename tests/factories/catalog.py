"""Catalog test factories."""

import factory
from faker import Faker

fake = Faker()

MATERIALS = ["sisal", "polypropylene", "nylon", "jute", "cotton", "polyester"]


class CategoryFactory(factory.Factory):
    class Meta:
        model = dict

    name = factory.LazyFunction(lambda: fake.word().title())
    slug = factory.Sequence(lambda n: f"category-{n}")
    description = factory.LazyFunction(fake.sentence)


class ProductFactory(factory.Factory):
    """
    Factory for product create payloads.

    Usage:
        payload = ProductFactory(category_id=category.id)
        payload = ProductFactory(category_id=1, stock_status="LOW_STOCK")
    """

    class Meta:
        model = dict

    sku = factory.Sequence(lambda n: f"TW-{n:04d}")
    name = factory.LazyFunction(lambda: f"{fake.random_element(MATERIALS).title()} Rope")
    description = factory.LazyFunction(fake.sentence)
    material = factory.LazyFunction(lambda: fake.random_element(MATERIALS))
    diameter = factory.LazyFunction(lambda: float(fake.random_element([6, 8, 10, 12, 16, 20])))
    length = factory.LazyFunction(lambda: float(fake.random_element([10, 20, 50, 100, 220])))
    price = factory.LazyFunction(lambda: round(fake.pyfloat(min_value=20, max_value=900), 2))
    stock_status = "IN_STOCK"
    category_id = 1
