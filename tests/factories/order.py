"""Checkout test factories."""

import factory
from faker import Faker

fake = Faker()


class CheckoutItemFactory(factory.Factory):
    class Meta:
        model = dict

    product_id = 1
    quantity = factory.LazyFunction(lambda: fake.random_int(min=1, max=5))


class CheckoutFactory(factory.Factory):
    """
    Factory for guest checkout payloads.

    Usage:
        payload = CheckoutFactory(items=[CheckoutItemFactory(product_id=p.id)])
    """

    class Meta:
        model = dict

    customer_name = factory.LazyFunction(fake.name)
    customer_email = factory.LazyFunction(lambda: fake.email().lower())
    customer_phone = "+27 82 555 0101"
    street_address = factory.LazyFunction(fake.street_address)
    city = "Cape Town"
    province = "Western Cape"
    postal_code = "8001"
    shipping_cost = 0.0
    items = factory.LazyFunction(lambda: [CheckoutItemFactory()])
