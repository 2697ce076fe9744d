"""Faker-based data generators for Locust load test scenarios.

Payloads use the camelCase field names accepted by the API's request schemas
and carry English and Arabic text where the API takes localized values.
"""

import os
import random

from faker import Faker

fake = Faker()
fake_ar = Faker("ar_SA")

PAYMENT_METHODS = ["cash", "credit_card", "bank_transfer"]


def _env_list(name: str, default: str) -> list[str]:
    return [value.strip() for value in os.environ.get(name, default).split(",") if value.strip()]


def customer_tokens() -> list[str]:
    return _env_list("LOADTEST_TOKENS", "loadtest-user")


def admin_token() -> str:
    return os.environ.get("LOADTEST_ADMIN_TOKEN", "loadtest-admin")


def product_ids() -> list[str]:
    return _env_list("LOADTEST_PRODUCTS", "prod-001,prod-002,prod-003")


def localized(en: str, ar: str | None = None) -> dict:
    """A localized text payload; ``ar`` is omitted when not given."""
    payload = {"en": en}
    if ar:
        payload["ar"] = ar
    return payload


def cart_items(count: int = 2) -> list[dict]:
    """Items for POST /cart; the service prices them from the catalogue."""
    chosen = random.sample(product_ids(), k=min(count, len(product_ids())))
    items = []
    for product_id in chosen:
        item = {"product": product_id, "quantity": random.randint(1, 2)}
        if random.random() < 0.3:
            item["notes"] = localized(fake.sentence(nb_words=4), fake_ar.sentence(nb_words=4))
        items.append(item)
    return items


def shipping_address() -> dict:
    return {
        "address": localized(fake.street_address()[:500], fake_ar.street_address()[:500]),
        "city": localized(fake.city()[:100], fake_ar.city()[:100]),
        "country": localized("Saudi Arabia", "السعودية"),
        "postalCode": fake.postcode()[:20],
    }


def checkout_data() -> dict:
    payload = {
        "shippingAddress": shipping_address(),
        "paymentMethod": random.choice(PAYMENT_METHODS),
    }
    if random.random() < 0.5:
        payload["notes"] = localized(fake.sentence(nb_words=6), fake_ar.sentence(nb_words=6))
    return payload


def discount_data() -> dict:
    return {
        "discount": random.choice([5, 10, 15, 20]),
        "description": localized("Seasonal offer", "عرض موسمي"),
    }


def language() -> str:
    return random.choice(["en", "ar"])
