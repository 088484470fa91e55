"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the commerce engine's
validation rules (price bounds, hex colours, order line shapes) and match
the field names expected by the API's request schemas.
"""

import random
import uuid

from faker import Faker

fake = Faker("en_IN")

INDIAN_STATES = ["Maharashtra", "Karnataka", "Tamil Nadu", "Delhi", "Gujarat", "Kerala"]


def unique_tenant_id() -> str:
    """Generate unique tenant IDs like 'tenant-lt-a1b2c3d4'."""
    return f"tenant-lt-{uuid.uuid4().hex[:8]}"


def valid_phone() -> str:
    return f"+91{random.randint(7000000000, 9999999999)}"


def store_data(tenant_id: str | None = None) -> dict:
    """Generate an OpenStoreRequest payload."""
    return {
        "tenant_id": tenant_id or unique_tenant_id(),
        "name": f"{fake.company()[:80]} Store",
        "whatsapp_number": valid_phone(),
        "business_state": random.choice(INDIAN_STATES),
    }


def product_action() -> dict:
    """Generate a `product.create` action for an active product."""
    word = fake.word().capitalize()
    return {
        "type": "product.create",
        "payload": {
            "name": f"{word} Cotton Kurta",
            "description": fake.sentence(nb_words=10),
            "price": round(random.uniform(99, 4999), 2),
            "status": "active",
            "tags": random.sample(["cotton", "summer", "festive", "handloom", "new"], k=2),
        },
    }


def design_action() -> dict:
    """Generate a `store.update_palette` action.

    Random primaries often fail contrast; the engine corrects them rather
    than rejecting, which is the path worth loading.
    """
    return {
        "type": "store.update_palette",
        "payload": {
            "palette": {
                "primary": fake.hex_color().upper(),
                "background": random.choice(["#FFFFFF", "#FAFAF5", "#111111"]),
                "text": random.choice(["#111111", "#333333", "#FFFFFF"]),
            }
        },
    }


def variant_action(product_id: str) -> dict:
    """Generate a `variant.create` action with opening stock."""
    return {
        "type": "variant.create",
        "payload": {
            "productId": product_id,
            "attributes": {"size": random.choice(["S", "M", "L", "XL"])},
            "stock": random.randint(20, 200),
        },
    }


def discount_action(code: str | None = None) -> dict:
    """Generate a `discount.create` action for a capped percentage code."""
    return {
        "type": "discount.create",
        "payload": {
            "code": code or f"LT{uuid.uuid4().hex[:6].upper()}",
            "type": "percentage",
            "value": random.choice([5, 10, 15, 20]),
            "maxDiscount": 500,
        },
    }


def address_data() -> dict:
    return {
        "line1": fake.street_address()[:120],
        "city": fake.city()[:60],
        "state": random.choice(INDIAN_STATES),
        "pincode": fake.postcode(),
    }


def order_data(product_id: str, variant_id: str | None, unit_price: float, discount_code: str | None = None) -> dict:
    """Generate a PlaceOrderRequest payload for a single product."""
    payload = {
        "buyer_phone": valid_phone(),
        "buyer_name": fake.name(),
        "line_items": [
            {
                "product_id": product_id,
                "variant_id": variant_id,
                "name": "Load test item",
                "quantity": random.randint(1, 3),
                "unit_price": unit_price,
            }
        ],
        "shipping_address": address_data(),
        "payment_method": random.choice(["cod", "upi", "card"]),
    }
    if discount_code:
        payload["discount_code"] = discount_code
    return payload
