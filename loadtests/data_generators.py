"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the API's request schemas
(camelCase on the wire) and the domain's validation rules.
"""

import random
import uuid

from faker import Faker

fake = Faker()

# Landmarks with a known delivery zone in Yenagoa
LANDMARKS = ["Azikoro", "Swali", "Ekeki", "Amarata", "Ovom", "Etegwe", "Tombia", "Okaki"]

DISHES = [
    ("Jollof Rice", "Rice"),
    ("Fried Rice", "Rice"),
    ("Banga Soup", "Soup"),
    ("Egusi Soup", "Soup"),
    ("Fisherman Soup", "Soup"),
    ("Pepper Soup", "Soup"),
    ("Suya", "Grill"),
    ("Roasted Plantain", "Grill"),
    ("Moi Moi", "Sides"),
    ("Chapman", "Drinks"),
]


# ---------- Identity ----------


def principal_id(prefix: str) -> str:
    """Principal ids double as bearer tokens against the fake identity provider."""
    return f"lt-{prefix}-{uuid.uuid4().hex[:12]}"


def auth_headers(principal: str) -> dict:
    return {"Authorization": f"Bearer {principal}"}


def valid_email() -> str:
    return f"{fake.user_name()[:20]}.{uuid.uuid4().hex[:4]}@{fake.free_email_domain()}"


def nigerian_phone() -> str:
    return f"+23480{random.randint(10000000, 99999999)}"


def vendor_profile_data() -> dict:
    return {
        "role": "vendor",
        "displayName": f"{fake.first_name()}'s Kitchen"[:150],
        "email": valid_email(),
        "address": f"{random.randint(1, 120)} {fake.street_name()}"[:500],
        "location": random.choice(LANDMARKS),
        "phone": nigerian_phone(),
    }


def user_profile_data() -> dict:
    return {
        "role": "user",
        "displayName": fake.name()[:150],
        "email": valid_email(),
        "phone": nigerian_phone(),
    }


# ---------- Catalog ----------


def menu_item_data() -> dict:
    title, category = random.choice(DISHES)
    return {
        "title": title,
        "description": fake.sentence(nb_words=8),
        "price": float(random.choice(range(500, 6000, 250))),
        "category": category,
        "isAvailable": True,
    }


def price_update_data() -> dict:
    return {"price": float(random.choice(range(500, 6000, 250)))}


# ---------- Cart & checkout ----------


def cart_line_data(vendor_id: str, product_id: str) -> dict:
    return {"vendorId": vendor_id, "productId": product_id, "quantity": random.randint(1, 3)}


def checkout_data() -> dict:
    return {
        "deliveryLandmark": random.choice(LANDMARKS),
        "deliveryAddress": f"{random.randint(1, 80)} {fake.street_name()}"[:500],
        "deliveryCity": "Yenagoa",
        "deliveryState": "Bayelsa",
        "deliveryPhone": nigerian_phone(),
    }


def cancellation_reason() -> str:
    return random.choice(["Ordered by mistake", "Changed my mind", "Took too long", "Wrong address"])
