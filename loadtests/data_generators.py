"""Faker-based data generators for Locust load test scenarios.

Payloads pass the submission validator (title 3-100 characters, comment
20-2000 characters, known purchase types and ownership durations) and use
the field names of the API's request schemas.
"""

import random
import uuid

from faker import Faker

fake = Faker()

PURCHASE_TYPES = ["new", "used", "leased", "rented", "test-drive"]
OWNERSHIP_DURATIONS = ["less-than-month", "1-6-months", "6-12-months", "1-3-years", "3-plus-years"]
SORTS = ["newest", "oldest", "highest-rating", "lowest-rating", "most-helpful"]
MODERATION_FILTERS = ["all", "pending", "approved", "rejected", "reported"]


def unique_user_id() -> str:
    """Generate user IDs like 'user-lt-a1b2c3d4'."""
    return f"user-lt-{uuid.uuid4().hex[:8]}"


def vehicle_id() -> str:
    """Pick from a small pool so listings and stats see several reviews."""
    return f"vehicle-lt-{random.randint(1, 25):03d}"


def review_title() -> str:
    return fake.sentence(nb_words=5)[:100]


def review_comment() -> str:
    comment = fake.paragraph(nb_sentences=4)
    while len(comment) < 20:
        comment += " " + fake.sentence()
    return comment[:2000]


def feature_list(max_items: int = 4) -> list[str]:
    return [fake.sentence(nb_words=3)[:200] for _ in range(random.randint(0, max_items))]


def review_data(author_id: str | None = None) -> dict:
    """Generate a SubmitReviewRequest payload."""
    return {
        "author_id": author_id or unique_user_id(),
        "rating": random.randint(1, 5),
        "title": review_title(),
        "comment": review_comment(),
        "pros": feature_list(),
        "cons": feature_list(),
        "recommend": random.random() < 0.7,
        "purchase_type": random.choice(PURCHASE_TYPES),
        "ownership_duration": random.choice(OWNERSHIP_DURATIONS),
        "verified_purchase": random.random() < 0.4,
    }


def vote_data(voter_id: str | None = None) -> dict:
    return {
        "voter_id": voter_id or unique_user_id(),
        "direction": random.choices(["helpful", "unhelpful"], weights=[3, 1])[0],
    }
