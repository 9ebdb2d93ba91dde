"""Shared builders for the vehicle review tests."""

from itertools import count

from protean import current_domain

from vehicle_reviews.review.moderation import SetReviewStatus
from vehicle_reviews.review.review import Review
from vehicle_reviews.review.submission import submit_review

_sequence = count(1)


def valid_payload(**overrides) -> dict:
    n = next(_sequence)
    payload = {
        "vehicle_id": "vehicle-001",
        "author_id": f"author-{n}",
        "rating": 4,
        "title": "Solid daily driver",
        "comment": "Comfortable, frugal and easy to park. Would buy again.",
        "pros": ["Fuel economy", "Comfort"],
        "cons": ["Road noise"],
        "recommend": True,
        "purchase_type": "used",
        "ownership_duration": "1-3-years",
        "verified_purchase": False,
    }
    payload.update(overrides)
    return payload


def make_review(**overrides) -> Review:
    """Build an unsaved review with its submission event cleared."""
    payload = valid_payload(**overrides)
    review = Review.submit(**payload)
    review._events.clear()
    return review


def submit(**overrides) -> str:
    return submit_review(valid_payload(**overrides))


def submit_with_status(status: str, moderator_id: str = "mod-1", **overrides) -> str:
    review_id = submit(**overrides)
    if status != "pending":
        current_domain.process(
            SetReviewStatus(review_id=review_id, moderator_id=moderator_id, status=status),
            asynchronous=False,
        )
    return review_id


def load(review_id) -> Review:
    return current_domain.repository_for(Review).get(review_id)
