"""Vote aggregate: one row per (review, voter) in the vote ledger.

The identifier is derived from the pair, so the store's primary key is the
uniqueness constraint: a second vote by the same user on the same review
cannot be inserted.
"""

import uuid
from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, String

from vehicle_reviews.domain import reviews
from vehicle_reviews.review.review import VoteDirection

VOTE_NAMESPACE = uuid.UUID("7c1f5d7e-3b0a-5e8e-9a43-0b6f2d41c6a2")


def vote_key(review_id, voter_id) -> str:
    """Deterministic ledger identifier for a voter's vote on a review."""
    return str(uuid.uuid5(VOTE_NAMESPACE, f"{review_id}:{voter_id}"))


@reviews.aggregate
class Vote:
    vote_id = Identifier(identifier=True)
    review_id = Identifier(required=True)
    voter_id = Identifier(required=True)
    direction = String(choices=VoteDirection, required=True)
    cast_at = DateTime(required=True)

    @classmethod
    def cast(cls, review_id, voter_id, direction):
        return cls(
            vote_id=vote_key(review_id, voter_id),
            review_id=str(review_id),
            voter_id=str(voter_id),
            direction=VoteDirection(direction).value,
            cast_at=datetime.now(UTC),
        )
