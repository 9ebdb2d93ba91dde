"""Domain events for the Review aggregate.

Events are versioned, immutable facts. Other contexts (listing pages,
notifications, dealer analytics) subscribe to them instead of reading the
review store directly.
"""

from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from vehicle_reviews.domain import reviews


@reviews.event(part_of="Review")
class ReviewSubmitted:
    """An owner submitted a review of a vehicle."""

    __version__ = 1

    review_id = Identifier(required=True)
    vehicle_id = Identifier(required=True)
    author_id = Identifier(required=True)
    rating = Integer(required=True)
    title = String(required=True)
    recommend = Boolean(required=True)
    purchase_type = String(required=True)
    ownership_duration = String(required=True)
    verified_purchase = Boolean(default=False)
    submitted_at = DateTime(required=True)


@reviews.event(part_of="Review")
class ReviewApproved:
    """A moderator approved the review for public display."""

    __version__ = 1

    review_id = Identifier(required=True)
    vehicle_id = Identifier(required=True)
    author_id = Identifier(required=True)
    rating = Integer(required=True)
    moderator_id = Identifier(required=True)
    notes = Text()
    approved_at = DateTime(required=True)


@reviews.event(part_of="Review")
class ReviewRejected:
    """A moderator rejected the review."""

    __version__ = 1

    review_id = Identifier(required=True)
    vehicle_id = Identifier(required=True)
    author_id = Identifier(required=True)
    moderator_id = Identifier(required=True)
    notes = Text()
    rejected_at = DateTime(required=True)


@reviews.event(part_of="Review")
class ReviewReported:
    """A user flagged the review as inappropriate. Raised once per review."""

    __version__ = 1

    review_id = Identifier(required=True)
    vehicle_id = Identifier(required=True)
    reporter_id = Identifier(required=True)
    reported_at = DateTime(required=True)


@reviews.event(part_of="Review")
class HelpfulVoteRecorded:
    """A helpful or unhelpful vote was counted against the review."""

    __version__ = 1

    review_id = Identifier(required=True)
    voter_id = Identifier(required=True)
    direction = String(required=True)
    helpful_count = Integer(required=True)
    unhelpful_count = Integer(required=True)
    voted_at = DateTime(required=True)
