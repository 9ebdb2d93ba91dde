"""SubmitReview: an owner submits a review of a vehicle.

The payload is validated as a whole before the command is built, so callers
see every field problem at once. Submissions are not idempotent: two
identical payloads create two reviews.
"""

import json

import structlog
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from vehicle_reviews.domain import dispatch, reviews
from vehicle_reviews.review.review import Review
from vehicle_reviews.review.validation import validate_submission

logger = structlog.get_logger(__name__)


@reviews.command(part_of="Review")
class SubmitReview:
    vehicle_id = Identifier(required=True)
    author_id = Identifier(required=True)
    rating = Integer(required=True)
    title = String(required=True, max_length=100)
    comment = Text(required=True)
    pros = Text()  # JSON array of strings
    cons = Text()  # JSON array of strings
    recommend = Boolean(required=True)
    purchase_type = String(required=True)
    ownership_duration = String(required=True)
    verified_purchase = Boolean(default=False)


@reviews.command_handler(part_of=Review)
class SubmitReviewHandler:
    @handle(SubmitReview)
    def submit_review(self, command):
        review = Review.submit(
            vehicle_id=command.vehicle_id,
            author_id=command.author_id,
            rating=command.rating,
            title=command.title,
            comment=command.comment,
            recommend=command.recommend,
            purchase_type=command.purchase_type,
            ownership_duration=command.ownership_duration,
            pros=json.loads(command.pros) if command.pros else None,
            cons=json.loads(command.cons) if command.cons else None,
            verified_purchase=command.verified_purchase,
        )
        current_domain.repository_for(Review).create(review)
        return str(review.id)


def submit_review(payload) -> str:
    """Validate ``payload`` and create a pending review. Returns its id."""
    cleaned = validate_submission(payload)
    review_id = dispatch(
        SubmitReview(
            vehicle_id=cleaned["vehicle_id"],
            author_id=cleaned["author_id"],
            rating=cleaned["rating"],
            title=cleaned["title"],
            comment=cleaned["comment"],
            pros=json.dumps(cleaned["pros"]) if cleaned["pros"] else None,
            cons=json.dumps(cleaned["cons"]) if cleaned["cons"] else None,
            recommend=cleaned["recommend"],
            purchase_type=cleaned["purchase_type"],
            ownership_duration=cleaned["ownership_duration"],
            verified_purchase=cleaned["verified_purchase"],
        )
    )
    logger.info("Review submitted", review_id=review_id, vehicle_id=cleaned["vehicle_id"])
    return review_id
