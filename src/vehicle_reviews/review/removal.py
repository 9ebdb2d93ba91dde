"""DeleteReview: a moderator removes a review and all its votes."""

import structlog
from protean.fields import Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from vehicle_reviews.domain import reviews
from vehicle_reviews.review.moderation import ensure_moderator
from vehicle_reviews.review.review import Review

logger = structlog.get_logger(__name__)


@reviews.command(part_of="Review")
class DeleteReview:
    review_id = Identifier(required=True)
    moderator_id = Identifier(required=True)


@reviews.command_handler(part_of=Review)
class DeleteReviewHandler:
    @handle(DeleteReview)
    def delete_review(self, command):
        ensure_moderator(command.moderator_id, "delete reviews")

        current_domain.repository_for(Review).delete(command.review_id)
        logger.info(
            "Review removed by moderator",
            review_id=str(command.review_id),
            moderator_id=str(command.moderator_id),
        )
