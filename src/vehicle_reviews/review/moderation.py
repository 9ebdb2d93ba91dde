"""SetReviewStatus: a moderator approves or rejects a review.

Only users on the moderator roster may change a status. Setting the status a
review already has keeps it and overwrites the notes.
"""

import structlog
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from vehicle_reviews.directory import get_directory
from vehicle_reviews.domain import reviews
from vehicle_reviews.errors import AuthorizationError
from vehicle_reviews.review.review import Review, ReviewStatus

logger = structlog.get_logger(__name__)

_SETTABLE = {ReviewStatus.APPROVED.value, ReviewStatus.REJECTED.value}


def ensure_moderator(user_id, action: str, roster=None) -> None:
    roster = roster or get_directory()
    if not roster.is_moderator(user_id):
        logger.warning("Moderation refused", user_id=str(user_id), action=action)
        raise AuthorizationError(user_id, action)


@reviews.command(part_of="Review")
class SetReviewStatus:
    review_id = Identifier(required=True)
    moderator_id = Identifier(required=True)
    status = String(required=True)  # "approved" or "rejected"
    notes = Text()


@reviews.command_handler(part_of=Review)
class SetReviewStatusHandler:
    @handle(SetReviewStatus)
    def set_review_status(self, command):
        if command.status not in _SETTABLE:
            raise ValidationError({"status": ["Must be one of: approved, rejected"]})

        ensure_moderator(command.moderator_id, f"set review status to {command.status}")

        repo = current_domain.repository_for(Review)
        review = repo.fetch(command.review_id)

        if command.status == ReviewStatus.APPROVED.value:
            changed = review.approve(moderator_id=command.moderator_id, notes=command.notes)
        else:
            changed = review.reject(moderator_id=command.moderator_id, notes=command.notes)

        repo.create(review)
        logger.info(
            "Review moderated",
            review_id=str(review.id),
            status=review.status,
            moderator_id=str(command.moderator_id),
            changed=changed,
        )
        return changed
