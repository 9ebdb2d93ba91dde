"""Review aggregate: an owner's review of a vehicle listing.

CQRS (not event sourced). Reviews are read far more often than written and
the only temporal question anyone asks ("when was it first reported?") is
answered by plain timestamp fields.

State Machine (3 states):
    PENDING → APPROVED | REJECTED
    APPROVED ⇄ REJECTED
Re-applying the current status keeps the state and only refreshes the notes.

The ``reported`` flag is orthogonal to status: any user can raise it, nobody
but a moderator deleting the review can make it go away.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from vehicle_reviews.domain import reviews
from vehicle_reviews.review.events import (
    HelpfulVoteRecorded,
    ReviewApproved,
    ReviewRejected,
    ReviewReported,
    ReviewSubmitted,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class ReviewStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class PurchaseType(Enum):
    NEW = "new"
    USED = "used"
    LEASED = "leased"
    RENTED = "rented"
    TEST_DRIVE = "test-drive"


class OwnershipDuration(Enum):
    LESS_THAN_MONTH = "less-than-month"
    ONE_TO_SIX_MONTHS = "1-6-months"
    SIX_TO_TWELVE_MONTHS = "6-12-months"
    ONE_TO_THREE_YEARS = "1-3-years"
    THREE_PLUS_YEARS = "3-plus-years"


class VoteDirection(Enum):
    HELPFUL = "helpful"
    UNHELPFUL = "unhelpful"


# ---------------------------------------------------------------------------
# State Machine
# ---------------------------------------------------------------------------
_VALID_TRANSITIONS = {
    ReviewStatus.PENDING: {ReviewStatus.APPROVED, ReviewStatus.REJECTED},
    ReviewStatus.APPROVED: {ReviewStatus.REJECTED},
    ReviewStatus.REJECTED: {ReviewStatus.APPROVED},
}


def _encode_list(items):
    return json.dumps(list(items)) if items else None


def _decode_list(raw):
    return json.loads(raw) if raw else []


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@reviews.aggregate
class Review:
    """An owner's review of a vehicle.

    Counters are only ever moved by ``record_vote`` and the status only by
    ``approve``/``reject``. Everything else is written once at submission.
    """

    # References into other contexts
    vehicle_id = Identifier(required=True)
    author_id = Identifier(required=True)

    # Content
    rating = Integer(required=True, min_value=1, max_value=5)
    title = String(required=True, max_length=100)
    comment = Text(required=True)
    pros = Text()  # JSON array of strings
    cons = Text()  # JSON array of strings
    recommend = Boolean(default=False)
    purchase_type = String(choices=PurchaseType, required=True)
    ownership_duration = String(choices=OwnershipDuration, required=True)
    verified_purchase = Boolean(default=False)

    # Voting
    helpful_count = Integer(default=0)
    unhelpful_count = Integer(default=0)

    # Reporting
    reported = Boolean(default=False)
    reported_at = DateTime()
    reported_by = Identifier()

    # Moderation
    status = String(choices=ReviewStatus, default=ReviewStatus.PENDING.value)
    moderator_notes = Text()
    moderated_by = Identifier()

    # Timestamps
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------
    @invariant.post
    def vote_counters_cannot_be_negative(self):
        if (self.helpful_count or 0) < 0 or (self.unhelpful_count or 0) < 0:
            raise ValidationError({"votes": ["Vote counters cannot be negative"]})

    @invariant.post
    def title_must_not_be_blank(self):
        if self.title is not None and len(self.title.strip()) == 0:
            raise ValidationError({"title": ["Review title cannot be empty"]})

    @invariant.post
    def reported_review_must_record_first_report(self):
        if self.reported and self.reported_at is None:
            raise ValidationError({"reported": ["A reported review must carry the time of its first report"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def submit(
        cls,
        vehicle_id,
        author_id,
        rating,
        title,
        comment,
        recommend,
        purchase_type,
        ownership_duration,
        pros=None,
        cons=None,
        verified_purchase=False,
    ):
        """Create a pending review with zeroed counters."""
        now = datetime.now(UTC)

        review = cls(
            vehicle_id=vehicle_id,
            author_id=author_id,
            rating=rating,
            title=title,
            comment=comment,
            pros=_encode_list(pros),
            cons=_encode_list(cons),
            recommend=recommend,
            purchase_type=purchase_type,
            ownership_duration=ownership_duration,
            verified_purchase=verified_purchase,
            status=ReviewStatus.PENDING.value,
            helpful_count=0,
            unhelpful_count=0,
            reported=False,
            created_at=now,
            updated_at=now,
        )

        review.raise_(
            ReviewSubmitted(
                review_id=str(review.id),
                vehicle_id=str(vehicle_id),
                author_id=str(author_id),
                rating=rating,
                title=title,
                recommend=recommend,
                purchase_type=purchase_type,
                ownership_duration=ownership_duration,
                verified_purchase=verified_purchase,
                submitted_at=now,
            )
        )

        return review

    # -------------------------------------------------------------------
    # Decoded content
    # -------------------------------------------------------------------
    @property
    def pros_list(self) -> list[str]:
        return _decode_list(self.pros)

    @property
    def cons_list(self) -> list[str]:
        return _decode_list(self.cons)

    # -------------------------------------------------------------------
    # Moderation
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        """Validate state machine transition."""
        current = ReviewStatus(self.status)
        if target_status not in _VALID_TRANSITIONS.get(current, set()):
            raise ValidationError({"status": [f"Cannot transition from {current.value} to {target_status.value}"]})

    def _refresh_notes(self, moderator_id, notes, now):
        with atomic_change(self):
            self.moderator_notes = notes
            self.moderated_by = moderator_id
            self.updated_at = now

    def approve(self, moderator_id, notes=None) -> bool:
        """Approve the review for public display.

        Returns False when the review was already approved; the notes are
        still overwritten in that case.
        """
        now = datetime.now(UTC)

        if ReviewStatus(self.status) == ReviewStatus.APPROVED:
            self._refresh_notes(moderator_id, notes, now)
            return False

        self._assert_can_transition(ReviewStatus.APPROVED)

        with atomic_change(self):
            self.status = ReviewStatus.APPROVED.value
            self.moderator_notes = notes
            self.moderated_by = moderator_id
            self.updated_at = now

        self.raise_(
            ReviewApproved(
                review_id=str(self.id),
                vehicle_id=str(self.vehicle_id),
                author_id=str(self.author_id),
                rating=self.rating,
                moderator_id=str(moderator_id),
                notes=notes,
                approved_at=now,
            )
        )
        return True

    def reject(self, moderator_id, notes=None) -> bool:
        """Reject the review. Returns False when it was already rejected."""
        now = datetime.now(UTC)

        if ReviewStatus(self.status) == ReviewStatus.REJECTED:
            self._refresh_notes(moderator_id, notes, now)
            return False

        self._assert_can_transition(ReviewStatus.REJECTED)

        with atomic_change(self):
            self.status = ReviewStatus.REJECTED.value
            self.moderator_notes = notes
            self.moderated_by = moderator_id
            self.updated_at = now

        self.raise_(
            ReviewRejected(
                review_id=str(self.id),
                vehicle_id=str(self.vehicle_id),
                author_id=str(self.author_id),
                moderator_id=str(moderator_id),
                notes=notes,
                rejected_at=now,
            )
        )
        return True

    # -------------------------------------------------------------------
    # Reporting
    # -------------------------------------------------------------------
    def report(self, reporter_id) -> bool:
        """Flag the review for moderator attention.

        Only the first report changes anything. Status is never touched.
        """
        if self.reported:
            return False

        now = datetime.now(UTC)
        with atomic_change(self):
            self.reported = True
            self.reported_at = now
            self.reported_by = reporter_id
            self.updated_at = now

        self.raise_(
            ReviewReported(
                review_id=str(self.id),
                vehicle_id=str(self.vehicle_id),
                reporter_id=str(reporter_id),
                reported_at=now,
            )
        )
        return True

    # -------------------------------------------------------------------
    # Voting
    # -------------------------------------------------------------------
    def record_vote(self, direction, voter_id):
        """Count one vote.

        Callers must have claimed the vote in the ledger first; this method
        does not know about duplicates.
        """
        direction = VoteDirection(direction)
        now = datetime.now(UTC)

        with atomic_change(self):
            if direction == VoteDirection.HELPFUL:
                self.helpful_count = (self.helpful_count or 0) + 1
            else:
                self.unhelpful_count = (self.unhelpful_count or 0) + 1
            self.updated_at = now

        self.raise_(
            HelpfulVoteRecorded(
                review_id=str(self.id),
                voter_id=str(voter_id),
                direction=direction.value,
                helpful_count=self.helpful_count,
                unhelpful_count=self.unhelpful_count,
                voted_at=now,
            )
        )

    def reset_counters(self, helpful_count: int, unhelpful_count: int):
        """Overwrite both counters with values recomputed from the ledger."""
        with atomic_change(self):
            self.helpful_count = helpful_count
            self.unhelpful_count = unhelpful_count
            self.updated_at = datetime.now(UTC)
