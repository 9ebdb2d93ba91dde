"""Vote integrity: one vote, exactly one counter increment.

Each attempt inserts the ledger row and increments the review's counter in a
single unit of work, committed while ``write_lock`` is held. A stale review
version or a duplicate ledger key makes the commit fail; the attempt is
rolled back and retried, and a retry that finds the voter already recorded
reports the vote as not applied.

Voting runs outside command handlers: a handler's unit of work would hold
both writes until after the retry loop had already returned.
"""

import random
import time
from dataclasses import dataclass

import structlog
from protean import UnitOfWork
from protean.exceptions import ExpectedVersionError, InvalidOperationError, TransactionError, ValidationError
from protean.utils.globals import current_domain, current_uow
from sqlalchemy.exc import IntegrityError

from vehicle_reviews.domain import write_lock
from vehicle_reviews.errors import ConflictError, PersistenceError, store_guard
from vehicle_reviews.review.review import Review, VoteDirection
from vehicle_reviews.settings import get_settings
from vehicle_reviews.vote.ledger import VoteLedger

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class VoteOutcome:
    applied: bool


def parse_direction(value) -> VoteDirection:
    if isinstance(value, VoteDirection):
        return value
    try:
        return VoteDirection(value)
    except ValueError:
        raise ValidationError({"direction": ["Must be one of: helpful, unhelpful"]}) from None


def is_write_conflict(exc: Exception) -> bool:
    """True for failures a fresh attempt can resolve."""
    if isinstance(exc, (ExpectedVersionError, IntegrityError)):
        return True
    # Commit failures arrive wrapped, with the driver error as the cause
    return isinstance(exc, TransactionError) and isinstance(exc.__cause__, IntegrityError)


class VoteIntegrityService:
    def __init__(self, repository=None, ledger=None, max_attempts=None, backoff=None, sleep=time.sleep):
        settings = get_settings()
        self._repository = repository
        self.ledger = ledger if ledger is not None else VoteLedger()
        self.max_attempts = max_attempts if max_attempts is not None else settings.vote_max_attempts
        self.backoff = backoff if backoff is not None else settings.vote_retry_backoff
        self._sleep = sleep

    @property
    def repository(self):
        if self._repository is None:
            return current_domain.repository_for(Review)
        return self._repository

    def _delay(self, attempt: int) -> float:
        if self.backoff <= 0:
            return 0.0
        return self.backoff * (2 ** (attempt - 1)) * random.uniform(0.5, 1.5)

    def apply_vote(self, review_id, voter_id, direction) -> VoteOutcome:
        """Count ``voter_id``'s vote on a review unless they already voted.

        Raises:
            ObjectNotFoundError: the review does not exist.
            ValidationError: bad direction, or the author voting on their own review.
            PersistenceError: the vote could not be written.
        """
        direction = parse_direction(direction)
        if voter_id is None or str(voter_id).strip() == "":
            raise ValidationError({"voter_id": ["This field is required"]})
        if current_uow and current_uow.in_progress:
            raise InvalidOperationError("Votes must be applied outside a unit of work")

        with store_guard("apply_vote", review_id=str(review_id), voter_id=str(voter_id)):
            for attempt in range(1, self.max_attempts + 1):
                try:
                    applied = self._attempt(review_id, voter_id, direction)
                except (ExpectedVersionError, IntegrityError, TransactionError) as exc:
                    if not is_write_conflict(exc):
                        raise
                    logger.info(
                        "Vote write conflicted, retrying",
                        review_id=str(review_id),
                        attempt=attempt,
                        error_type=type(exc).__name__,
                    )
                else:
                    if not applied:
                        logger.info("Repeated vote ignored", review_id=str(review_id), voter_id=str(voter_id))
                    return VoteOutcome(applied=applied)

                if attempt < self.max_attempts:
                    self._sleep(self._delay(attempt))

        logger.error(
            "Vote kept conflicting",
            review_id=str(review_id),
            voter_id=str(voter_id),
            attempts=self.max_attempts,
        )
        raise PersistenceError("apply_vote", "Vote could not be counted")

    def _attempt(self, review_id, voter_id, direction: VoteDirection) -> bool:
        """Claim and count the vote in one unit of work.

        Returns False when the voter already has a ledger row.
        """
        try:
            with write_lock, UnitOfWork():
                review = self.repository.get(review_id)
                if str(review.author_id) == str(voter_id):
                    raise ValidationError({"vote": ["Cannot vote on your own review"]})
                if self.ledger.has_voted(review_id, voter_id):
                    return False

                review.record_vote(direction.value, voter_id)
                self.repository.add(review)
                self.ledger.record(review_id, voter_id, direction.value)
        except ConflictError:
            return False
        return True

    def reconcile(self, review_id) -> Review:
        """Recompute both counters from the ledger and store them."""
        with store_guard("reconcile_votes", review_id=str(review_id)):
            with write_lock, UnitOfWork():
                counts = self.ledger.tally(review_id)
                review = self.repository.get(review_id)
                before = (review.helpful_count, review.unhelpful_count)
                review.reset_counters(counts[VoteDirection.HELPFUL.value], counts[VoteDirection.UNHELPFUL.value])
                self.repository.add(review)

        if before != (review.helpful_count, review.unhelpful_count):
            logger.warning(
                "Vote counters repaired",
                review_id=str(review_id),
                before=before,
                after=(review.helpful_count, review.unhelpful_count),
            )
        return review
