"""Mark a review helpful or unhelpful.

Authors cannot vote on their own reviews. A second vote by the same user is
ignored and returns False.

Voting is not a command: each vote writes the review and its ledger row in
one explicit unit of work per attempt, and a handler's own unit of work
would defer those writes past the retry loop.
"""

import structlog

from vehicle_reviews.vote.integrity import VoteIntegrityService

logger = structlog.get_logger(__name__)


def vote_on_review(review_id, voter_id, direction) -> bool:
    """Count the vote. Returns whether it changed the review's counters."""
    outcome = VoteIntegrityService().apply_vote(review_id=review_id, voter_id=voter_id, direction=direction)
    if outcome.applied:
        logger.info("Vote counted", review_id=review_id, voter_id=voter_id, direction=str(direction))
    return outcome.applied
