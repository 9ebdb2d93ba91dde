"""Vote ledger: the record of who voted on what.

The ledger gates counter increments: a vote is only counted in the same unit
of work that inserts its ledger row. SQL providers enforce uniqueness through
the primary key. The memory provider overwrites rows with a repeated
identity instead of refusing them, so ledger writes run under
``write_lock`` and callers keep holding it until their commit.
"""

import structlog
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain
from sqlalchemy.exc import IntegrityError

from vehicle_reviews.domain import write_lock
from vehicle_reviews.errors import ConflictError, store_guard
from vehicle_reviews.review.review import VoteDirection
from vehicle_reviews.vote.vote import Vote, vote_key

logger = structlog.get_logger(__name__)

_BATCH_SIZE = 100


class VoteLedger:
    def _repo(self):
        return current_domain.repository_for(Vote)

    def _find(self, review_id, voter_id):
        results = self._repo()._dao.query.filter(vote_id=vote_key(review_id, voter_id)).all()
        return results.items[0] if results.items else None

    def has_voted(self, review_id, voter_id) -> bool:
        with store_guard("lookup_vote", review_id=str(review_id)):
            return self._find(review_id, voter_id) is not None

    def record(self, review_id, voter_id, direction) -> Vote:
        """Insert the (review, voter) row.

        Raises:
            ConflictError: the voter already has a row for this review.
        """
        vote = Vote.cast(review_id, voter_id, direction)

        with write_lock, store_guard("record_vote", review_id=str(review_id)):
            if self._find(review_id, voter_id) is not None:
                raise ConflictError(f"Voter {voter_id} already voted on review {review_id}")
            try:
                self._repo().add(vote)
            except (IntegrityError, ValidationError) as exc:
                raise ConflictError(f"Voter {voter_id} already voted on review {review_id}") from exc

        logger.debug("Vote claimed", review_id=str(review_id), voter_id=str(voter_id), direction=vote.direction)
        return vote

    def votes_for(self, review_id) -> list[Vote]:
        votes: list[Vote] = []
        offset = 0
        with store_guard("list_votes", review_id=str(review_id)):
            while True:
                batch = (
                    self._repo()
                    ._dao.query.filter(review_id=str(review_id))
                    .order_by("vote_id")
                    .offset(offset)
                    .limit(_BATCH_SIZE)
                    .all()
                    .items
                )
                votes.extend(batch)
                if len(batch) < _BATCH_SIZE:
                    break
                offset += _BATCH_SIZE
        return votes

    def purge(self, review_id) -> int:
        """Delete every vote cast on a review. Returns the number removed."""
        with write_lock:
            votes = self.votes_for(review_id)
            with store_guard("purge_votes", review_id=str(review_id)):
                dao = self._repo()._dao
                for vote in votes:
                    dao.delete(vote)
        return len(votes)

    def tally(self, review_id) -> dict[str, int]:
        counts = {direction.value: 0 for direction in VoteDirection}
        for vote in self.votes_for(review_id):
            counts[vote.direction] += 1
        return counts
