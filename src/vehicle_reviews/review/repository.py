"""Review record store.

Wraps the Protean DAO with the lookups the query service and the moderation
dashboard need. Filtering by reference happens in the provider; status,
report and title filters, ordering and paging happen in Python so results
are identical on every provider.
"""

import json
from datetime import UTC, datetime

import structlog
from protean import atomic_change
from protean.exceptions import ValidationError

from vehicle_reviews.domain import reviews, write_lock
from vehicle_reviews.errors import store_guard
from vehicle_reviews.review.review import Review
from vehicle_reviews.review.sorting import ReviewSort, paginate, sort_reviews
from vehicle_reviews.vote.ledger import VoteLedger

logger = structlog.get_logger(__name__)

_BATCH_SIZE = 100

_IMMUTABLE_FIELDS = {"id", "created_at"}
_UPDATABLE_FIELDS = {
    "vehicle_id",
    "author_id",
    "rating",
    "title",
    "comment",
    "pros",
    "cons",
    "recommend",
    "purchase_type",
    "ownership_duration",
    "verified_purchase",
}
# Changed only through voting, reporting and moderation
_MANAGED_FIELDS = {
    "helpful_count",
    "unhelpful_count",
    "reported",
    "reported_at",
    "reported_by",
    "status",
    "moderator_notes",
    "moderated_by",
}
_LIST_FIELDS = {"pros", "cons"}


def _status_values(statuses):
    if statuses is None:
        return None
    return {getattr(s, "value", s) for s in statuses}


@reviews.repository(part_of=Review)
class ReviewRepository:
    """Persistence operations for the Review aggregate."""

    # -------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------
    def create(self, review: Review) -> Review:
        with store_guard("create_review", review_id=str(review.id)):
            self.add(review)
        logger.info("Review stored", review_id=str(review.id), vehicle_id=str(review.vehicle_id))
        return review

    def fetch(self, review_id) -> Review:
        """``get`` with store failures translated to ``PersistenceError``."""
        with store_guard("get_review", review_id=str(review_id)):
            return self.get(review_id)

    def update(self, review_id, **changes) -> Review:
        """Merge ``changes`` into the stored review.

        Fields not named in ``changes`` keep their stored values. Vote counters,
        report flags and moderation fields are refused: editing them here would
        bypass the ledger and the status rules.
        """
        immutable = sorted(set(changes) & _IMMUTABLE_FIELDS)
        managed = sorted(set(changes) & _MANAGED_FIELDS)
        unknown = sorted(set(changes) - _UPDATABLE_FIELDS - _IMMUTABLE_FIELDS - _MANAGED_FIELDS)
        errors = {}
        for field in immutable:
            errors[field] = ["Field cannot be changed after creation"]
        for field in managed:
            errors[field] = ["Field is managed by its own operation"]
        for field in unknown:
            errors[field] = ["Unknown field"]
        if errors:
            raise ValidationError(errors)

        with write_lock:
            review = self.fetch(review_id)
            with atomic_change(review):
                for field, value in changes.items():
                    if field in _LIST_FIELDS and isinstance(value, list | tuple):
                        value = json.dumps(list(value)) if value else None
                    setattr(review, field, value)
                review.updated_at = datetime.now(UTC)

            with store_guard("update_review", review_id=str(review_id)):
                self.add(review)
        return review

    def delete(self, review_id) -> None:
        """Remove the review and every vote cast on it."""
        with write_lock:
            review = self.fetch(review_id)
            purged = VoteLedger().purge(review_id)
            with store_guard("delete_review", review_id=str(review_id)):
                self._dao.delete(review)
        logger.info("Review deleted", review_id=str(review_id), votes_purged=purged)

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def _fetch_all(self, **filters) -> list[Review]:
        results: list[Review] = []
        offset = 0
        with store_guard("list_reviews", **{k: str(v) for k, v in filters.items()}):
            while True:
                query = self._dao.query
                if filters:
                    query = query.filter(**filters)
                batch = query.order_by("id").offset(offset).limit(_BATCH_SIZE).all().items
                results.extend(batch)
                if len(batch) < _BATCH_SIZE:
                    break
                offset += _BATCH_SIZE
        return results

    def all_for(self, vehicle_id=None, statuses=None) -> list[Review]:
        """Every review of a vehicle (or of all vehicles) in the given statuses."""
        filters = {"vehicle_id": str(vehicle_id)} if vehicle_id is not None else {}
        items = self._fetch_all(**filters)
        wanted = _status_values(statuses)
        if wanted is not None:
            items = [r for r in items if r.status in wanted]
        return items

    def list_by_vehicle(self, vehicle_id, statuses=None, sort=ReviewSort.NEWEST, page=1, limit=10):
        items = sort_reviews(self.all_for(vehicle_id=vehicle_id, statuses=statuses), sort)
        return paginate(items, page, limit)

    def list_by_author(self, author_id, page=1, limit=10, sort=ReviewSort.NEWEST):
        items = sort_reviews(self._fetch_all(author_id=str(author_id)), sort)
        return paginate(items, page, limit)

    def list_matching(
        self,
        statuses=None,
        reported=None,
        search=None,
        sort=ReviewSort.NEWEST,
        page=1,
        limit=10,
    ):
        """Moderation queue lookup: status, report flag and title search."""
        items = self.all_for(statuses=statuses)
        if reported is not None:
            items = [r for r in items if bool(r.reported) == reported]
        if search:
            needle = search.strip().lower()
            items = [r for r in items if needle in (r.title or "").lower()]
        return paginate(sort_reviews(items, sort), page, limit)
