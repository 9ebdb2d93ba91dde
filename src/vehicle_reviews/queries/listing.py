"""Read side: paginated review listings and the moderation detail view.

Every item is the stored review merged with a best-effort author summary
(and, for moderators, a vehicle summary). A failing lookup is logged and the
item is returned without that summary.
"""

import structlog
from protean.utils.globals import current_domain

from vehicle_reviews.directory import get_directory
from vehicle_reviews.review.review import Review, ReviewStatus
from vehicle_reviews.review.sorting import (
    ModerationFilter,
    parse_moderation_filter,
    parse_sort,
    validate_page,
)
from vehicle_reviews.settings import get_settings

logger = structlog.get_logger(__name__)


def _iso(value):
    return value.isoformat() if value is not None else None


def review_to_dict(review: Review) -> dict:
    return {
        "id": str(review.id),
        "vehicle_id": str(review.vehicle_id),
        "author_id": str(review.author_id),
        "rating": review.rating,
        "title": review.title,
        "comment": review.comment,
        "pros": review.pros_list,
        "cons": review.cons_list,
        "recommend": bool(review.recommend),
        "purchase_type": review.purchase_type,
        "ownership_duration": review.ownership_duration,
        "verified_purchase": bool(review.verified_purchase),
        "helpful_count": review.helpful_count or 0,
        "unhelpful_count": review.unhelpful_count or 0,
        "reported": bool(review.reported),
        "reported_at": _iso(review.reported_at),
        "status": review.status,
        "moderator_notes": review.moderator_notes,
        "moderated_by": str(review.moderated_by) if review.moderated_by else None,
        "created_at": _iso(review.created_at),
        "updated_at": _iso(review.updated_at),
    }


class ReviewQueries:
    def __init__(self, repository=None, profiles=None, vehicles=None, settings=None):
        self._repository = repository
        self.profiles = profiles or get_directory()
        self.vehicles = vehicles or get_directory()
        self.settings = settings or get_settings()

    @property
    def repository(self):
        if self._repository is None:
            return current_domain.repository_for(Review)
        return self._repository

    # -------------------------------------------------------------------
    # Enrichment
    # -------------------------------------------------------------------
    def _author(self, author_id):
        try:
            profile = self.profiles.get_profile(str(author_id))
        except Exception as exc:
            logger.warning("Author lookup failed", author_id=str(author_id), error=str(exc))
            return None
        return profile.to_dict() if profile is not None else None

    def _vehicle(self, vehicle_id):
        try:
            vehicle = self.vehicles.get_vehicle(str(vehicle_id))
        except Exception as exc:
            logger.warning("Vehicle lookup failed", vehicle_id=str(vehicle_id), error=str(exc))
            return None
        return vehicle.to_dict() if vehicle is not None else None

    def _item(self, review, with_vehicle=False) -> dict:
        item = review_to_dict(review)
        author = self._author(review.author_id)
        if author is not None:
            item["author"] = author
        if with_vehicle:
            vehicle = self._vehicle(review.vehicle_id)
            if vehicle is not None:
                item["vehicle"] = vehicle
        return item

    def _page_args(self, page, limit):
        limit = self.settings.default_page_size if limit is None else limit
        page = 1 if page is None else page
        return validate_page(page, limit, self.settings.max_page_size)

    # -------------------------------------------------------------------
    # Listings
    # -------------------------------------------------------------------
    def list_for_vehicle(self, vehicle_id, page=1, limit=None, sort=None) -> dict:
        page, limit = self._page_args(page, limit)
        statuses = [ReviewStatus.APPROVED] if self.settings.public_approved_only else None
        items, pagination = self.repository.list_by_vehicle(
            vehicle_id, statuses=statuses, sort=parse_sort(sort), page=page, limit=limit
        )
        return {
            "items": [self._item(r) for r in items],
            "pagination": pagination.to_dict(),
        }

    def list_for_author(self, author_id, page=1, limit=None) -> dict:
        page, limit = self._page_args(page, limit)
        items, pagination = self.repository.list_by_author(author_id, page=page, limit=limit)
        return {
            "items": [self._item(r) for r in items],
            "pagination": pagination.to_dict(),
        }

    def list_for_moderation(self, status_filter=None, search=None, sort=None, page=1, limit=None) -> dict:
        page, limit = self._page_args(page, limit)
        status_filter = parse_moderation_filter(status_filter)
        sort = parse_sort(sort)

        statuses = None
        reported = None
        if status_filter == ModerationFilter.REPORTED:
            reported = True
        elif status_filter != ModerationFilter.ALL:
            statuses = [ReviewStatus(status_filter.value)]

        items, pagination = self.repository.list_matching(
            statuses=statuses,
            reported=reported,
            search=search,
            sort=sort,
            page=page,
            limit=limit,
        )
        return {
            "items": [self._item(r, with_vehicle=True) for r in items],
            "pagination": pagination.to_dict(),
        }

    def review_detail(self, review_id) -> dict:
        review = self.repository.fetch(review_id)
        return self._item(review, with_vehicle=True)
