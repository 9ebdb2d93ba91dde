"""Ordering and paging of review lists.

Sorting happens in Python so every provider returns identical orderings:
the primary key, then ``created_at`` descending, then id.
"""

import math
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError

_EPOCH = datetime.min.replace(tzinfo=UTC)


class ReviewSort(Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    HIGHEST_RATING = "highest-rating"
    LOWEST_RATING = "lowest-rating"
    MOST_HELPFUL = "most-helpful"


class ModerationFilter(Enum):
    ALL = "all"
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    REPORTED = "reported"


# (key, descending)
_PRIMARY_KEYS = {
    ReviewSort.NEWEST: (lambda r: _created(r), True),
    ReviewSort.OLDEST: (lambda r: _created(r), False),
    ReviewSort.HIGHEST_RATING: (lambda r: r.rating or 0, True),
    ReviewSort.LOWEST_RATING: (lambda r: r.rating or 0, False),
    ReviewSort.MOST_HELPFUL: (lambda r: r.helpful_count or 0, True),
}


def _created(review):
    value = review.created_at
    if value is None:
        return _EPOCH
    # SQL providers can hand back naive timestamps
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def parse_sort(value) -> ReviewSort:
    if value is None or value == "":
        return ReviewSort.NEWEST
    if isinstance(value, ReviewSort):
        return value
    try:
        return ReviewSort(value)
    except ValueError:
        allowed = ", ".join(s.value for s in ReviewSort)
        raise ValidationError({"sort": [f"Must be one of: {allowed}"]}) from None


def parse_moderation_filter(value) -> ModerationFilter:
    if value is None or value == "":
        return ModerationFilter.ALL
    if isinstance(value, ModerationFilter):
        return value
    try:
        return ModerationFilter(value)
    except ValueError:
        allowed = ", ".join(f.value for f in ModerationFilter)
        raise ValidationError({"status": [f"Must be one of: {allowed}"]}) from None


def sort_reviews(reviews, sort=ReviewSort.NEWEST) -> list:
    """Return ``reviews`` ordered by ``sort`` with deterministic ties."""
    sort = parse_sort(sort)
    key, descending = _PRIMARY_KEYS[sort]

    ordered = sorted(reviews, key=lambda r: str(r.id))
    ordered.sort(key=_created, reverse=True)
    ordered.sort(key=key, reverse=descending)
    return ordered


@dataclass(frozen=True)
class Pagination:
    total: int
    page: int
    limit: int
    total_pages: int

    def to_dict(self) -> dict:
        return asdict(self)


def validate_page(page, limit, max_limit: int) -> tuple[int, int]:
    errors = {}
    if isinstance(page, bool) or not isinstance(page, int) or page < 1:
        errors["page"] = ["Page must be a positive integer"]
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1 or limit > max_limit:
        errors["limit"] = [f"Limit must be between 1 and {max_limit}"]
    if errors:
        raise ValidationError(errors)
    return page, limit


def paginate(items: list, page: int, limit: int) -> tuple[list, Pagination]:
    """Slice one 1-based page out of an already ordered list."""
    total = len(items)
    start = (page - 1) * limit
    pagination = Pagination(
        total=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit) if total else 0,
    )
    return items[start : start + limit], pagination
