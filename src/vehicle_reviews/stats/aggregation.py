"""Rating aggregation for vehicle pages and the moderation dashboard.

Statistics are recomputed from the review store on every read. Public
figures only count approved reviews unless ``stats_approved_only`` is turned
off; the dashboard's status counts always cover every review.
"""

from dataclasses import asdict, dataclass, field

import structlog
from protean.utils.globals import current_domain

from vehicle_reviews.review.review import Review, ReviewStatus
from vehicle_reviews.settings import get_settings

logger = structlog.get_logger(__name__)


def _default_distribution() -> dict[int, int]:
    return {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}


@dataclass(frozen=True)
class ReviewStats:
    average_rating: float = 0.0
    total_reviews: int = 0
    rating_distribution: dict[int, int] = field(default_factory=_default_distribution)
    recommend_percentage: float = 0.0

    @classmethod
    def empty(cls) -> "ReviewStats":
        return cls()

    def to_dict(self) -> dict:
        data = asdict(self)
        data["rating_distribution"] = {str(k): v for k, v in self.rating_distribution.items()}
        return data


@dataclass(frozen=True)
class DashboardStats:
    average_rating: float = 0.0
    total_reviews: int = 0
    rating_distribution: dict[int, int] = field(default_factory=_default_distribution)
    recommend_percentage: float = 0.0
    pending_count: int = 0
    approved_count: int = 0
    rejected_count: int = 0
    reported_count: int = 0

    def to_dict(self) -> dict:
        data = asdict(self)
        data["rating_distribution"] = {str(k): v for k, v in self.rating_distribution.items()}
        return data


def summarize(reviews) -> ReviewStats:
    """Compute rating figures over exactly the given reviews."""
    reviews = list(reviews)
    total = len(reviews)
    if total == 0:
        return ReviewStats.empty()

    distribution = _default_distribution()
    rating_sum = 0
    recommended = 0
    for review in reviews:
        distribution[review.rating] += 1
        rating_sum += review.rating
        if review.recommend:
            recommended += 1

    return ReviewStats(
        average_rating=rating_sum / total,
        total_reviews=total,
        rating_distribution=distribution,
        recommend_percentage=100 * recommended / total,
    )


class RatingAggregator:
    def __init__(self, repository=None, settings=None):
        self._repository = repository
        self.settings = settings or get_settings()

    @property
    def repository(self):
        if self._repository is None:
            return current_domain.repository_for(Review)
        return self._repository

    def _eligible(self, reviews):
        if not self.settings.stats_approved_only:
            return list(reviews)
        return [r for r in reviews if r.status == ReviewStatus.APPROVED.value]

    def stats_for_vehicle(self, vehicle_id) -> ReviewStats:
        reviews = self.repository.all_for(vehicle_id=vehicle_id)
        stats = summarize(self._eligible(reviews))
        logger.debug("Vehicle stats computed", vehicle_id=str(vehicle_id), total_reviews=stats.total_reviews)
        return stats

    def dashboard_stats(self, vehicle_id=None) -> DashboardStats:
        """Moderation dashboard figures, global when no vehicle is given."""
        reviews = self.repository.all_for(vehicle_id=vehicle_id)
        stats = summarize(self._eligible(reviews))

        counts = {status.value: 0 for status in ReviewStatus}
        reported = 0
        for review in reviews:
            counts[review.status] = counts.get(review.status, 0) + 1
            if review.reported:
                reported += 1

        return DashboardStats(
            average_rating=stats.average_rating,
            total_reviews=stats.total_reviews,
            rating_distribution=stats.rating_distribution,
            recommend_percentage=stats.recommend_percentage,
            pending_count=counts[ReviewStatus.PENDING.value],
            approved_count=counts[ReviewStatus.APPROVED.value],
            rejected_count=counts[ReviewStatus.REJECTED.value],
            reported_count=reported,
        )
