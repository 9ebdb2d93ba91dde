"""Application tests for rating aggregation over the review store."""

import pytest
from protean import current_domain

from tests.vehicle_reviews.helpers import submit, submit_with_status
from vehicle_reviews.review.reporting import ReportReview
from vehicle_reviews.settings import ReviewSettings
from vehicle_reviews.stats.aggregation import RatingAggregator


class TestStatsForVehicle:
    def test_single_approved_review(self, directory):
        submit_with_status("approved", vehicle_id="veh-s1", rating=5, recommend=True)
        stats = RatingAggregator(settings=ReviewSettings()).stats_for_vehicle("veh-s1")
        assert stats.average_rating == 5.0
        assert stats.total_reviews == 1
        assert stats.rating_distribution == {1: 0, 2: 0, 3: 0, 4: 0, 5: 1}
        assert stats.recommend_percentage == 100.0

    def test_five_approved_reviews(self, directory):
        for rating, recommend in [(5, True), (4, True), (3, False), (5, True), (2, False)]:
            submit_with_status("approved", vehicle_id="veh-s2", rating=rating, recommend=recommend)
        stats = RatingAggregator(settings=ReviewSettings()).stats_for_vehicle("veh-s2")
        assert stats.average_rating == pytest.approx(3.8)
        assert stats.recommend_percentage == pytest.approx(60.0)
        assert stats.rating_distribution == {1: 0, 2: 1, 3: 1, 4: 1, 5: 2}

    def test_pending_reviews_ignored(self, directory):
        submit(vehicle_id="veh-s3", rating=1)
        stats = RatingAggregator(settings=ReviewSettings()).stats_for_vehicle("veh-s3")
        assert stats.total_reviews == 0
        assert stats.average_rating == 0

    def test_legacy_mode_counts_everything(self, directory):
        submit(vehicle_id="veh-s4", rating=1)
        submit_with_status("approved", vehicle_id="veh-s4", rating=5)
        stats = RatingAggregator(settings=ReviewSettings(stats_approved_only=False)).stats_for_vehicle("veh-s4")
        assert stats.total_reviews == 2
        assert stats.average_rating == 3.0


class TestDashboardStats:
    def test_counts(self, directory):
        submit_with_status("pending", vehicle_id="veh-d")
        submit_with_status("approved", vehicle_id="veh-d", rating=4)
        rejected = submit_with_status("rejected", vehicle_id="veh-d")
        current_domain.process(ReportReview(review_id=rejected, reporter_id="user-1"), asynchronous=False)

        stats = RatingAggregator(settings=ReviewSettings()).dashboard_stats()
        assert (stats.pending_count, stats.approved_count, stats.rejected_count) == (1, 1, 1)
        assert stats.reported_count == 1
        assert stats.total_reviews == 1
        assert stats.average_rating == 4.0

    def test_scoped_to_vehicle(self, directory):
        submit_with_status("pending", vehicle_id="veh-d1")
        submit_with_status("pending", vehicle_id="veh-d2")
        stats = RatingAggregator(settings=ReviewSettings()).dashboard_stats(vehicle_id="veh-d1")
        assert stats.pending_count == 1
