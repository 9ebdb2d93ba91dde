"""Application tests for the review record store."""

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from sqlalchemy.exc import OperationalError

from tests.vehicle_reviews.helpers import make_review, submit_with_status
from vehicle_reviews.errors import PersistenceError
from vehicle_reviews.review.review import Review, ReviewStatus
from vehicle_reviews.review.sorting import ReviewSort


@pytest.fixture()
def repo():
    return current_domain.repository_for(Review)


class TestCreateAndGet:
    def test_create_then_get(self, repo):
        review = repo.create(make_review(vehicle_id="veh-repo-1"))
        stored = repo.get(review.id)
        assert stored.vehicle_id == "veh-repo-1"
        assert stored.status == "pending"

    def test_get_missing(self, repo):
        with pytest.raises(ObjectNotFoundError):
            repo.fetch("missing")


class TestUpdate:
    def test_partial_merge_keeps_other_fields(self, repo):
        review = repo.create(make_review(title="Original title", rating=2))
        repo.update(review.id, comment="Revised after a year of ownership.")
        stored = repo.get(review.id)
        assert stored.comment == "Revised after a year of ownership."
        assert stored.title == "Original title"
        assert stored.rating == 2

    def test_list_fields_encoded(self, repo):
        review = repo.create(make_review())
        repo.update(review.id, pros=["Updated pro"])
        assert repo.get(review.id).pros_list == ["Updated pro"]

    def test_updated_at_moves(self, repo):
        review = repo.create(make_review())
        updated = repo.update(review.id, title="Retitled")
        assert updated.updated_at >= review.created_at

    def test_immutable_fields_refused(self, repo):
        review = repo.create(make_review())
        with pytest.raises(ValidationError) as exc:
            repo.update(review.id, created_at=None, id="other")
        assert set(exc.value.messages) == {"created_at", "id"}

    @pytest.mark.parametrize(
        "changes",
        [
            {"helpful_count": 99},
            {"unhelpful_count": 0},
            {"status": "approved"},
            {"reported": False},
            {"moderated_by": "user-1"},
        ],
    )
    def test_managed_fields_refused(self, repo, changes):
        review = repo.create(make_review())
        with pytest.raises(ValidationError) as exc:
            repo.update(review.id, **changes)
        assert set(exc.value.messages) == set(changes)
        stored = repo.get(review.id)
        assert (stored.helpful_count, stored.status, stored.reported) == (0, "pending", False)

    def test_unknown_field_refused(self, repo):
        review = repo.create(make_review())
        with pytest.raises(ValidationError) as exc:
            repo.update(review.id, colour="red")
        assert "colour" in exc.value.messages

    def test_update_missing(self, repo):
        with pytest.raises(ObjectNotFoundError):
            repo.update("missing", title="x")


class TestListings:
    def test_list_by_vehicle_filters_status(self, repo, directory):
        approved = submit_with_status("approved", vehicle_id="veh-list")
        submit_with_status("pending", vehicle_id="veh-list")
        submit_with_status("approved", vehicle_id="veh-other")

        items, pagination = repo.list_by_vehicle("veh-list", statuses=[ReviewStatus.APPROVED])
        assert [str(r.id) for r in items] == [approved]
        assert pagination.total == 1

    def test_list_by_vehicle_sorts(self, repo):
        for rating in (2, 5, 3):
            repo.create(make_review(vehicle_id="veh-sort", rating=rating))
        items, _ = repo.list_by_vehicle("veh-sort", sort=ReviewSort.HIGHEST_RATING)
        assert [r.rating for r in items] == [5, 3, 2]

    def test_list_by_author_pages(self, repo):
        for _ in range(5):
            repo.create(make_review(author_id="author-pages"))
        items, pagination = repo.list_by_author("author-pages", page=2, limit=2)
        assert len(items) == 2
        assert pagination.to_dict() == {"total": 5, "page": 2, "limit": 2, "total_pages": 3}

    def test_page_past_end(self, repo):
        repo.create(make_review(author_id="author-end"))
        items, pagination = repo.list_by_author("author-end", page=3, limit=10)
        assert items == []
        assert pagination.total == 1

    def test_fetch_all_crosses_batches(self, repo):
        for _ in range(105):
            repo.create(make_review(vehicle_id="veh-many"))
        assert len(repo.all_for(vehicle_id="veh-many")) == 105

    def test_list_matching_search_is_case_insensitive(self, repo):
        repo.create(make_review(title="Brilliant Roadster"))
        repo.create(make_review(title="Dull commuter"))
        items, _ = repo.list_matching(search="roadSTER")
        assert [r.title for r in items] == ["Brilliant Roadster"]

    def test_list_matching_reported(self, repo):
        flagged = make_review()
        flagged.report(reporter_id="user-1")
        repo.create(flagged)
        repo.create(make_review())
        items, _ = repo.list_matching(reported=True)
        assert [str(r.id) for r in items] == [str(flagged.id)]


class TestStoreFailures:
    def test_store_errors_become_persistence_errors(self, repo, monkeypatch):
        def broken(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("connection refused"))

        monkeypatch.setattr(type(repo), "get", broken)
        with pytest.raises(PersistenceError) as exc:
            repo.fetch("any")
        assert "connection refused" not in str(exc.value)

