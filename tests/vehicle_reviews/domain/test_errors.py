"""Tests for the error taxonomy and store failure translation."""

import pytest
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, TransactionError
from sqlalchemy.exc import IntegrityError, OperationalError

from vehicle_reviews.errors import AuthorizationError, NotFoundError, PersistenceError, store_guard


class TestStoreGuard:
    @pytest.mark.parametrize(
        "error",
        [
            OperationalError("SELECT 1", {}, Exception("server closed the connection")),
            IntegrityError("INSERT", {}, Exception("duplicate key")),
            ConnectionError("refused"),
            TimeoutError("timed out"),
        ],
    )
    def test_store_failures_translated(self, error):
        with pytest.raises(PersistenceError) as exc:
            with store_guard("list_reviews", vehicle_id="v-1"):
                raise error
        assert exc.value.operation == "list_reviews"
        assert exc.value.__cause__ is error

    def test_failed_commit_translated(self):
        cause = OperationalError("COMMIT", {}, Exception("server closed the connection"))
        with pytest.raises(PersistenceError) as exc:
            with store_guard("ReportReview"):
                raise TransactionError("Failed to commit transaction") from cause
        assert exc.value.operation == "ReportReview"
        assert exc.value.__cause__.__cause__ is cause

    def test_stale_version_at_commit_translated(self):
        with pytest.raises(PersistenceError):
            with store_guard("SetReviewStatus"):
                raise ExpectedVersionError("Wrong expected version 2 (DB version 3)")

    def test_details_not_in_message(self):
        with pytest.raises(PersistenceError) as exc:
            with store_guard("get_review"):
                raise ConnectionError("password=hunter2")
        assert "hunter2" not in str(exc.value)

    def test_domain_errors_pass_through(self):
        with pytest.raises(ObjectNotFoundError):
            with store_guard("get_review"):
                raise ObjectNotFoundError({"_entity": "Review not found"})


class TestTaxonomy:
    def test_not_found_is_protean_error(self):
        assert NotFoundError is ObjectNotFoundError

    def test_authorization_error_names_user_and_action(self):
        error = AuthorizationError("user-1", "delete reviews")
        assert error.user_id == "user-1"
        assert "delete reviews" in str(error)
