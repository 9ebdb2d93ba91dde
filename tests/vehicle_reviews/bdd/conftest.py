"""Shared BDD fixtures and step definitions for vehicle reviews."""

import pytest
from pytest_bdd import given, parsers, then

from tests.vehicle_reviews.helpers import make_review
from vehicle_reviews.review.events import (
    HelpfulVoteRecorded,
    ReviewApproved,
    ReviewRejected,
    ReviewReported,
    ReviewSubmitted,
)

_REVIEW_EVENT_CLASSES = {
    "ReviewSubmitted": ReviewSubmitted,
    "ReviewApproved": ReviewApproved,
    "ReviewRejected": ReviewRejected,
    "ReviewReported": ReviewReported,
    "HelpfulVoteRecorded": HelpfulVoteRecorded,
}


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a pending review", target_fixture="review")
def pending_review():
    return make_review(vehicle_id="veh-bdd", title="Pending BDD review")


@given("an approved review", target_fixture="review")
def approved_review():
    review = make_review(vehicle_id="veh-bdd", title="Approved BDD review")
    review.approve(moderator_id="mod-1")
    review._events.clear()
    return review


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the review status is "{status}"'))
def review_status_is(review, status):
    assert review.status == status


@then(parsers.cfparse("a {event_type} event is raised"))
def review_event_raised(review, event_type):
    event_cls = _REVIEW_EVENT_CLASSES[event_type]
    assert any(
        isinstance(e, event_cls) for e in review._events
    ), f"No {event_type} event found. Events: {[type(e).__name__ for e in review._events]}"


@then("no events are raised")
def no_events_raised(review):
    assert review._events == []

