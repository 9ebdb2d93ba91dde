"""FastAPI routes for the Vehicle Reviews bounded context.

Writes translate request schemas into Protean commands and run them through
``dispatch``; votes go to the voting service; reads call the query and
aggregation services directly.
"""

from fastapi import APIRouter, Query

from vehicle_reviews.api.schemas import (
    ReportRequest,
    ReviewListResponse,
    ReviewResponse,
    SetStatusRequest,
    StatsResponse,
    SubmitReviewRequest,
    SuccessResponse,
    VoteRequest,
    VoteResponse,
)
from vehicle_reviews.domain import dispatch
from vehicle_reviews.queries.listing import ReviewQueries
from vehicle_reviews.review.moderation import SetReviewStatus
from vehicle_reviews.review.removal import DeleteReview
from vehicle_reviews.review.reporting import ReportReview
from vehicle_reviews.review.submission import submit_review
from vehicle_reviews.review.voting import vote_on_review
from vehicle_reviews.stats.aggregation import RatingAggregator
from vehicle_reviews.utils.logging import bind_review

vehicle_router = APIRouter(prefix="/vehicles", tags=["reviews"])
author_router = APIRouter(prefix="/authors", tags=["reviews"])
review_router = APIRouter(prefix="/reviews", tags=["reviews"])
moderation_router = APIRouter(prefix="/moderation", tags=["moderation"])


# ---------------------------------------------------------------------------
# Vehicle pages
# ---------------------------------------------------------------------------
@vehicle_router.post("/{vehicle_id}/reviews", status_code=201, response_model=ReviewResponse)
async def create_review(vehicle_id: str, body: SubmitReviewRequest) -> ReviewResponse:
    """Submit a review of a vehicle. It stays pending until moderated."""
    payload = body.model_dump()
    payload["vehicle_id"] = vehicle_id
    review_id = submit_review(payload)
    return ReviewResponse(review=ReviewQueries().review_detail(review_id))


@vehicle_router.get("/{vehicle_id}/reviews", response_model=ReviewListResponse)
async def list_vehicle_reviews(
    vehicle_id: str,
    page: int = 1,
    limit: int | None = None,
    sort: str | None = None,
) -> ReviewListResponse:
    result = ReviewQueries().list_for_vehicle(vehicle_id, page=page, limit=limit, sort=sort)
    return ReviewListResponse(**result)


@vehicle_router.get("/{vehicle_id}/reviews/stats", response_model=StatsResponse)
async def vehicle_review_stats(vehicle_id: str) -> StatsResponse:
    stats = RatingAggregator().stats_for_vehicle(vehicle_id)
    return StatsResponse(stats=stats.to_dict())


# ---------------------------------------------------------------------------
# Author pages
# ---------------------------------------------------------------------------
@author_router.get("/{author_id}/reviews", response_model=ReviewListResponse)
async def list_author_reviews(author_id: str, page: int = 1, limit: int | None = None) -> ReviewListResponse:
    """All of an author's reviews, whatever their status."""
    result = ReviewQueries().list_for_author(author_id, page=page, limit=limit)
    return ReviewListResponse(**result)


# ---------------------------------------------------------------------------
# Single review actions
# ---------------------------------------------------------------------------
@review_router.post("/{review_id}/votes", response_model=VoteResponse)
async def vote_review(review_id: str, body: VoteRequest) -> VoteResponse:
    """Mark a review helpful or unhelpful. Repeated votes are ignored."""
    bind_review(review_id)
    applied = vote_on_review(review_id, body.voter_id, body.direction)
    return VoteResponse(applied=applied)


@review_router.post("/{review_id}/reports", response_model=SuccessResponse)
async def report_review(review_id: str, body: ReportRequest) -> SuccessResponse:
    bind_review(review_id)
    command = ReportReview(review_id=review_id, reporter_id=body.reporter_id)
    dispatch(command)
    return SuccessResponse()


# ---------------------------------------------------------------------------
# Moderation dashboard
# ---------------------------------------------------------------------------
@moderation_router.get("/reviews", response_model=ReviewListResponse)
async def moderation_queue(
    status: str | None = None,
    search: str | None = None,
    sort: str | None = None,
    page: int = 1,
    limit: int | None = None,
) -> ReviewListResponse:
    result = ReviewQueries().list_for_moderation(
        status_filter=status, search=search, sort=sort, page=page, limit=limit
    )
    return ReviewListResponse(**result)


@moderation_router.get("/reviews/{review_id}", response_model=ReviewResponse)
async def moderation_review_detail(review_id: str) -> ReviewResponse:
    bind_review(review_id)
    return ReviewResponse(review=ReviewQueries().review_detail(review_id))


@moderation_router.get("/stats", response_model=StatsResponse)
async def moderation_stats(vehicle_id: str | None = None) -> StatsResponse:
    stats = RatingAggregator().dashboard_stats(vehicle_id=vehicle_id)
    return StatsResponse(stats=stats.to_dict())


@moderation_router.put("/reviews/{review_id}/status", response_model=SuccessResponse)
async def set_review_status(review_id: str, body: SetStatusRequest) -> SuccessResponse:
    """Approve or reject a review."""
    bind_review(review_id)
    command = SetReviewStatus(
        review_id=review_id,
        moderator_id=body.moderator_id,
        status=body.status,
        notes=body.notes,
    )
    dispatch(command)
    return SuccessResponse()


@moderation_router.delete("/reviews/{review_id}", response_model=SuccessResponse)
async def delete_review(review_id: str, moderator_id: str = Query(...)) -> SuccessResponse:
    bind_review(review_id)
    command = DeleteReview(review_id=review_id, moderator_id=moderator_id)
    dispatch(command)
    return SuccessResponse()
