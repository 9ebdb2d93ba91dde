"""Pydantic request/response schemas for the Vehicle Reviews API.

These are separate from Protean commands (anti-corruption pattern). The
submission schema is deliberately loose: the submission validator owns the
field rules and reports every problem in one response.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class SubmitReviewRequest(BaseModel):
    author_id: Any = None
    rating: Any = None
    title: Any = None
    comment: Any = None
    pros: Any = None
    cons: Any = None
    recommend: Any = None
    purchase_type: Any = None
    ownership_duration: Any = None
    verified_purchase: Any = None


class VoteRequest(BaseModel):
    voter_id: str
    direction: str  # "helpful" or "unhelpful"


class ReportRequest(BaseModel):
    reporter_id: str


class SetStatusRequest(BaseModel):
    moderator_id: str
    status: str  # "approved" or "rejected"
    notes: str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class PaginationSchema(BaseModel):
    total: int
    page: int
    limit: int
    total_pages: int


class ReviewResponse(BaseModel):
    success: bool = True
    review: dict[str, Any]


class ReviewListResponse(BaseModel):
    success: bool = True
    items: list[dict[str, Any]]
    pagination: PaginationSchema


class StatsResponse(BaseModel):
    success: bool = True
    stats: dict[str, Any]


class VoteResponse(BaseModel):
    success: bool = True
    applied: bool


class SuccessResponse(BaseModel):
    success: bool = True
