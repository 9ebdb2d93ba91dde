"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state; nothing is shared between
users. State keeps the IDs returned by creation endpoints so follow-up
requests can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class ReviewerState:
    """Tracks state for a single simulated reviewer."""

    author_id: str | None = None
    vehicle_id: str | None = None
    review_ids: list[str] = field(default_factory=list)


@dataclass
class VoteStormState:
    """Tracks the shared review hammered by one vote-storm user."""

    review_id: str | None = None
    author_id: str | None = None
    votes_sent: int = 0
    votes_applied: int = 0
