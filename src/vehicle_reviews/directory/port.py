"""Lookup ports for data owned by other contexts.

Users, vehicles and moderator rights live outside the review context. The
review code only ever asks these narrow questions, so an adapter over the
user service, the listing service, or an in-memory fixture can be swapped in
without touching domain or application code.
"""

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class AuthorSummary:
    """Public face of a review author."""

    id: str
    display_name: str
    avatar: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class VehicleSummary:
    """Enough of a vehicle listing to link to it from the moderation queue."""

    id: str
    title: str
    slug: str | None = None
    thumbnail: str | None = None

    def to_dict(self) -> dict:
        return asdict(self)


class UserProfileLookup(ABC):
    @abstractmethod
    def get_profile(self, user_id: str) -> AuthorSummary | None:
        """Return the author summary, or None for unknown users."""
        ...


class VehicleSummaryLookup(ABC):
    @abstractmethod
    def get_vehicle(self, vehicle_id: str) -> VehicleSummary | None:
        """Return the vehicle summary, or None for unknown vehicles."""
        ...


class ModeratorRoster(ABC):
    @abstractmethod
    def is_moderator(self, user_id: str) -> bool:
        """Whether the user may approve, reject and delete reviews."""
        ...


class ReviewDirectory(UserProfileLookup, VehicleSummaryLookup, ModeratorRoster):
    """A single adapter answering all three lookups."""
