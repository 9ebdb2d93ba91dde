"""In-memory directory for development and testing.

Holds users, vehicles and moderators in dictionaries. ``fail_lookups`` makes
profile and vehicle lookups raise, which exercises the degraded listing path.
"""

from vehicle_reviews.directory.port import AuthorSummary, ReviewDirectory, VehicleSummary


class LookupUnavailable(RuntimeError):
    """Raised by the fake when lookups are configured to fail."""


class InMemoryDirectory(ReviewDirectory):
    def __init__(self) -> None:
        self.users: dict[str, AuthorSummary] = {}
        self.vehicles: dict[str, VehicleSummary] = {}
        self.moderators: set[str] = set()
        self.fail_lookups: bool = False

    def add_user(self, user_id, display_name: str, avatar: str | None = None) -> AuthorSummary:
        profile = AuthorSummary(id=str(user_id), display_name=display_name, avatar=avatar)
        self.users[str(user_id)] = profile
        return profile

    def add_vehicle(
        self,
        vehicle_id,
        title: str,
        slug: str | None = None,
        thumbnail: str | None = None,
    ) -> VehicleSummary:
        vehicle = VehicleSummary(id=str(vehicle_id), title=title, slug=slug, thumbnail=thumbnail)
        self.vehicles[str(vehicle_id)] = vehicle
        return vehicle

    def grant_moderator(self, user_id) -> None:
        self.moderators.add(str(user_id))

    def revoke_moderator(self, user_id) -> None:
        self.moderators.discard(str(user_id))

    def get_profile(self, user_id) -> AuthorSummary | None:
        if self.fail_lookups:
            raise LookupUnavailable("User directory unavailable")
        return self.users.get(str(user_id))

    def get_vehicle(self, vehicle_id) -> VehicleSummary | None:
        if self.fail_lookups:
            raise LookupUnavailable("Vehicle directory unavailable")
        return self.vehicles.get(str(vehicle_id))

    def is_moderator(self, user_id) -> bool:
        if user_id is None:
            return False
        return str(user_id) in self.moderators
