import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture

from vehicle_reviews.directory import reset_directory, set_directory
from vehicle_reviews.directory.fake_adapter import InMemoryDirectory
from vehicle_reviews.settings import reset_settings


@pytest.fixture(scope="session")
def reviews_bed():
    from vehicle_reviews.domain import reviews
    from vehicle_reviews.utils.db import drop_db, setup_db

    bed = DomainFixture(reviews)
    bed.setup()
    setup_db(reviews)
    yield bed
    drop_db(reviews)
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(reviews_bed):
    with reviews_bed.domain_context():
        yield

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        # Drain event stores
        current_domain.event_store.store._data_reset()

    reset_settings()
    reset_directory()


@pytest.fixture()
def directory():
    """In-memory users, vehicles and a moderator called ``mod-1``."""
    directory = InMemoryDirectory()
    directory.grant_moderator("mod-1")
    set_directory(directory)
    return directory
