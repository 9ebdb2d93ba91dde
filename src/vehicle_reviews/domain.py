"""Vehicle Reviews bounded context: owner reviews, moderation, and ratings.

Handles review submission, the moderation lifecycle, helpful/unhelpful
voting backed by a vote ledger, reporting, and rating aggregation for
vehicle listing pages. Users and vehicles are owned by other contexts and
reached only through the lookups in ``vehicle_reviews.directory``.
"""

import threading

import structlog
from protean.domain import Domain
from protean.utils.globals import current_domain

from vehicle_reviews.errors import store_guard

reviews = Domain(name="vehicle_reviews")

logger = structlog.get_logger(__name__)

# Held from the first read of a write to its commit. The memory provider
# commits by replacing the whole store with the unit of work's snapshot, so
# overlapping writers in one process would drop each other's changes.
write_lock = threading.RLock()


def dispatch(command):
    """Process ``command`` synchronously and return the handler's result.

    The handler's unit of work commits after the handler returns, so commit
    failures are translated here rather than inside the handler.
    """
    with write_lock, store_guard(type(command).__name__):
        return current_domain.process(command, asynchronous=False)
