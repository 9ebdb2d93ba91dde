"""Error taxonomy for the review subsystem.

Field-level input problems use Protean's ``ValidationError`` and missing
records use Protean's ``ObjectNotFoundError`` (exported here as
``NotFoundError``), so domain code raises the same exceptions the framework
raises. The remaining failure modes get their own types.
"""

from contextlib import contextmanager

import structlog
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, TransactionError
from sqlalchemy.exc import SQLAlchemyError

logger = structlog.get_logger(__name__)

NotFoundError = ObjectNotFoundError


class ReviewsError(Exception):
    """Base class for review subsystem errors."""


class AuthorizationError(ReviewsError):
    """The caller is not allowed to perform a moderation action."""

    def __init__(self, user_id, action: str):
        self.user_id = str(user_id) if user_id is not None else None
        self.action = action
        super().__init__(f"User {self.user_id} is not allowed to {action}")


class ConflictError(ReviewsError):
    """A write collided with an existing record (e.g. a repeated vote)."""


class PersistenceError(ReviewsError):
    """The review store was unreachable, timed out, or kept conflicting."""

    def __init__(self, operation: str, message: str = "Review store unavailable"):
        self.operation = operation
        super().__init__(f"{message} during {operation}")


@contextmanager
def store_guard(operation: str, **context):
    """Translate store-level failures into ``PersistenceError``.

    Covers driver errors raised while reading or writing, and the
    ``TransactionError`` / ``ExpectedVersionError`` a unit of work raises when
    its commit fails.

    The original exception is logged with ``context`` and chained, but never
    leaks into the message returned to callers.
    """
    try:
        yield
    except (SQLAlchemyError, ConnectionError, TimeoutError, TransactionError, ExpectedVersionError) as exc:
        logger.error(
            "Review store call failed",
            operation=operation,
            error_type=type(exc).__name__,
            error=str(exc),
            **context,
        )
        raise PersistenceError(operation) from exc
