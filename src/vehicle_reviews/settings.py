"""Runtime settings for the review subsystem.

Values come from environment variables so deployments can tune them without
touching the domain configuration. ``get_settings()`` caches the parsed
values; tests swap them with ``set_settings()`` / ``reset_settings()``.
"""

import os
from dataclasses import dataclass

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


def _env_int(name: str, default: int, minimum: int = 1) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    value = int(raw)
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return value


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    value = float(raw)
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value}")
    return value


@dataclass(frozen=True)
class ReviewSettings:
    """Tunable behaviour of the review subsystem."""

    # Public statistics only count approved reviews. Turning this off restores
    # the legacy status-blind aggregation.
    stats_approved_only: bool = True
    # Public vehicle listings only show approved reviews.
    public_approved_only: bool = True
    vote_max_attempts: int = 5
    vote_retry_backoff: float = 0.01
    default_page_size: int = 10
    max_page_size: int = 50

    @classmethod
    def from_env(cls) -> "ReviewSettings":
        defaults = cls()
        settings = cls(
            stats_approved_only=_env_bool("REVIEWS_STATS_APPROVED_ONLY", defaults.stats_approved_only),
            public_approved_only=_env_bool("REVIEWS_PUBLIC_APPROVED_ONLY", defaults.public_approved_only),
            vote_max_attempts=_env_int("REVIEWS_VOTE_MAX_ATTEMPTS", defaults.vote_max_attempts),
            vote_retry_backoff=_env_float("REVIEWS_VOTE_RETRY_BACKOFF", defaults.vote_retry_backoff),
            default_page_size=_env_int("REVIEWS_DEFAULT_PAGE_SIZE", defaults.default_page_size),
            max_page_size=_env_int("REVIEWS_MAX_PAGE_SIZE", defaults.max_page_size),
        )
        if settings.default_page_size > settings.max_page_size:
            raise ValueError("REVIEWS_DEFAULT_PAGE_SIZE cannot exceed REVIEWS_MAX_PAGE_SIZE")
        return settings


_current_settings: ReviewSettings | None = None


def get_settings() -> ReviewSettings:
    """Return the active settings, reading the environment on first use."""
    global _current_settings
    if _current_settings is None:
        _current_settings = ReviewSettings.from_env()
    return _current_settings


def set_settings(settings: ReviewSettings) -> None:
    """Override the active settings (useful for tests)."""
    global _current_settings
    _current_settings = settings


def reset_settings() -> None:
    """Drop cached settings so the environment is read again."""
    global _current_settings
    _current_settings = None
