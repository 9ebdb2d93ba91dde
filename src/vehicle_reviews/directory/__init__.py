"""Directory factory.

Provides get_directory() / set_directory() to swap implementations. The
adapter is picked by ``REVIEWS_DIRECTORY_ADAPTER``; only ``memory`` ships
with this package, production wires its own adapter through
``set_directory()`` at startup.
"""

import os

from vehicle_reviews.directory.fake_adapter import InMemoryDirectory
from vehicle_reviews.directory.port import ReviewDirectory

_ADAPTERS = {
    "memory": InMemoryDirectory,
}

_current_directory: ReviewDirectory | None = None


def get_directory() -> ReviewDirectory:
    """Return the current directory. Defaults to the configured adapter."""
    global _current_directory
    if _current_directory is None:
        name = os.environ.get("REVIEWS_DIRECTORY_ADAPTER", "memory").strip().lower()
        if name not in _ADAPTERS:
            raise ValueError(f"Unknown REVIEWS_DIRECTORY_ADAPTER {name!r}; expected one of {sorted(_ADAPTERS)}")
        _current_directory = _ADAPTERS[name]()
    return _current_directory


def set_directory(directory: ReviewDirectory) -> None:
    """Override the active directory (useful for tests)."""
    global _current_directory
    _current_directory = directory


def reset_directory() -> None:
    """Reset to the default directory."""
    global _current_directory
    _current_directory = None
