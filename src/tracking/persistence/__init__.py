"""Persistence adapter abstraction — pluggable storage for tracking records."""

import os

_persistence_instance = None


def get_persistence():
    """Return the configured persistence adapter (singleton).

    Uses the protean repository adapter by default. Set TRACKING_PERSISTENCE
    to "fake" for the in-memory adapter with failure injection.
    """
    global _persistence_instance
    if _persistence_instance is None:
        adapter = os.environ.get("TRACKING_PERSISTENCE", "repository")
        if adapter == "repository":
            from tracking.persistence.repository_adapter import RepositoryPersistence

            _persistence_instance = RepositoryPersistence()
        elif adapter == "fake":
            from tracking.persistence.fake_adapter import FakePersistence

            _persistence_instance = FakePersistence()
        else:
            raise ValueError(f"Unknown persistence adapter: {adapter}")
    return _persistence_instance


def reset_persistence():
    """Reset the persistence singleton (useful for testing)."""
    global _persistence_instance
    _persistence_instance = None
