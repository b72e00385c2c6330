"""Optimistic version guard.

There is no row locking: concurrent editors race and the loser observes a
``VersionConflictError``. The guard only compares; the caller applies the
change and bumps the version in the same write.
"""

from app.domain.exceptions import InvalidArgumentError, VersionConflictError


def ensure_current_version(entity_type: str, entity_id: str, stored: int, expected: int | None) -> None:
    """Reject a write whose ``expected`` version is not the stored one."""
    if expected is None or isinstance(expected, bool) or not isinstance(expected, int):
        raise InvalidArgumentError("version is required for optimistic locking")
    if stored != expected:
        raise VersionConflictError(entity_type, entity_id, expected=expected, actual=stored)
