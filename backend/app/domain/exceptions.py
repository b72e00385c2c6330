"""Domain-specific exceptions — framework-independent.

Every error the hierarchy engine can raise derives from ``HierarchyError``
and carries a stable ``code`` so the presentation layer can map it to a
transport status without inspecting messages.
"""

from typing import Any


class HierarchyError(Exception):
    """Base class for all content-hierarchy errors."""

    code = "hierarchy_error"

    def __init__(self, message: str, **details: Any):
        self.message = message
        self.details = details
        super().__init__(message)


class InvalidArgumentError(HierarchyError):
    """Raised for malformed or missing input, before any lookup happens."""

    code = "invalid_argument"


class EntityNotFoundError(HierarchyError):
    """Raised when a requested entity does not exist (or is soft-deleted where a live one is required)."""

    code = "not_found"

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class ForbiddenError(HierarchyError):
    """Raised when a role or ownership check fails."""

    code = "forbidden"


class VersionConflictError(HierarchyError):
    """Raised when a caller edits with a stale version number."""

    code = "version_conflict"

    def __init__(self, entity_type: str, entity_id: str, expected: int, actual: int):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{entity_type} '{entity_id}' has been modified (version {actual}, "
            f"got {expected}). Refresh and retry.",
            current_version=actual,
        )


class InvalidStateError(HierarchyError):
    """Raised when an action is not valid for the node's current state."""

    code = "invalid_state"


class CycleDetectedError(HierarchyError):
    """Raised when a move or merge would make a node its own descendant."""

    code = "cycle_detected"
