"""Identifier validation — ids are opaque UUID strings minted by the entities."""

from uuid import UUID

from app.domain.exceptions import InvalidArgumentError


def ensure_valid_id(value: str | None, field_name: str = "id") -> str:
    """Return ``value`` if it is a well-formed UUID string, else raise InvalidArgumentError."""
    if not isinstance(value, str) or not value:
        raise InvalidArgumentError(f"Invalid {field_name}")
    try:
        UUID(value)
    except ValueError:
        raise InvalidArgumentError(f"Invalid {field_name}: '{value}'") from None
    return value


def ensure_optional_id(value: str | None, field_name: str) -> str | None:
    if value is None:
        return None
    return ensure_valid_id(value, field_name)
