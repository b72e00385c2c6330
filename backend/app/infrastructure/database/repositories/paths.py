"""Encoding of materialized ancestor lists into an indexed path column."""

from datetime import datetime, timezone

_SEPARATOR = "/"


def encode_path(ancestors: list[str]) -> str:
    """``["a", "b"]`` → ``"/a/b/"``; roots are stored as ``"/"``."""
    return _SEPARATOR + "".join(f"{a}{_SEPARATOR}" for a in ancestors)


def decode_path(path: str | None) -> list[str]:
    if not path:
        return []
    return [segment for segment in path.split(_SEPARATOR) if segment]


def segment(node_id: str) -> str:
    """The substring every descendant's path contains."""
    return f"{_SEPARATOR}{node_id}{_SEPARATOR}"


def as_utc(value: datetime | None) -> datetime | None:
    """SQLite hands back naive datetimes; everything we store is UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)
