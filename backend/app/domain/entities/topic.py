"""Domain entity for the topic taxonomy tree."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import uuid4


@dataclass
class Topic:
    """A node in the topic taxonomy.

    Names are not unique: two topics may share a name under different
    (or even the same) parents.
    """

    name: str
    created_by: str
    id: str = field(default_factory=lambda: str(uuid4()))
    description: str | None = None
    parent_id: str | None = None
    ancestors: list[str] = field(default_factory=list)
    deleted: bool = False
    deleted_at: datetime | None = None
    deleted_by: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def is_created_by(self, user_id: str) -> bool:
        return self.created_by == user_id

    def place(self, parent_id: str | None, ancestors: list[str]) -> None:
        self.parent_id = parent_id
        self.ancestors = list(ancestors)

    def update(
        self,
        name: str | None = None,
        description: str | None = ...,  # type: ignore[assignment]
    ) -> None:
        """Update mutable fields and refresh the updated_at timestamp."""
        if name is not None:
            self.name = name
        if description is not ...:
            self.description = description
        self.updated_at = datetime.now(timezone.utc)

    def mark_deleted(self, deleted_by: str, at: datetime | None = None) -> None:
        self.deleted = True
        self.deleted_at = at or datetime.now(timezone.utc)
        self.deleted_by = deleted_by

    def mark_restored(self) -> None:
        self.deleted = False
        self.deleted_at = None
        self.deleted_by = None
