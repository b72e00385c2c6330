"""Domain entities for threaded articles and their revision history."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import uuid4


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ArticleRevision:
    """Immutable snapshot of an article's content before an accepted edit."""

    article_id: str
    version: int
    title: str
    content: str
    updated_by: str
    updated_at: datetime = field(default_factory=_utcnow)


@dataclass
class Article:
    """A node in a reply tree.

    ``ancestors`` is the materialized path from the thread root down to the
    direct parent; it is written whenever the article is placed and never
    recomputed on read. ``topic_id`` is chosen on thread roots and copied
    onto every reply of that thread.
    """

    title: str
    content: str
    author_id: str
    id: str = field(default_factory=lambda: str(uuid4()))
    parent_id: str | None = None
    ancestors: list[str] = field(default_factory=list)
    topic_id: str | None = None
    version: int = 1
    published: bool = False
    published_at: datetime | None = None
    deleted: bool = False
    deleted_at: datetime | None = None
    deleted_by: str | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def is_authored_by(self, user_id: str) -> bool:
        return self.author_id == user_id

    def place(self, parent_id: str | None, ancestors: list[str], topic_id: str | None) -> None:
        """Attach the article under ``parent_id`` with a freshly resolved path."""
        self.parent_id = parent_id
        self.ancestors = list(ancestors)
        self.topic_id = topic_id

    def snapshot(self, editor_id: str) -> ArticleRevision:
        """Capture the current content as a revision attributed to ``editor_id``."""
        return ArticleRevision(
            article_id=self.id,
            version=self.version,
            title=self.title,
            content=self.content,
            updated_by=editor_id,
        )

    def apply_edit(self, title: str | None = None, content: str | None = None) -> None:
        """Update content fields, bump the version and refresh updated_at."""
        if title is not None:
            self.title = title
        if content is not None:
            self.content = content
        self.version += 1
        self.updated_at = _utcnow()

    def mark_published(self, at: datetime | None = None) -> None:
        self.published = True
        self.published_at = at or _utcnow()

    def mark_unpublished(self) -> None:
        self.published = False
        self.published_at = None

    def mark_deleted(self, deleted_by: str, at: datetime | None = None) -> None:
        """Soft-delete; a deleted article is never published."""
        self.deleted = True
        self.deleted_at = at or _utcnow()
        self.deleted_by = deleted_by
        self.mark_unpublished()

    def mark_restored(self, at: datetime | None = None) -> None:
        """Clear deletion fields and republish so the node stays navigable."""
        self.deleted = False
        self.deleted_at = None
        self.deleted_by = None
        self.mark_published(at)
