"""Abstract repository interfaces (ports) — define the contract, not the implementation."""

from abc import abstractmethod
from datetime import datetime

from app.application.interfaces.tree_repository import TreeRepository
from app.domain.entities import Article, ArticleRevision


class ArticleRepository(TreeRepository[Article]):
    """Port for article persistence — implemented in the infrastructure layer.

    Writes are field-targeted so that publishing, restoring or re-placing an
    article never overwrites a concurrent content edit.
    """

    @abstractmethod
    async def list_by_parent(self, parent_id: str | None, *, include_hidden: bool = False) -> list[Article]:
        """Children of ``parent_id`` (roots when None), newest first.

        Unless ``include_hidden`` is set, only live published articles are returned.
        """
        ...

    @abstractmethod
    async def list_drafts(self, author_id: str) -> list[Article]:
        """Live unpublished articles of ``author_id``, most recently updated first."""
        ...

    @abstractmethod
    async def list_deleted(self) -> list[Article]:
        """All soft-deleted articles, most recently deleted first."""
        ...

    @abstractmethod
    async def count_children(self, parent_id: str) -> int:
        """Number of direct replies in any state."""
        ...

    @abstractmethod
    async def count_by_topic(
        self, topic_id: str, *, published_only: bool = False, include_deleted: bool = False
    ) -> int:
        """Articles referencing ``topic_id``; live ones unless ``include_deleted``."""
        ...

    @abstractmethod
    async def create(self, article: Article) -> Article:
        ...

    @abstractmethod
    async def save_edit(self, article: Article, expected_version: int) -> bool:
        """Persist content and placement only if the stored version is still ``expected_version``.

        ``article.version`` already holds the new version. Returns False when
        another writer got there first; nothing is written in that case.
        """
        ...

    @abstractmethod
    async def set_placement(self, article_id: str, ancestors: list[str], topic_id: str | None) -> None:
        """Rewrite the materialized path (and inherited topic) of one article."""
        ...

    @abstractmethod
    async def set_publication(self, article_id: str, published: bool, published_at: datetime | None) -> None:
        ...

    @abstractmethod
    async def reassign_topic(self, from_topic_id: str, to_topic_id: str | None, *, drafts_only: bool = False) -> int:
        """Point articles at another topic.

        With ``drafts_only`` only live unpublished articles move; otherwise every
        article referencing ``from_topic_id`` does. Returns the number moved.
        """
        ...

    @abstractmethod
    async def add_revision(self, revision: ArticleRevision) -> None:
        ...

    @abstractmethod
    async def list_revisions(self, article_id: str) -> list[ArticleRevision]:
        """Revisions of an article, highest version first."""
        ...
