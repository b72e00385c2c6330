"""Application service (use case) for Article operations.

Composes the tree path resolver, the version guard, the revision log and
the cascade engine. Every method takes the calling identity explicitly.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

from app.application.interfaces import ArticleRepository, TopicRepository, UserDirectory
from app.application.schemas import ArticleCreate, ArticleUpdate
from app.application.services.cascade_engine import CascadeEngine
from app.domain.entities import ROLE_ADMIN, ROLE_EDITOR, Article, Caller, Topic
from app.domain.exceptions import (
    EntityNotFoundError,
    ForbiddenError,
    InvalidArgumentError,
    InvalidStateError,
    VersionConflictError,
)
from app.domain.identifiers import ensure_optional_id, ensure_valid_id
from app.domain.tree_paths import rebase_ancestors, resolve_ancestors
from app.domain.versioning import ensure_current_version
from app.infrastructure.logging.colored_logger import OperationLogger, OperationStage

logger = logging.getLogger(__name__)
plog = OperationLogger("ArticleService")

_TITLE_MAX_LENGTH = 255
UNKNOWN_USER = "Unknown"


@dataclass
class ResolvedRevision:
    """A revision with its editor's display name looked up."""

    version: int
    title: str
    content: str
    updated_at: datetime
    updated_by_id: str
    updated_by_name: str


@dataclass
class DeletedArticleNode:
    article: Article
    children: list["DeletedArticleNode"] = field(default_factory=list)


class ArticleService:
    """Orchestrates article business logic. Depends on the repository ports (DI)."""

    def __init__(
        self,
        articles: ArticleRepository,
        topics: TopicRepository,
        users: UserDirectory,
        unpublish_window: timedelta = timedelta(hours=24),
    ):
        self._articles = articles
        self._topics = topics
        self._users = users
        self._unpublish_window = unpublish_window
        self._cascade: CascadeEngine[Article] = CascadeEngine(articles, "Article")

    # ── Reads ────────────────────────────────────────────────────────

    async def get_article(self, caller: Caller | None, article_id: str) -> Article:
        """Fetch an article the caller is allowed to see.

        Deleted articles are visible to admins only; drafts to their author and admins.
        """
        ensure_valid_id(article_id, "article id")
        article = await self._articles.get_by_id(article_id)
        if article is None or not self._can_view(caller, article):
            raise EntityNotFoundError("Article", article_id)
        return article

    async def list_articles(
        self,
        caller: Caller | None,
        parent_id: str | None = None,
        include_deleted: bool = False,
    ) -> list[Article]:
        if parent_id in (None, "", "root"):
            parent_id = None
        else:
            ensure_valid_id(parent_id, "parent_id")
        include_hidden = include_deleted and caller is not None and caller.is_admin
        return await self._articles.list_by_parent(parent_id, include_hidden=include_hidden)

    async def list_revisions(self, caller: Caller | None, article_id: str) -> list[ResolvedRevision]:
        """Revision history, highest version first, with editor names resolved."""
        article = await self.get_article(caller, article_id)
        revisions = await self._articles.list_revisions(article.id)
        names = await self._users.get_display_names(sorted({r.updated_by for r in revisions}))
        ordered = sorted(revisions, key=lambda r: r.version, reverse=True)
        return [
            ResolvedRevision(
                version=r.version,
                title=r.title,
                content=r.content,
                updated_at=r.updated_at,
                updated_by_id=r.updated_by,
                updated_by_name=names.get(r.updated_by, UNKNOWN_USER),
            )
            for r in ordered
        ]

    async def list_drafts(self, caller: Caller) -> list[Article]:
        return await self._articles.list_drafts(caller.id)

    async def list_deleted(self, caller: Caller) -> list[DeletedArticleNode]:
        """All soft-deleted articles as a forest.

        A deleted article whose parent is not itself in the deleted set is a
        top-level entry.
        """
        caller.require_admin()
        deleted = await self._articles.list_deleted()
        nodes = {a.id: DeletedArticleNode(article=a) for a in deleted}
        roots: list[DeletedArticleNode] = []
        for article in deleted:
            node = nodes[article.id]
            parent = nodes.get(article.parent_id) if article.parent_id else None
            if parent is None:
                roots.append(node)
            else:
                parent.children.append(node)
        return roots

    # ── Create / edit ────────────────────────────────────────────────

    async def create_article(self, caller: Caller, data: ArticleCreate) -> Article:
        """Create a draft, either as a thread root under a topic or as a reply."""
        caller.require_any_role(ROLE_ADMIN, ROLE_EDITOR)
        parent_id = ensure_optional_id(data.parent_id, "parent_id")
        topic_id = ensure_optional_id(data.topic_id, "topic_id")

        if parent_id is None:
            topic = await self._require_live_topic(topic_id)
            ancestors: list[str] = []
            topic_id = topic.id
        else:
            if topic_id is not None:
                raise InvalidArgumentError("Replies inherit the topic of their thread root")
            parent = await self._articles.get_by_id(parent_id)
            ancestors = resolve_ancestors("Article", parent_id, parent)
            topic_id = parent.topic_id

        article = Article(title=data.title, content=data.content, author_id=caller.id)
        article.place(parent_id, ancestors, topic_id)
        created = await self._articles.create(article)
        logger.info("Article %s created by %s (parent=%s, topic=%s)", created.id, caller.id, parent_id, topic_id)
        return created

    async def update_article(self, caller: Caller, article_id: str, data: ArticleUpdate) -> Article:
        """Guarded edit: content changes, moves and topic changes.

        The pre-edit content is appended to the revision log and the version
        goes up by exactly one. A move rewrites the ancestors (and inherited
        topic) of the whole subtree.
        """
        caller.require_any_role(ROLE_ADMIN, ROLE_EDITOR)
        ensure_valid_id(article_id, "article id")
        if data.moves:
            ensure_optional_id(data.parent_id, "parent_id")
        ensure_optional_id(data.topic_id, "topic_id")

        article = await self._get_live(article_id)
        if not (article.is_authored_by(caller.id) or caller.is_admin):
            raise ForbiddenError("You do not have permission to edit this article")
        ensure_current_version("Article", article.id, article.version, data.version)

        old_ancestors, old_topic_id = list(article.ancestors), article.topic_id
        if data.moves or data.sets_topic:
            await self._place(article, data)

        revision = article.snapshot(caller.id)
        expected_version = article.version
        article.apply_edit(title=data.title, content=data.content)

        if not await self._articles.save_edit(article, expected_version):
            current = await self._articles.get_by_id(article.id)
            raise VersionConflictError(
                "Article",
                article.id,
                expected=expected_version,
                actual=current.version if current else expected_version,
            )
        await self._articles.add_revision(revision)

        if article.ancestors != old_ancestors or article.topic_id != old_topic_id:
            await self._rewrite_subtree(article)

        logger.info("Article %s edited by %s → v%d", article.id, caller.id, article.version)
        return article

    async def _place(self, article: Article, data: ArticleUpdate) -> None:
        parent_id = data.parent_id if data.moves else article.parent_id

        if parent_id is None:
            if data.topic_id is not None:
                topic_id = (await self._require_live_topic(data.topic_id)).id
            elif article.is_root:
                topic_id = article.topic_id
            else:
                raise InvalidArgumentError("topic_id is required when a reply becomes a thread root")
            article.place(None, [], topic_id)
            return

        if data.topic_id is not None:
            raise InvalidArgumentError("Replies inherit the topic of their thread root")
        parent = await self._articles.get_by_id(parent_id)
        ancestors = resolve_ancestors("Article", parent_id, parent, moving_id=article.id)
        article.place(parent_id, ancestors, parent.topic_id)

    async def _rewrite_subtree(self, article: Article) -> None:
        descendants = await self._articles.list_descendants(article.id)
        if not descendants:
            return
        prefix = [*article.ancestors, article.id]
        with plog.timed_step(OperationStage.REPARENT, "Re-rooting replies", id=article.id, count=len(descendants)):
            for descendant in descendants:
                ancestors = rebase_ancestors(descendant.ancestors, article.id, prefix)
                await self._articles.set_placement(descendant.id, ancestors, article.topic_id)

    # ── Publication ──────────────────────────────────────────────────

    async def publish_article(self, caller: Caller, article_id: str) -> Article:
        ensure_valid_id(article_id, "article id")
        article = await self._get_live(article_id)
        if not article.is_authored_by(caller.id):
            raise ForbiddenError("You do not have permission to publish this article")
        if article.published:
            return article

        article.mark_published()
        await self._articles.set_publication(article.id, True, article.published_at)
        logger.info("Article %s published", article.id)
        return article

    async def unpublish_article(self, caller: Caller, article_id: str) -> Article:
        """Withdraw a published article within the unpublish window, if nobody replied yet."""
        ensure_valid_id(article_id, "article id")
        article = await self._get_live(article_id)
        if not article.is_authored_by(caller.id):
            raise ForbiddenError("You do not have permission to unpublish this article")
        if not article.published:
            raise InvalidStateError("Article is not published")

        replies = await self._articles.count_children(article.id)
        if replies > 0:
            raise InvalidStateError("Cannot unpublish an article that already has replies", reply_count=replies)

        published_at = article.published_at or article.updated_at or article.created_at
        if datetime.now(timezone.utc) - published_at > self._unpublish_window:
            hours = int(self._unpublish_window.total_seconds() // 3600)
            raise InvalidStateError(f"Unpublishing window has passed ({hours} hours after publishing)")

        article.mark_unpublished()
        await self._articles.set_publication(article.id, False, None)
        logger.info("Article %s unpublished", article.id)
        return article

    # ── Drafts ───────────────────────────────────────────────────────

    async def delete_draft(self, caller: Caller, article_id: str) -> None:
        """Hard-delete the caller's own unpublished draft.

        Soft-deleted articles are not drafts; only the admin purge removes them.
        A draft that already has replies cannot be removed.
        """
        ensure_valid_id(article_id, "article id")
        article = await self._get_live(article_id)
        if not article.is_authored_by(caller.id):
            raise ForbiddenError("You do not have permission to delete this draft")
        if article.published:
            raise InvalidStateError("Cannot delete a published article")
        replies = await self._articles.count_children(article.id)
        if replies > 0:
            raise InvalidStateError("Cannot delete a draft that already has replies", reply_count=replies)
        await self._articles.delete(article.id)
        logger.info("Draft %s deleted by its author", article.id)

    async def duplicate_to_draft(self, caller: Caller, article_id: str) -> Article:
        """Copy a published article into a new draft under the same parent."""
        ensure_valid_id(article_id, "article id")
        article = await self._get_live(article_id)
        if not article.is_authored_by(caller.id):
            raise ForbiddenError("You do not have permission to duplicate this article")
        if not article.published:
            raise InvalidStateError("Only published articles can be duplicated into drafts")

        parent = await self._articles.get_by_id(article.parent_id) if article.parent_id else None
        ancestors = resolve_ancestors("Article", article.parent_id, parent)
        title = f"Copy of {article.title or 'Untitled'}"[:_TITLE_MAX_LENGTH]

        draft = Article(title=title, content=article.content, author_id=caller.id)
        draft.place(article.parent_id, ancestors, parent.topic_id if parent else article.topic_id)
        return await self._articles.create(draft)

    # ── Delete / restore ─────────────────────────────────────────────

    async def delete_article(self, caller: Caller, article_id: str) -> int:
        """Soft-delete an article and all of its replies. Returns how many were newly deleted."""
        caller.require_admin()
        ensure_valid_id(article_id, "article id")
        article = await self._articles.get_by_id(article_id)
        if article is None:
            raise EntityNotFoundError("Article", article_id)
        return await self._cascade.soft_delete(article, caller)

    async def restore_article(self, caller: Caller, article_id: str, restore_children: bool = False) -> Article:
        """Restore an article and its ancestor chain (republishing each), optionally its subtree."""
        caller.require_admin()
        ensure_valid_id(article_id, "article id")
        article = await self._articles.get_by_id(article_id)
        if article is None:
            raise EntityNotFoundError("Article", article_id)
        await self._cascade.restore(article, restore_children=restore_children)
        return await self._articles.get_by_id(article_id)

    async def permanently_delete_article(self, caller: Caller, article_id: str) -> None:
        caller.require_admin()
        ensure_valid_id(article_id, "article id")
        article = await self._articles.get_by_id(article_id)
        if article is None:
            raise EntityNotFoundError("Article", article_id)
        await self._cascade.permanent_delete(article)

    # ── Helpers ──────────────────────────────────────────────────────

    async def _get_live(self, article_id: str) -> Article:
        article = await self._articles.get_by_id(article_id)
        if article is None or article.deleted:
            raise EntityNotFoundError("Article", article_id)
        return article

    async def _require_live_topic(self, topic_id: str | None) -> Topic:
        if topic_id is None:
            raise InvalidArgumentError("topic_id is required for thread root articles")
        topic = await self._topics.get_by_id(topic_id)
        if topic is None or topic.deleted:
            raise EntityNotFoundError("Topic", topic_id)
        return topic

    @staticmethod
    def _can_view(caller: Caller | None, article: Article) -> bool:
        is_admin = caller is not None and caller.is_admin
        if article.deleted:
            return is_admin
        if not article.published:
            return is_admin or (caller is not None and article.is_authored_by(caller.id))
        return True
