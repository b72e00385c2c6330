"""Application service for the topic taxonomy."""

import logging
from dataclasses import dataclass, field

from app.application.interfaces import ArticleRepository, TopicRepository
from app.application.schemas import TopicCreate, TopicUpdate
from app.application.services.cascade_engine import CascadeEngine
from app.domain.entities import ROLE_ADMIN, ROLE_EDITOR, Caller, Topic
from app.domain.exceptions import EntityNotFoundError, ForbiddenError, InvalidStateError
from app.domain.identifiers import ensure_optional_id, ensure_valid_id
from app.domain.tree_paths import rebase_ancestors, resolve_ancestors

logger = logging.getLogger(__name__)


@dataclass
class TopicSummary:
    topic: Topic
    article_count: int


@dataclass
class TopicDetail:
    topic: Topic
    article_count: int
    children: list[TopicSummary] = field(default_factory=list)


class TopicService:
    """Create, edit, move and delete topics. Merging lives in TopicMergeService."""

    def __init__(self, topics: TopicRepository, articles: ArticleRepository):
        self._topics = topics
        self._articles = articles
        self._cascade: CascadeEngine[Topic] = CascadeEngine(topics, "Topic")

    # ── Reads ────────────────────────────────────────────────────────

    async def list_topics(self) -> list[TopicSummary]:
        topics = await self._topics.list_active()
        return [await self._summarize(t) for t in topics]

    async def get_topic(self, topic_id: str) -> TopicDetail:
        topic = await self._get_live(topic_id)
        children = await self._topics.list_active_children(topic.id)
        return TopicDetail(
            topic=topic,
            article_count=await self._published_count(topic.id),
            children=[await self._summarize(c) for c in children],
        )

    async def get_topic_path(self, topic_id: str) -> list[Topic]:
        """Breadcrumb from the root topic down to ``topic_id``."""
        topic = await self._get_live(topic_id)
        by_id = {t.id: t for t in await self._topics.get_many(topic.ancestors)}
        return [by_id[a] for a in topic.ancestors if a in by_id] + [topic]

    # ── Writes ───────────────────────────────────────────────────────

    async def create_topic(self, caller: Caller, data: TopicCreate) -> Topic:
        caller.require_any_role(ROLE_ADMIN, ROLE_EDITOR)
        parent_id = ensure_optional_id(data.parent_id, "parent_id")
        parent = await self._topics.get_by_id(parent_id) if parent_id else None
        ancestors = resolve_ancestors("Topic", parent_id, parent)

        topic = Topic(name=data.name, description=data.description, created_by=caller.id)
        topic.place(parent_id, ancestors)
        created = await self._topics.create(topic)
        logger.info("Topic %s ('%s') created by %s", created.id, created.name, caller.id)
        return created

    async def update_topic(self, caller: Caller, topic_id: str, data: TopicUpdate) -> Topic:
        """Rename, re-describe or move a topic; a move re-roots its whole subtree."""
        caller.require_any_role(ROLE_ADMIN, ROLE_EDITOR)
        ensure_valid_id(topic_id, "topic id")
        if data.moves:
            ensure_optional_id(data.parent_id, "parent_id")

        topic = await self._get_live(topic_id)
        self._require_admin_or_creator(caller, topic, "update")

        old_ancestors = list(topic.ancestors)
        if data.moves:
            parent = await self._topics.get_by_id(data.parent_id) if data.parent_id else None
            ancestors = resolve_ancestors("Topic", data.parent_id, parent, moving_id=topic.id)
            topic.place(data.parent_id, ancestors)

        if data.sets_description:
            topic.update(name=data.name, description=data.description)
        else:
            topic.update(name=data.name)
        updated = await self._topics.update(topic)

        if topic.ancestors != old_ancestors:
            prefix = [*topic.ancestors, topic.id]
            for descendant in await self._topics.list_descendants(topic.id):
                ancestors = rebase_ancestors(descendant.ancestors, topic.id, prefix)
                await self._topics.set_placement(descendant.id, descendant.parent_id, ancestors)
            logger.info("Topic %s moved under %s", topic.id, topic.parent_id)
        return updated

    async def delete_topic(self, caller: Caller, topic_id: str) -> int:
        """Soft-delete an empty topic.

        Blocked while published articles or live child topics reference it.
        Drafts filed under the topic move to its parent (or to no topic).
        """
        caller.require_any_role(ROLE_ADMIN, ROLE_EDITOR)
        ensure_valid_id(topic_id, "topic id")
        topic = await self._get_live(topic_id)
        self._require_admin_or_creator(caller, topic, "delete")

        published = await self._published_count(topic.id)
        if published > 0:
            raise InvalidStateError(
                "Cannot delete a topic that still has published articles",
                article_count=published,
            )
        children = await self._topics.count_active_children(topic.id)
        if children > 0:
            raise InvalidStateError(
                "Cannot delete a topic that still has child topics",
                child_count=children,
            )

        moved = await self._articles.reassign_topic(topic.id, topic.parent_id, drafts_only=True)
        if moved:
            logger.info("Moved %d draft(s) from topic %s to %s", moved, topic.id, topic.parent_id)
        return await self._cascade.soft_delete(topic, caller)

    async def restore_topic(self, caller: Caller, topic_id: str, restore_children: bool = False) -> Topic:
        caller.require_admin()
        ensure_valid_id(topic_id, "topic id")
        topic = await self._topics.get_by_id(topic_id)
        if topic is None:
            raise EntityNotFoundError("Topic", topic_id)
        await self._cascade.restore(topic, restore_children=restore_children)
        return await self._topics.get_by_id(topic_id)

    async def permanently_delete_topic(self, caller: Caller, topic_id: str) -> None:
        caller.require_admin()
        ensure_valid_id(topic_id, "topic id")
        topic = await self._topics.get_by_id(topic_id)
        if topic is None:
            raise EntityNotFoundError("Topic", topic_id)
        if topic.deleted:
            referencing = await self._articles.count_by_topic(topic.id, include_deleted=True)
            if referencing > 0:
                raise InvalidStateError(
                    "Cannot permanently delete a topic that articles still reference",
                    article_count=referencing,
                )
        await self._cascade.permanent_delete(topic)

    # ── Helpers ──────────────────────────────────────────────────────

    async def _get_live(self, topic_id: str) -> Topic:
        ensure_valid_id(topic_id, "topic id")
        topic = await self._topics.get_by_id(topic_id)
        if topic is None or topic.deleted:
            raise EntityNotFoundError("Topic", topic_id)
        return topic

    async def _published_count(self, topic_id: str) -> int:
        return await self._articles.count_by_topic(topic_id, published_only=True)

    async def _summarize(self, topic: Topic) -> TopicSummary:
        return TopicSummary(topic=topic, article_count=await self._published_count(topic.id))

    @staticmethod
    def _require_admin_or_creator(caller: Caller, topic: Topic, action: str) -> None:
        if caller.is_admin or topic.is_created_by(caller.id):
            return
        raise ForbiddenError(f"Only admins or the topic's creator can {action} it")
