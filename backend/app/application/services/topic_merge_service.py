"""Topic merge engine — moves a source topic's articles and subtree under a target."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from app.application.interfaces import ArticleRepository, TopicRepository
from app.domain.entities import Caller, Topic
from app.domain.exceptions import CycleDetectedError, EntityNotFoundError, InvalidArgumentError
from app.domain.identifiers import ensure_valid_id
from app.domain.tree_paths import rebase_ancestors
from app.infrastructure.logging.colored_logger import OperationLogger, OperationStage

logger = logging.getLogger(__name__)
plog = OperationLogger("TopicMergeService")


@dataclass
class MergeStats:
    source_id: str
    target_id: str
    moved_articles: int
    reparented_topics: int
    dry_run: bool


class TopicMergeService:
    """Merges topic S into topic T.

    Articles referencing S are pointed at T; every descendant D of S gets
    ``D.ancestors = T.ancestors + [T] + (D.ancestors after S)``; direct
    children of S become children of T. Duplicate-named children under T
    are left to coexist.

    Each document is written separately. If the request fails part-way, the
    same merge can simply be issued again: already-moved articles no longer
    match S and already-rewritten topics no longer list S as an ancestor.
    """

    def __init__(self, topics: TopicRepository, articles: ArticleRepository):
        self._topics = topics
        self._articles = articles

    async def merge(
        self,
        caller: Caller,
        source_id: str | None,
        target_id: str | None,
        *,
        dry_run: bool = False,
        delete_source: bool = True,
    ) -> MergeStats:
        caller.require_admin()
        if not source_id or not target_id:
            raise InvalidArgumentError("source_id and target_id are required")
        ensure_valid_id(source_id, "source_id")
        ensure_valid_id(target_id, "target_id")
        if source_id == target_id:
            raise InvalidArgumentError("Source and target topics must differ")

        source = await self._load_live(source_id)
        target = await self._load_live(target_id)

        if source.id in target.ancestors:
            raise CycleDetectedError("Cannot merge a topic into one of its own descendants")

        descendants = await self._topics.list_descendants(source.id)
        stats = MergeStats(
            source_id=source.id,
            target_id=target.id,
            moved_articles=await self._articles.count_by_topic(source.id),
            reparented_topics=len(descendants),
            dry_run=dry_run,
        )
        if dry_run:
            logger.info(
                "Merge dry run %s → %s: %d articles, %d topics",
                source.id, target.id, stats.moved_articles, stats.reparented_topics,
            )
            return stats

        with plog.timed_step(OperationStage.MERGE, "Merging topics", source=source.id, target=target.id):
            moved = await self._articles.reassign_topic(source.id, target.id)
            plog.detail("Articles moved", count=moved)

            new_prefix = [*target.ancestors, target.id]
            for descendant in descendants:
                ancestors = rebase_ancestors(descendant.ancestors, source.id, new_prefix)
                parent_id = target.id if descendant.parent_id == source.id else descendant.parent_id
                await self._topics.set_placement(descendant.id, parent_id, ancestors)
            plog.detail("Descendant topics re-rooted", count=len(descendants))

            if delete_source:
                await self._topics.soft_delete_subtree(source.id, caller.id, datetime.now(timezone.utc))
                plog.detail("Source topic deleted", id=source.id)

        plog.stats(moved_articles=stats.moved_articles, reparented_topics=stats.reparented_topics)
        return stats

    async def _load_live(self, topic_id: str) -> Topic:
        topic = await self._topics.get_by_id(topic_id)
        if topic is None or topic.deleted:
            raise EntityNotFoundError("Topic", topic_id)
        return topic
