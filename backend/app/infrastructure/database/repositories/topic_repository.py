"""Concrete topic repository backed by SQLAlchemy."""

from datetime import datetime

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces import TopicRepository
from app.domain.entities import Topic
from app.infrastructure.database.models import TopicModel
from app.infrastructure.database.repositories.paths import as_utc, decode_path, encode_path, segment


class SQLAlchemyTopicRepository(TopicRepository):
    """Implements the TopicRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: TopicModel) -> Topic:
        return Topic(
            id=model.id,
            name=model.name,
            description=model.description,
            parent_id=model.parent_id,
            ancestors=decode_path(model.ancestor_path),
            created_by=model.created_by,
            deleted=model.deleted,
            deleted_at=as_utc(model.deleted_at),
            deleted_by=model.deleted_by,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )

    async def _fetch(self, stmt) -> list[Topic]:
        result = await self._session.execute(stmt.execution_options(populate_existing=True))
        return [self._to_entity(row) for row in result.scalars().all()]

    # ── Reads ────────────────────────────────────────────────────────

    async def get_by_id(self, node_id: str) -> Topic | None:
        rows = await self._fetch(select(TopicModel).where(TopicModel.id == node_id))
        return rows[0] if rows else None

    async def get_many(self, topic_ids: list[str]) -> list[Topic]:
        if not topic_ids:
            return []
        return await self._fetch(select(TopicModel).where(TopicModel.id.in_(topic_ids)))

    async def list_active(self) -> list[Topic]:
        stmt = select(TopicModel).where(TopicModel.deleted.is_(False)).order_by(TopicModel.name)
        return await self._fetch(stmt)

    async def list_active_children(self, parent_id: str) -> list[Topic]:
        stmt = (
            select(TopicModel)
            .where(TopicModel.parent_id == parent_id, TopicModel.deleted.is_(False))
            .order_by(TopicModel.name)
        )
        return await self._fetch(stmt)

    async def list_descendants(self, node_id: str) -> list[Topic]:
        stmt = select(TopicModel).where(
            TopicModel.ancestor_path.contains(segment(node_id), autoescape=True)
        )
        return await self._fetch(stmt)

    async def count_active_children(self, parent_id: str) -> int:
        stmt = (
            select(func.count())
            .select_from(TopicModel)
            .where(TopicModel.parent_id == parent_id, TopicModel.deleted.is_(False))
        )
        return (await self._session.execute(stmt)).scalar_one()

    # ── Writes ───────────────────────────────────────────────────────

    async def create(self, topic: Topic) -> Topic:
        model = TopicModel(
            id=topic.id,
            name=topic.name,
            description=topic.description,
            parent_id=topic.parent_id,
            ancestor_path=encode_path(topic.ancestors),
            created_by=topic.created_by,
            deleted=topic.deleted,
            created_at=topic.created_at,
            updated_at=topic.updated_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def update(self, topic: Topic) -> Topic:
        await self._session.execute(
            update(TopicModel)
            .where(TopicModel.id == topic.id)
            .values(
                name=topic.name,
                description=topic.description,
                parent_id=topic.parent_id,
                ancestor_path=encode_path(topic.ancestors),
                updated_at=topic.updated_at,
            )
            .execution_options(synchronize_session=False)
        )
        return topic

    async def set_placement(self, topic_id: str, parent_id: str | None, ancestors: list[str]) -> None:
        await self._session.execute(
            update(TopicModel)
            .where(TopicModel.id == topic_id)
            .values(parent_id=parent_id, ancestor_path=encode_path(ancestors))
            .execution_options(synchronize_session=False)
        )

    async def soft_delete_subtree(self, node_id: str, deleted_by: str, deleted_at: datetime) -> int:
        stmt = (
            update(TopicModel)
            .where(
                or_(
                    TopicModel.id == node_id,
                    TopicModel.ancestor_path.contains(segment(node_id), autoescape=True),
                ),
                TopicModel.deleted.is_(False),
            )
            .values(deleted=True, deleted_at=deleted_at, deleted_by=deleted_by)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount

    async def restore(self, node_id: str, restored_at: datetime) -> None:
        await self._session.execute(
            update(TopicModel)
            .where(TopicModel.id == node_id)
            .values(deleted=False, deleted_at=None, deleted_by=None, updated_at=restored_at)
            .execution_options(synchronize_session=False)
        )

    async def delete(self, node_id: str) -> bool:
        result = await self._session.execute(
            delete(TopicModel)
            .where(TopicModel.id == node_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
