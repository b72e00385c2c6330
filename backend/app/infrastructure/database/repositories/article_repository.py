"""Concrete repository implementation backed by SQLAlchemy."""

from datetime import datetime

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces import ArticleRepository
from app.domain.entities import Article, ArticleRevision
from app.infrastructure.database.models import ArticleModel, ArticleRevisionModel
from app.infrastructure.database.repositories.paths import as_utc, decode_path, encode_path, segment


class SQLAlchemyArticleRepository(ArticleRepository):
    """Implements the ArticleRepository port using SQLAlchemy async sessions.

    Bulk writes go straight to the table (no identity-map synchronisation),
    so every read refreshes already-loaded rows.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: ArticleModel) -> Article:
        """Map ORM model → domain entity."""
        return Article(
            id=model.id,
            title=model.title,
            content=model.content,
            author_id=model.author_id,
            parent_id=model.parent_id,
            ancestors=decode_path(model.ancestor_path),
            topic_id=model.topic_id,
            version=model.version,
            published=model.published,
            published_at=as_utc(model.published_at),
            deleted=model.deleted,
            deleted_at=as_utc(model.deleted_at),
            deleted_by=model.deleted_by,
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )

    def _to_model(self, entity: Article) -> ArticleModel:
        """Map domain entity → ORM model (for creation)."""
        return ArticleModel(
            id=entity.id,
            title=entity.title,
            content=entity.content,
            author_id=entity.author_id,
            parent_id=entity.parent_id,
            ancestor_path=encode_path(entity.ancestors),
            topic_id=entity.topic_id,
            version=entity.version,
            published=entity.published,
            published_at=entity.published_at,
            deleted=entity.deleted,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    async def _fetch(self, stmt) -> list[Article]:
        result = await self._session.execute(stmt.execution_options(populate_existing=True))
        return [self._to_entity(row) for row in result.scalars().all()]

    @staticmethod
    def _subtree_filter(article_id: str):
        return or_(
            ArticleModel.id == article_id,
            ArticleModel.ancestor_path.contains(segment(article_id), autoescape=True),
        )

    # ── Reads ────────────────────────────────────────────────────────

    async def get_by_id(self, node_id: str) -> Article | None:
        rows = await self._fetch(select(ArticleModel).where(ArticleModel.id == node_id))
        return rows[0] if rows else None

    async def list_by_parent(self, parent_id: str | None, *, include_hidden: bool = False) -> list[Article]:
        stmt = select(ArticleModel)
        if parent_id is None:
            stmt = stmt.where(ArticleModel.parent_id.is_(None))
        else:
            stmt = stmt.where(ArticleModel.parent_id == parent_id)
        if not include_hidden:
            stmt = stmt.where(ArticleModel.deleted.is_(False), ArticleModel.published.is_(True))
        return await self._fetch(stmt.order_by(ArticleModel.created_at.desc()))

    async def list_drafts(self, author_id: str) -> list[Article]:
        stmt = (
            select(ArticleModel)
            .where(
                ArticleModel.author_id == author_id,
                ArticleModel.published.is_(False),
                ArticleModel.deleted.is_(False),
            )
            .order_by(ArticleModel.updated_at.desc())
        )
        return await self._fetch(stmt)

    async def list_deleted(self) -> list[Article]:
        stmt = (
            select(ArticleModel)
            .where(ArticleModel.deleted.is_(True))
            .order_by(ArticleModel.deleted_at.desc())
        )
        return await self._fetch(stmt)

    async def list_descendants(self, node_id: str) -> list[Article]:
        stmt = select(ArticleModel).where(
            ArticleModel.ancestor_path.contains(segment(node_id), autoescape=True)
        )
        return await self._fetch(stmt)

    async def count_children(self, parent_id: str) -> int:
        stmt = select(func.count()).select_from(ArticleModel).where(ArticleModel.parent_id == parent_id)
        return (await self._session.execute(stmt)).scalar_one()

    async def count_by_topic(
        self, topic_id: str, *, published_only: bool = False, include_deleted: bool = False
    ) -> int:
        stmt = select(func.count()).select_from(ArticleModel).where(ArticleModel.topic_id == topic_id)
        if not include_deleted:
            stmt = stmt.where(ArticleModel.deleted.is_(False))
        if published_only:
            stmt = stmt.where(ArticleModel.published.is_(True))
        return (await self._session.execute(stmt)).scalar_one()

    async def list_revisions(self, article_id: str) -> list[ArticleRevision]:
        stmt = (
            select(ArticleRevisionModel)
            .where(ArticleRevisionModel.article_id == article_id)
            .order_by(ArticleRevisionModel.version.desc())
        )
        result = await self._session.execute(stmt)
        return [
            ArticleRevision(
                article_id=row.article_id,
                version=row.version,
                title=row.title,
                content=row.content,
                updated_by=row.updated_by,
                updated_at=as_utc(row.updated_at),
            )
            for row in result.scalars().all()
        ]

    # ── Writes ───────────────────────────────────────────────────────

    async def create(self, article: Article) -> Article:
        model = self._to_model(article)
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def save_edit(self, article: Article, expected_version: int) -> bool:
        stmt = (
            update(ArticleModel)
            .where(ArticleModel.id == article.id, ArticleModel.version == expected_version)
            .values(
                title=article.title,
                content=article.content,
                parent_id=article.parent_id,
                ancestor_path=encode_path(article.ancestors),
                topic_id=article.topic_id,
                version=article.version,
                updated_at=article.updated_at,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount == 1

    async def set_placement(self, article_id: str, ancestors: list[str], topic_id: str | None) -> None:
        await self._session.execute(
            update(ArticleModel)
            .where(ArticleModel.id == article_id)
            .values(ancestor_path=encode_path(ancestors), topic_id=topic_id)
            .execution_options(synchronize_session=False)
        )

    async def set_publication(self, article_id: str, published: bool, published_at: datetime | None) -> None:
        await self._session.execute(
            update(ArticleModel)
            .where(ArticleModel.id == article_id)
            .values(published=published, published_at=published_at)
            .execution_options(synchronize_session=False)
        )

    async def soft_delete_subtree(self, node_id: str, deleted_by: str, deleted_at: datetime) -> int:
        stmt = (
            update(ArticleModel)
            .where(self._subtree_filter(node_id), ArticleModel.deleted.is_(False))
            .values(
                deleted=True,
                deleted_at=deleted_at,
                deleted_by=deleted_by,
                published=False,
                published_at=None,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount

    async def restore(self, node_id: str, restored_at: datetime) -> None:
        await self._session.execute(
            update(ArticleModel)
            .where(ArticleModel.id == node_id)
            .values(
                deleted=False,
                deleted_at=None,
                deleted_by=None,
                published=True,
                published_at=restored_at,
            )
            .execution_options(synchronize_session=False)
        )

    async def reassign_topic(self, from_topic_id: str, to_topic_id: str | None, *, drafts_only: bool = False) -> int:
        stmt = update(ArticleModel).where(ArticleModel.topic_id == from_topic_id)
        if drafts_only:
            stmt = stmt.where(ArticleModel.deleted.is_(False), ArticleModel.published.is_(False))
        result = await self._session.execute(
            stmt.values(topic_id=to_topic_id).execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def add_revision(self, revision: ArticleRevision) -> None:
        self._session.add(
            ArticleRevisionModel(
                article_id=revision.article_id,
                version=revision.version,
                title=revision.title,
                content=revision.content,
                updated_by=revision.updated_by,
                updated_at=revision.updated_at,
            )
        )
        await self._session.flush()

    async def delete(self, node_id: str) -> bool:
        await self._session.execute(
            delete(ArticleRevisionModel).where(ArticleRevisionModel.article_id == node_id)
        )
        result = await self._session.execute(
            delete(ArticleModel)
            .where(ArticleModel.id == node_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
