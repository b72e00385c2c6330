"""In-memory fakes of the repository ports, shared by the service unit tests."""

from dataclasses import replace
from datetime import datetime, timezone
from uuid import uuid4

import pytest

from app.application.interfaces import ArticleRepository, TopicRepository, UserDirectory
from app.application.services import ArticleService, TopicMergeService, TopicService
from app.domain.entities import (
    ROLE_ADMIN,
    ROLE_EDITOR,
    ROLE_VIEWER,
    AccountStatus,
    Article,
    ArticleRevision,
    Caller,
    Topic,
)


def _copy(node):
    """Detach a stored row from what the service holds, like a real database would."""
    return replace(node, ancestors=list(node.ancestors))


class FakeArticleRepository(ArticleRepository):
    """In-memory fake repository for unit testing."""

    def __init__(self):
        self.rows: dict[str, Article] = {}
        self.revisions: list[ArticleRevision] = []

    def seed(self, article: Article) -> Article:
        self.rows[article.id] = _copy(article)
        return article

    async def get_by_id(self, node_id: str) -> Article | None:
        row = self.rows.get(node_id)
        return _copy(row) if row else None

    async def list_by_parent(self, parent_id: str | None, *, include_hidden: bool = False) -> list[Article]:
        rows = [a for a in self.rows.values() if a.parent_id == parent_id]
        if not include_hidden:
            rows = [a for a in rows if a.published and not a.deleted]
        return [_copy(a) for a in sorted(rows, key=lambda a: a.created_at, reverse=True)]

    async def list_drafts(self, author_id: str) -> list[Article]:
        rows = [a for a in self.rows.values() if a.author_id == author_id and not a.published and not a.deleted]
        return [_copy(a) for a in sorted(rows, key=lambda a: a.updated_at, reverse=True)]

    async def list_deleted(self) -> list[Article]:
        return [_copy(a) for a in self.rows.values() if a.deleted]

    async def list_descendants(self, node_id: str) -> list[Article]:
        return [_copy(a) for a in self.rows.values() if node_id in a.ancestors]

    async def count_children(self, parent_id: str) -> int:
        return sum(1 for a in self.rows.values() if a.parent_id == parent_id)

    async def count_by_topic(
        self, topic_id: str, *, published_only: bool = False, include_deleted: bool = False
    ) -> int:
        return sum(
            1
            for a in self.rows.values()
            if a.topic_id == topic_id
            and (include_deleted or not a.deleted)
            and (a.published or not published_only)
        )

    async def create(self, article: Article) -> Article:
        self.rows[article.id] = _copy(article)
        return article

    async def save_edit(self, article: Article, expected_version: int) -> bool:
        stored = self.rows.get(article.id)
        if stored is None or stored.version != expected_version:
            return False
        self.rows[article.id] = _copy(article)
        return True

    async def set_placement(self, article_id: str, ancestors: list[str], topic_id: str | None) -> None:
        row = self.rows[article_id]
        row.ancestors = list(ancestors)
        row.topic_id = topic_id

    async def set_publication(self, article_id: str, published: bool, published_at: datetime | None) -> None:
        row = self.rows[article_id]
        row.published = published
        row.published_at = published_at

    async def soft_delete_subtree(self, node_id: str, deleted_by: str, deleted_at: datetime) -> int:
        count = 0
        for row in self.rows.values():
            if (row.id == node_id or node_id in row.ancestors) and not row.deleted:
                row.mark_deleted(deleted_by, deleted_at)
                count += 1
        return count

    async def restore(self, node_id: str, restored_at: datetime) -> None:
        self.rows[node_id].mark_restored(restored_at)

    async def reassign_topic(self, from_topic_id: str, to_topic_id: str | None, *, drafts_only: bool = False) -> int:
        count = 0
        for row in self.rows.values():
            if row.topic_id != from_topic_id:
                continue
            if drafts_only and (row.published or row.deleted):
                continue
            row.topic_id = to_topic_id
            count += 1
        return count

    async def add_revision(self, revision: ArticleRevision) -> None:
        self.revisions.append(revision)

    async def list_revisions(self, article_id: str) -> list[ArticleRevision]:
        revisions = [r for r in self.revisions if r.article_id == article_id]
        return sorted(revisions, key=lambda r: r.version, reverse=True)

    async def delete(self, node_id: str) -> bool:
        self.revisions = [r for r in self.revisions if r.article_id != node_id]
        return self.rows.pop(node_id, None) is not None


class FakeTopicRepository(TopicRepository):
    def __init__(self):
        self.rows: dict[str, Topic] = {}

    def seed(self, topic: Topic) -> Topic:
        self.rows[topic.id] = _copy(topic)
        return topic

    async def get_by_id(self, node_id: str) -> Topic | None:
        row = self.rows.get(node_id)
        return _copy(row) if row else None

    async def get_many(self, topic_ids: list[str]) -> list[Topic]:
        return [_copy(self.rows[t]) for t in topic_ids if t in self.rows]

    async def list_active(self) -> list[Topic]:
        return [_copy(t) for t in sorted(self.rows.values(), key=lambda t: t.name) if not t.deleted]

    async def list_active_children(self, parent_id: str) -> list[Topic]:
        rows = [t for t in self.rows.values() if t.parent_id == parent_id and not t.deleted]
        return [_copy(t) for t in sorted(rows, key=lambda t: t.name)]

    async def list_descendants(self, node_id: str) -> list[Topic]:
        return [_copy(t) for t in self.rows.values() if node_id in t.ancestors]

    async def count_active_children(self, parent_id: str) -> int:
        return sum(1 for t in self.rows.values() if t.parent_id == parent_id and not t.deleted)

    async def create(self, topic: Topic) -> Topic:
        self.rows[topic.id] = _copy(topic)
        return topic

    async def update(self, topic: Topic) -> Topic:
        self.rows[topic.id] = _copy(topic)
        return topic

    async def set_placement(self, topic_id: str, parent_id: str | None, ancestors: list[str]) -> None:
        self.rows[topic_id].place(parent_id, ancestors)

    async def soft_delete_subtree(self, node_id: str, deleted_by: str, deleted_at: datetime) -> int:
        count = 0
        for row in self.rows.values():
            if (row.id == node_id or node_id in row.ancestors) and not row.deleted:
                row.mark_deleted(deleted_by, deleted_at)
                count += 1
        return count

    async def restore(self, node_id: str, restored_at: datetime) -> None:
        self.rows[node_id].mark_restored()

    async def delete(self, node_id: str) -> bool:
        return self.rows.pop(node_id, None) is not None


class FakeUserDirectory(UserDirectory):
    def __init__(self, names: dict[str, str] | None = None):
        self.names = dict(names or {})

    async def get_display_names(self, user_ids: list[str]) -> dict[str, str]:
        return {uid: self.names[uid] for uid in user_ids if uid in self.names}


def _caller(*roles: str, status: AccountStatus = AccountStatus.APPROVED) -> Caller:
    return Caller(id=str(uuid4()), roles=frozenset(roles), status=status)


# ── Callers ──────────────────────────────────────────────────────────


@pytest.fixture
def admin() -> Caller:
    return _caller(ROLE_ADMIN)


@pytest.fixture
def editor() -> Caller:
    return _caller(ROLE_EDITOR)


@pytest.fixture
def other_editor() -> Caller:
    return _caller(ROLE_EDITOR)


@pytest.fixture
def viewer() -> Caller:
    return _caller(ROLE_VIEWER)


@pytest.fixture
def pending_editor() -> Caller:
    return _caller(ROLE_EDITOR, status=AccountStatus.PENDING)


# ── Repositories & services ──────────────────────────────────────────


@pytest.fixture
def articles() -> FakeArticleRepository:
    return FakeArticleRepository()


@pytest.fixture
def topics() -> FakeTopicRepository:
    return FakeTopicRepository()


@pytest.fixture
def users(editor: Caller, admin: Caller) -> FakeUserDirectory:
    return FakeUserDirectory({editor.id: "Edith Editor", admin.id: "Ada Admin"})


@pytest.fixture
def article_service(articles, topics, users) -> ArticleService:
    return ArticleService(articles, topics, users)


@pytest.fixture
def topic_service(topics, articles) -> TopicService:
    return TopicService(topics, articles)


@pytest.fixture
def merge_service(topics, articles) -> TopicMergeService:
    return TopicMergeService(topics, articles)


# ── Seeding helpers ──────────────────────────────────────────────────


@pytest.fixture
def seed_topic(topics: FakeTopicRepository, admin: Caller):
    """Store a live topic under ``parent`` without going through the service."""

    def _seed(name: str, parent: Topic | None = None, created_by: str | None = None) -> Topic:
        topic = Topic(name=name, created_by=created_by or admin.id)
        topic.place(parent.id if parent else None, [*parent.ancestors, parent.id] if parent else [])
        return topics.seed(topic)

    return _seed


@pytest.fixture
def seed_article(articles: FakeArticleRepository, editor: Caller):
    """Store an article (published by default) under ``parent`` or as a thread root in ``topic``."""

    def _seed(
        title: str,
        parent: Article | None = None,
        topic: Topic | None = None,
        author_id: str | None = None,
        published: bool = True,
    ) -> Article:
        article = Article(title=title, content=f"{title} body", author_id=author_id or editor.id)
        if parent is None:
            article.place(None, [], topic.id if topic else None)
        else:
            article.place(parent.id, [*parent.ancestors, parent.id], parent.topic_id)
        if published:
            article.mark_published(datetime.now(timezone.utc))
        return articles.seed(article)

    return _seed
