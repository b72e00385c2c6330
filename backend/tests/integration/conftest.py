"""Integration fixtures: the real app over an in-memory SQLite database."""

from collections.abc import AsyncIterator
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.config import get_settings
from app.domain.entities import ROLE_ADMIN, ROLE_EDITOR, AccountStatus
from app.infrastructure.database import Base, UserModel, get_db_session
from app.infrastructure.security import create_access_token
from app.main import app


@pytest_asyncio.fixture
async def session_factory() -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncIterator[AsyncClient]:
    async def _session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = _session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as http:
        yield http
    app.dependency_overrides.clear()


class Identity:
    """A user row plus ready-made Authorization headers."""

    def __init__(self, name: str, roles: list[str], status: AccountStatus = AccountStatus.APPROVED):
        self.id = str(uuid4())
        self.name = name
        settings = get_settings()
        token = create_access_token(
            self.id, settings.jwt_secret, settings.jwt_algorithm, roles=roles, status=status
        )
        self.headers = {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def people(session_factory) -> dict[str, Identity]:
    people = {
        "admin": Identity("Ada Admin", [ROLE_ADMIN]),
        "editor": Identity("Edith Editor", [ROLE_EDITOR]),
        "other": Identity("Otto Other", [ROLE_EDITOR]),
        "pending": Identity("Pat Pending", [ROLE_EDITOR], status=AccountStatus.PENDING),
    }
    async with session_factory() as session:
        for key, person in people.items():
            session.add(UserModel(id=person.id, name=person.name, email=f"{key}@example.com"))
        await session.commit()
    return people


@pytest.fixture
def guest_reads_disabled(monkeypatch):
    monkeypatch.setattr(get_settings(), "guest_read_access", False)
