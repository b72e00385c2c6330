"""FastAPI dependency injection — wires infrastructure to application layer."""

from collections.abc import AsyncGenerator

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.application.services import ArticleService, TopicMergeService, TopicService
from app.domain.entities import Caller
from app.infrastructure.database.session import get_db_session
from app.infrastructure.database.repositories import (
    SQLAlchemyArticleRepository,
    SQLAlchemyTopicRepository,
    SQLAlchemyUserDirectory,
)
from app.infrastructure.security import decode_caller

# Tokens are issued by the external auth service; the URL is only for OpenAPI docs
_bearer = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)


# ── Identity ─────────────────────────────────────────────────────────


async def get_optional_caller(token: str | None = Depends(_bearer)) -> Caller | None:
    """The caller asserted by a valid bearer token, or None for anonymous requests.

    A token that is present but invalid is rejected rather than downgraded
    to anonymous.
    """
    if token is None:
        return None
    settings = get_settings()
    caller = decode_caller(token, settings.jwt_secret, settings.jwt_algorithm)
    if caller is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return caller


async def get_current_caller(caller: Caller | None = Depends(get_optional_caller)) -> Caller:
    """Required identity for write routes."""
    if caller is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return caller


async def get_reader(caller: Caller | None = Depends(get_optional_caller)) -> Caller | None:
    """Identity for read routes, honouring the guest read access setting."""
    if get_settings().guest_read_access:
        return caller
    if caller is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not caller.is_approved:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account not approved")
    return caller


# ── Services ─────────────────────────────────────────────────────────


async def get_article_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[ArticleService, None]:
    """Provides an ArticleService with its repositories wired up."""
    settings = get_settings()
    yield ArticleService(
        articles=SQLAlchemyArticleRepository(session),
        topics=SQLAlchemyTopicRepository(session),
        users=SQLAlchemyUserDirectory(session),
        unpublish_window=settings.unpublish_window,
    )


async def get_topic_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[TopicService, None]:
    """Provides a TopicService with its repositories wired up."""
    yield TopicService(
        topics=SQLAlchemyTopicRepository(session),
        articles=SQLAlchemyArticleRepository(session),
    )


async def get_topic_merge_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[TopicMergeService, None]:
    yield TopicMergeService(
        topics=SQLAlchemyTopicRepository(session),
        articles=SQLAlchemyArticleRepository(session),
    )
