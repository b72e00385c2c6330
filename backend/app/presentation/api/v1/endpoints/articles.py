"""Article endpoints — threads, replies, drafts, edits and the deletion lifecycle.

Domain errors propagate to the application-level exception handlers.
"""

from fastapi import APIRouter, Depends, status

from app.application.schemas import (
    ArticleCreate,
    ArticleDetailResponse,
    ArticleResponse,
    ArticleTreeResponse,
    ArticleUpdate,
    DeletedCountResponse,
    MessageResponse,
    RevisionAuthor,
    RevisionResponse,
)
from app.application.services import ArticleService, DeletedArticleNode, ResolvedRevision
from app.domain.entities import Caller
from app.infrastructure.dependencies import get_article_service, get_current_caller, get_reader

router = APIRouter(prefix="/articles", tags=["Articles"])


def _to_revision(revision: ResolvedRevision) -> RevisionResponse:
    return RevisionResponse(
        version=revision.version,
        title=revision.title,
        content=revision.content,
        updated_at=revision.updated_at,
        updated_by=RevisionAuthor(id=revision.updated_by_id, name=revision.updated_by_name),
    )


def _to_tree(node: DeletedArticleNode) -> ArticleTreeResponse:
    base = ArticleResponse.model_validate(node.article, from_attributes=True)
    return ArticleTreeResponse(
        **base.model_dump(),
        children=[_to_tree(child) for child in node.children],
    )


# ── Reads ────────────────────────────────────────────────────────────


@router.get("", response_model=list[ArticleResponse])
async def list_articles(
    parent_id: str | None = None,
    include_deleted: bool = False,
    caller: Caller | None = Depends(get_reader),
    service: ArticleService = Depends(get_article_service),
) -> list[ArticleResponse]:
    """Thread roots (no ``parent_id`` or ``root``) or the direct replies of an article, newest first."""
    articles = await service.list_articles(caller, parent_id=parent_id, include_deleted=include_deleted)
    return [ArticleResponse.model_validate(a, from_attributes=True) for a in articles]


@router.get("/deleted", response_model=list[ArticleTreeResponse])
async def list_deleted_articles(
    caller: Caller = Depends(get_current_caller),
    service: ArticleService = Depends(get_article_service),
) -> list[ArticleTreeResponse]:
    """Admin view of every soft-deleted article, nested under deleted parents."""
    forest = await service.list_deleted(caller)
    return [_to_tree(node) for node in forest]


@router.get("/drafts/my", response_model=list[ArticleResponse])
async def list_my_drafts(
    caller: Caller = Depends(get_current_caller),
    service: ArticleService = Depends(get_article_service),
) -> list[ArticleResponse]:
    drafts = await service.list_drafts(caller)
    return [ArticleResponse.model_validate(a, from_attributes=True) for a in drafts]


@router.get("/{article_id}", response_model=ArticleDetailResponse)
async def get_article(
    article_id: str,
    caller: Caller | None = Depends(get_reader),
    service: ArticleService = Depends(get_article_service),
) -> ArticleDetailResponse:
    """Retrieve a single article together with its revision history."""
    article = await service.get_article(caller, article_id)
    revisions = await service.list_revisions(caller, article_id)
    return ArticleDetailResponse(
        article=ArticleResponse.model_validate(article, from_attributes=True),
        revisions=[_to_revision(r) for r in revisions],
    )


@router.get("/{article_id}/revisions", response_model=list[RevisionResponse])
async def list_revisions(
    article_id: str,
    caller: Caller | None = Depends(get_reader),
    service: ArticleService = Depends(get_article_service),
) -> list[RevisionResponse]:
    revisions = await service.list_revisions(caller, article_id)
    return [_to_revision(r) for r in revisions]


# ── Writes ───────────────────────────────────────────────────────────


@router.post("", response_model=ArticleResponse, status_code=status.HTTP_201_CREATED)
async def create_article(
    data: ArticleCreate,
    caller: Caller = Depends(get_current_caller),
    service: ArticleService = Depends(get_article_service),
) -> ArticleResponse:
    """Create a new draft article (thread root or reply)."""
    article = await service.create_article(caller, data)
    return ArticleResponse.model_validate(article, from_attributes=True)


@router.patch("/{article_id}", response_model=ArticleResponse)
async def update_article(
    article_id: str,
    data: ArticleUpdate,
    caller: Caller = Depends(get_current_caller),
    service: ArticleService = Depends(get_article_service),
) -> ArticleResponse:
    """Guarded edit; ``version`` must equal the stored version or the request gets a 409."""
    article = await service.update_article(caller, article_id, data)
    return ArticleResponse.model_validate(article, from_attributes=True)


@router.post("/{article_id}/publish", response_model=ArticleResponse)
async def publish_article(
    article_id: str,
    caller: Caller = Depends(get_current_caller),
    service: ArticleService = Depends(get_article_service),
) -> ArticleResponse:
    article = await service.publish_article(caller, article_id)
    return ArticleResponse.model_validate(article, from_attributes=True)


@router.post("/{article_id}/unpublish", response_model=ArticleResponse)
async def unpublish_article(
    article_id: str,
    caller: Caller = Depends(get_current_caller),
    service: ArticleService = Depends(get_article_service),
) -> ArticleResponse:
    article = await service.unpublish_article(caller, article_id)
    return ArticleResponse.model_validate(article, from_attributes=True)


@router.post(
    "/{article_id}/duplicate-draft",
    response_model=ArticleResponse,
    status_code=status.HTTP_201_CREATED,
)
async def duplicate_to_draft(
    article_id: str,
    caller: Caller = Depends(get_current_caller),
    service: ArticleService = Depends(get_article_service),
) -> ArticleResponse:
    draft = await service.duplicate_to_draft(caller, article_id)
    return ArticleResponse.model_validate(draft, from_attributes=True)


# ── Deletion lifecycle ───────────────────────────────────────────────


@router.delete("/{article_id}", response_model=DeletedCountResponse)
async def delete_article(
    article_id: str,
    caller: Caller = Depends(get_current_caller),
    service: ArticleService = Depends(get_article_service),
) -> DeletedCountResponse:
    """Soft-delete an article and every reply below it."""
    count = await service.delete_article(caller, article_id)
    return DeletedCountResponse(deleted_count=count)


@router.delete("/{article_id}/draft", status_code=status.HTTP_204_NO_CONTENT)
async def delete_draft(
    article_id: str,
    caller: Caller = Depends(get_current_caller),
    service: ArticleService = Depends(get_article_service),
) -> None:
    await service.delete_draft(caller, article_id)


@router.post("/{article_id}/undelete", response_model=ArticleResponse)
async def restore_article(
    article_id: str,
    restore_children: bool = False,
    caller: Caller = Depends(get_current_caller),
    service: ArticleService = Depends(get_article_service),
) -> ArticleResponse:
    """Restore an article and its ancestors; ``restore_children`` brings back its subtree too."""
    article = await service.restore_article(caller, article_id, restore_children=restore_children)
    return ArticleResponse.model_validate(article, from_attributes=True)


@router.delete("/{article_id}/permanent", response_model=MessageResponse)
async def permanently_delete_article(
    article_id: str,
    caller: Caller = Depends(get_current_caller),
    service: ArticleService = Depends(get_article_service),
) -> MessageResponse:
    await service.permanently_delete_article(caller, article_id)
    return MessageResponse(message="Article permanently deleted")
