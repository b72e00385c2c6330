"""Topic taxonomy endpoints."""

from fastapi import APIRouter, Depends, status

from app.application.schemas import (
    DeletedCountResponse,
    MessageResponse,
    TopicCreate,
    TopicDetailResponse,
    TopicMergeRequest,
    TopicMergeResponse,
    TopicResponse,
    TopicUpdate,
)
from app.application.services import MergeStats, TopicMergeService, TopicService, TopicSummary
from app.domain.entities import Caller
from app.infrastructure.dependencies import (
    get_current_caller,
    get_reader,
    get_topic_merge_service,
    get_topic_service,
)

router = APIRouter(prefix="/topics", tags=["Topics"])


def _to_response(summary: TopicSummary) -> TopicResponse:
    return TopicResponse.model_validate(summary.topic, from_attributes=True).model_copy(
        update={"article_count": summary.article_count}
    )


def _to_merge_response(stats: MergeStats) -> TopicMergeResponse:
    return TopicMergeResponse(
        source_id=stats.source_id,
        target_id=stats.target_id,
        moved_articles=stats.moved_articles,
        reparented_topics=stats.reparented_topics,
        dry_run=stats.dry_run,
    )


@router.get("", response_model=list[TopicResponse])
async def list_topics(
    _: Caller | None = Depends(get_reader),
    service: TopicService = Depends(get_topic_service),
) -> list[TopicResponse]:
    """All live topics sorted by name, each with its published article count."""
    return [_to_response(s) for s in await service.list_topics()]


@router.post("/merge", response_model=TopicMergeResponse)
async def merge_topics(
    data: TopicMergeRequest,
    caller: Caller = Depends(get_current_caller),
    service: TopicMergeService = Depends(get_topic_merge_service),
) -> TopicMergeResponse:
    """Merge ``source_id`` into ``target_id``; ``dry_run`` only reports what would move."""
    stats = await service.merge(
        caller,
        data.source_id,
        data.target_id,
        dry_run=data.dry_run,
        delete_source=data.delete_source,
    )
    return _to_merge_response(stats)


@router.get("/{topic_id}", response_model=TopicDetailResponse)
async def get_topic(
    topic_id: str,
    _: Caller | None = Depends(get_reader),
    service: TopicService = Depends(get_topic_service),
) -> TopicDetailResponse:
    detail = await service.get_topic(topic_id)
    base = TopicResponse.model_validate(detail.topic, from_attributes=True)
    return TopicDetailResponse(
        **base.model_dump(exclude={"article_count"}),
        article_count=detail.article_count,
        children=[_to_response(c) for c in detail.children],
    )


@router.get("/{topic_id}/path", response_model=list[TopicResponse])
async def get_topic_path(
    topic_id: str,
    _: Caller | None = Depends(get_reader),
    service: TopicService = Depends(get_topic_service),
) -> list[TopicResponse]:
    """Breadcrumb ordered from the root topic down to this one."""
    path = await service.get_topic_path(topic_id)
    return [TopicResponse.model_validate(t, from_attributes=True) for t in path]


@router.post("", response_model=TopicResponse, status_code=status.HTTP_201_CREATED)
async def create_topic(
    data: TopicCreate,
    caller: Caller = Depends(get_current_caller),
    service: TopicService = Depends(get_topic_service),
) -> TopicResponse:
    topic = await service.create_topic(caller, data)
    return TopicResponse.model_validate(topic, from_attributes=True)


@router.patch("/{topic_id}", response_model=TopicResponse)
async def update_topic(
    topic_id: str,
    data: TopicUpdate,
    caller: Caller = Depends(get_current_caller),
    service: TopicService = Depends(get_topic_service),
) -> TopicResponse:
    topic = await service.update_topic(caller, topic_id, data)
    return TopicResponse.model_validate(topic, from_attributes=True)


@router.delete("/{topic_id}", response_model=DeletedCountResponse)
async def delete_topic(
    topic_id: str,
    caller: Caller = Depends(get_current_caller),
    service: TopicService = Depends(get_topic_service),
) -> DeletedCountResponse:
    """Soft-delete a topic with no published articles and no live child topics."""
    count = await service.delete_topic(caller, topic_id)
    return DeletedCountResponse(deleted_count=count)


@router.post("/{topic_id}/undelete", response_model=TopicResponse)
async def restore_topic(
    topic_id: str,
    restore_children: bool = False,
    caller: Caller = Depends(get_current_caller),
    service: TopicService = Depends(get_topic_service),
) -> TopicResponse:
    topic = await service.restore_topic(caller, topic_id, restore_children=restore_children)
    return TopicResponse.model_validate(topic, from_attributes=True)


@router.delete("/{topic_id}/permanent", response_model=MessageResponse)
async def permanently_delete_topic(
    topic_id: str,
    caller: Caller = Depends(get_current_caller),
    service: TopicService = Depends(get_topic_service),
) -> MessageResponse:
    await service.permanently_delete_topic(caller, topic_id)
    return MessageResponse(message="Topic permanently deleted")


@router.post("/{topic_id}/merge", response_model=TopicMergeResponse)
async def merge_topic_into(
    topic_id: str,
    data: TopicMergeRequest,
    caller: Caller = Depends(get_current_caller),
    service: TopicMergeService = Depends(get_topic_merge_service),
) -> TopicMergeResponse:
    """Merge this topic into ``target_id``; any ``source_id`` in the body is ignored."""
    stats = await service.merge(
        caller,
        topic_id,
        data.target_id,
        dry_run=data.dry_run,
        delete_source=data.delete_source,
    )
    return _to_merge_response(stats)
