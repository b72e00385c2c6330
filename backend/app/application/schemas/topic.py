"""Pydantic DTOs for the Topic taxonomy."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


class TopicCreate(BaseModel):
    """Schema for creating a topic; the name is trimmed and must not be blank."""

    name: str = Field(..., min_length=1, max_length=255, examples=["Databases"])
    description: str | None = Field(None, max_length=2000)
    parent_id: str | None = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Topic name is required")
        return value

    @field_validator("description")
    @classmethod
    def _strip_description(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class TopicUpdate(BaseModel):
    """Partial update; sending ``parent_id`` (even as null) moves the topic."""

    name: str | None = Field(None, max_length=255)
    description: str | None = Field(None, max_length=2000)
    parent_id: str | None = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise ValueError("Topic name must be non-empty")
        return value

    @field_validator("description")
    @classmethod
    def _strip_description(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None

    @property
    def moves(self) -> bool:
        return "parent_id" in self.model_fields_set

    @property
    def sets_description(self) -> bool:
        return "description" in self.model_fields_set


class TopicMergeRequest(BaseModel):
    source_id: str | None = None
    target_id: str | None = None
    dry_run: bool = False
    delete_source: bool = True


class TopicResponse(BaseModel):
    id: str
    name: str
    description: str | None
    parent_id: str | None
    ancestors: list[str]
    created_by: str
    deleted: bool
    deleted_at: datetime | None
    created_at: datetime
    updated_at: datetime
    article_count: int | None = None

    model_config = {"from_attributes": True}


class TopicDetailResponse(TopicResponse):
    children: list[TopicResponse] = Field(default_factory=list)


class TopicMergeResponse(BaseModel):
    source_id: str
    target_id: str | None = None
    moved_articles: int
    reparented_topics: int
    dry_run: bool
