"""Pydantic DTOs (Data Transfer Objects) for the Article feature."""

from datetime import datetime

from pydantic import BaseModel, Field


class ArticleCreate(BaseModel):
    """Schema for creating a new article (always created as a draft)."""

    title: str = Field(..., min_length=1, max_length=255, examples=["Getting Started"])
    content: str = Field(..., min_length=1, examples=["<p>Opening post</p>"])
    parent_id: str | None = Field(None, description="Article this one replies to")
    topic_id: str | None = Field(None, description="Required for thread roots, forbidden on replies")


class ArticleUpdate(BaseModel):
    """Schema for a guarded edit — ``version`` must match the stored version.

    Sending ``parent_id`` (even as null) moves the article; omitting it keeps
    the current placement.
    """

    title: str | None = Field(None, min_length=1, max_length=255)
    content: str | None = Field(None, min_length=1)
    parent_id: str | None = None
    topic_id: str | None = None
    version: int = Field(..., ge=1)

    @property
    def moves(self) -> bool:
        return "parent_id" in self.model_fields_set

    @property
    def sets_topic(self) -> bool:
        return "topic_id" in self.model_fields_set and self.topic_id is not None


class ArticleResponse(BaseModel):
    """Schema returned to the client."""

    id: str
    title: str
    content: str
    author_id: str
    parent_id: str | None
    ancestors: list[str]
    topic_id: str | None
    version: int
    published: bool
    published_at: datetime | None
    deleted: bool
    deleted_at: datetime | None
    deleted_by: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ArticleTreeResponse(ArticleResponse):
    """A deleted article with its deleted replies nested below it."""

    children: list["ArticleTreeResponse"] = Field(default_factory=list)


class RevisionAuthor(BaseModel):
    id: str
    name: str


class RevisionResponse(BaseModel):
    version: int
    title: str
    content: str
    updated_at: datetime
    updated_by: RevisionAuthor


class ArticleDetailResponse(BaseModel):
    article: ArticleResponse
    revisions: list[RevisionResponse]


class DeletedCountResponse(BaseModel):
    deleted_count: int


class MessageResponse(BaseModel):
    message: str
