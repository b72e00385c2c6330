from .article import (
    ArticleCreate,
    ArticleUpdate,
    ArticleResponse,
    ArticleTreeResponse,
    ArticleDetailResponse,
    DeletedCountResponse,
    RevisionAuthor,
    RevisionResponse,
    MessageResponse,
)
from .topic import (
    TopicCreate,
    TopicUpdate,
    TopicMergeRequest,
    TopicResponse,
    TopicDetailResponse,
    TopicMergeResponse,
)

__all__ = [
    "ArticleCreate",
    "ArticleUpdate",
    "ArticleResponse",
    "ArticleTreeResponse",
    "ArticleDetailResponse",
    "DeletedCountResponse",
    "RevisionAuthor",
    "RevisionResponse",
    "MessageResponse",
    "TopicCreate",
    "TopicUpdate",
    "TopicMergeRequest",
    "TopicResponse",
    "TopicDetailResponse",
    "TopicMergeResponse",
]
