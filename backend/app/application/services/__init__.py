from .cascade_engine import CascadeEngine
from .article_service import ArticleService, DeletedArticleNode, ResolvedRevision
from .topic_service import TopicDetail, TopicService, TopicSummary
from .topic_merge_service import MergeStats, TopicMergeService

__all__ = [
    "CascadeEngine",
    "ArticleService",
    "DeletedArticleNode",
    "ResolvedRevision",
    "TopicDetail",
    "TopicService",
    "TopicSummary",
    "MergeStats",
    "TopicMergeService",
]
