from .tree_repository import TreeRepository
from .article_repository import ArticleRepository
from .topic_repository import TopicRepository
from .user_directory import UserDirectory

__all__ = [
    "TreeRepository",
    "ArticleRepository",
    "TopicRepository",
    "UserDirectory",
]
