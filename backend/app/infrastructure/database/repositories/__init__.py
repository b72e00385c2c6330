from .article_repository import SQLAlchemyArticleRepository
from .topic_repository import SQLAlchemyTopicRepository
from .user_directory import SQLAlchemyUserDirectory

__all__ = [
    "SQLAlchemyArticleRepository",
    "SQLAlchemyTopicRepository",
    "SQLAlchemyUserDirectory",
]
