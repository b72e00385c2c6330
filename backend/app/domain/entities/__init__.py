from .article import Article, ArticleRevision
from .caller import (
    ROLE_ADMIN,
    ROLE_EDITOR,
    ROLE_VIEWER,
    AccountStatus,
    Caller,
)
from .topic import Topic

__all__ = [
    "Article",
    "ArticleRevision",
    "ROLE_ADMIN",
    "ROLE_EDITOR",
    "ROLE_VIEWER",
    "AccountStatus",
    "Caller",
    "Topic",
]
