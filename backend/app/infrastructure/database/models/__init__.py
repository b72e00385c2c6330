from .article import ArticleModel, ArticleRevisionModel
from .topic import TopicModel
from .user import UserModel

__all__ = [
    "ArticleModel",
    "ArticleRevisionModel",
    "TopicModel",
    "UserModel",
]
