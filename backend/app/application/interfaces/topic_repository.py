"""Port for topic taxonomy persistence."""

from abc import abstractmethod

from app.application.interfaces.tree_repository import TreeRepository
from app.domain.entities import Topic


class TopicRepository(TreeRepository[Topic]):
    """Port for topic persistence — implemented in the infrastructure layer."""

    @abstractmethod
    async def get_many(self, topic_ids: list[str]) -> list[Topic]:
        """Topics with the given ids, in no particular order; unknown ids are skipped."""
        ...

    @abstractmethod
    async def list_active(self) -> list[Topic]:
        """All live topics ordered by name."""
        ...

    @abstractmethod
    async def list_active_children(self, parent_id: str) -> list[Topic]:
        """Live direct children ordered by name."""
        ...

    @abstractmethod
    async def count_active_children(self, parent_id: str) -> int:
        ...

    @abstractmethod
    async def create(self, topic: Topic) -> Topic:
        ...

    @abstractmethod
    async def update(self, topic: Topic) -> Topic:
        """Persist name, description and placement of an existing topic."""
        ...

    @abstractmethod
    async def set_placement(self, topic_id: str, parent_id: str | None, ancestors: list[str]) -> None:
        ...
