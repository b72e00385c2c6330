"""Shared port for hierarchical collections (articles, topics)."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Generic, TypeVar

NodeT = TypeVar("NodeT")


class TreeRepository(ABC, Generic[NodeT]):
    """Operations the cascade engine needs from any tree-shaped collection.

    Descendant membership is answered from the materialized ``ancestors``
    path, never by walking parent pointers.
    """

    @abstractmethod
    async def get_by_id(self, node_id: str) -> NodeT | None:
        ...

    @abstractmethod
    async def list_descendants(self, node_id: str) -> list[NodeT]:
        """Every node whose ancestors contain ``node_id``, in any state."""
        ...

    @abstractmethod
    async def soft_delete_subtree(self, node_id: str, deleted_by: str, deleted_at: datetime) -> int:
        """Mark the node and its live descendants deleted in one filter-update.

        Already-deleted nodes keep their original deletion fields. Returns the
        number of nodes newly marked.
        """
        ...

    @abstractmethod
    async def restore(self, node_id: str, restored_at: datetime) -> None:
        """Clear the deletion fields of a single node."""
        ...

    @abstractmethod
    async def delete(self, node_id: str) -> bool:
        """Physically remove a single node. Returns False if it did not exist."""
        ...
