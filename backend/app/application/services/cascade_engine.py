"""Cascade engine — soft delete, restore and permanent delete over a materialized tree.

The same engine serves articles and topics; the repository decides what a
restore means for its entity kind (articles are republished, topics are not).
"""

from collections import deque
from datetime import datetime, timezone
from typing import Generic, Protocol, TypeVar

from app.application.interfaces.tree_repository import TreeRepository
from app.domain.entities import Caller
from app.domain.exceptions import InvalidStateError
from app.domain.tree_paths import depth
from app.infrastructure.logging.colored_logger import OperationLogger, OperationStage

plog = OperationLogger("CascadeEngine")


class _Node(Protocol):
    id: str
    parent_id: str | None
    ancestors: list[str]
    deleted: bool


NodeT = TypeVar("NodeT", bound=_Node)


class CascadeEngine(Generic[NodeT]):
    """Applies deletion state transitions to a node and its closure.

    Every operation is idempotent: re-running it on a tree that was only
    partially updated (e.g. after a failed request) converges to the same
    final state.
    """

    def __init__(self, repository: TreeRepository[NodeT], kind: str):
        self._repository = repository
        self._kind = kind

    async def soft_delete(self, node: NodeT, caller: Caller) -> int:
        """Mark ``node`` and every live descendant deleted. Returns the count newly deleted.

        Runs even when ``node`` is already deleted, so live replies left under
        it by an earlier partial run are still swept up.
        """
        now = datetime.now(timezone.utc)
        with plog.timed_step(OperationStage.CASCADE_DELETE, f"Deleting {self._kind} subtree", id=node.id):
            count = await self._repository.soft_delete_subtree(node.id, caller.id, now)
        plog.stats(kind=self._kind, root=node.id, deleted=count)
        return count

    async def restore(self, node: NodeT, *, restore_children: bool = False) -> list[str]:
        """Restore ``node`` and its ancestor chain; optionally its whole deleted subtree.

        The upward walk is an explicit loop bounded by tree depth. When a
        parent no longer exists (it was permanently deleted) the walk stops
        there and the restored node is left unreachable from a root.
        Returns the ids that were actually restored, in restore order.
        """
        if not node.deleted:
            raise InvalidStateError(f"{self._kind} is not deleted")

        now = datetime.now(timezone.utc)
        restored: list[str] = []

        with plog.timed_step(OperationStage.RESTORE, f"Restoring {self._kind}", id=node.id):
            seen: set[str] = set()
            current_id: str | None = node.id
            while current_id is not None and current_id not in seen:
                seen.add(current_id)
                current = await self._repository.get_by_id(current_id)
                if current is None:
                    plog.warning(
                        f"Ancestor {current_id} no longer exists — stopping upward walk",
                        start=node.id,
                    )
                    break
                if current.deleted:
                    await self._repository.restore(current.id, now)
                    restored.append(current.id)
                    plog.detail(f"Restored {self._kind} {current.id}")
                current_id = current.parent_id

            if restore_children:
                restored.extend(await self._restore_subtree(node.id, now))

        plog.stats(kind=self._kind, root=node.id, restored=len(restored))
        return restored

    async def _restore_subtree(self, root_id: str, now: datetime) -> list[str]:
        """Restore deleted descendants shallowest first, so parents come back before children."""
        pending = deque(sorted(await self._repository.list_descendants(root_id), key=depth))
        restored: list[str] = []
        while pending:
            descendant = pending.popleft()
            if not descendant.deleted:
                continue
            await self._repository.restore(descendant.id, now)
            restored.append(descendant.id)
        return restored

    async def permanent_delete(self, node: NodeT) -> None:
        """Physically remove a single already soft-deleted node.

        Does not cascade: soft-deleted descendants remain, carrying the removed
        id in their ancestors. This is logged so the orphans can be found.
        """
        if not node.deleted:
            raise InvalidStateError(
                f"{self._kind} must be deleted (soft delete) before permanent deletion"
            )

        with plog.timed_step(OperationStage.PERMANENT_DELETE, f"Purging {self._kind}", id=node.id):
            orphans = await self._repository.list_descendants(node.id)
            await self._repository.delete(node.id)
        if orphans:
            plog.warning(
                f"{len(orphans)} soft-deleted descendant(s) now reference a missing ancestor",
                purged=node.id,
            )
