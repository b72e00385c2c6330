"""Materialized ancestor paths — pure resolution and rewrite helpers.

A node's ``ancestors`` list runs from the tree root down to (but not
including) the node itself. These helpers never touch storage: callers load
the candidate parent and hand it in.
"""

from typing import Protocol, Sequence

from app.domain.exceptions import CycleDetectedError, EntityNotFoundError, InvalidStateError


class TreeNode(Protocol):
    id: str
    ancestors: list[str]
    deleted: bool


def resolve_ancestors(
    kind: str,
    parent_id: str | None,
    parent: TreeNode | None,
    *,
    moving_id: str | None = None,
) -> list[str]:
    """Compute the ancestor path for a node placed under ``parent``.

    ``moving_id`` is the id of the node being moved, when this is a move
    rather than a create; placing a node under itself or any of its
    descendants raises ``CycleDetectedError``.
    """
    if parent_id is None:
        return []
    if parent is None:
        raise EntityNotFoundError(kind, parent_id)
    if moving_id is not None and (parent.id == moving_id or moving_id in parent.ancestors):
        raise CycleDetectedError(
            f"{kind} '{moving_id}' cannot be placed under itself or one of its descendants"
        )
    if parent.deleted:
        raise InvalidStateError(f"Parent {kind.lower()} '{parent_id}' has been deleted")
    return [*parent.ancestors, parent.id]


def rebase_ancestors(ancestors: Sequence[str], pivot_id: str, new_prefix: Sequence[str]) -> list[str]:
    """Replace everything up to and including ``pivot_id`` with ``new_prefix``.

    Used when a subtree moves: a descendant keeps the part of its path below
    the pivot and gets the pivot's new location on top.
    """
    ancestors = list(ancestors)
    try:
        idx = ancestors.index(pivot_id)
    except ValueError:
        raise ValueError(f"'{pivot_id}' is not an ancestor in {ancestors}") from None
    return [*new_prefix, *ancestors[idx + 1 :]]


def depth(node: TreeNode) -> int:
    return len(node.ancestors)
