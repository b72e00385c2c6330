"""Unit tests for ancestor path resolution and rewrites."""

import pytest

from app.domain.entities import Article, Topic
from app.domain.exceptions import CycleDetectedError, EntityNotFoundError, InvalidStateError
from app.domain.tree_paths import depth, rebase_ancestors, resolve_ancestors


def _article(ancestors: list[str], deleted: bool = False) -> Article:
    article = Article(title="t", content="c", author_id="u")
    article.ancestors = ancestors
    article.deleted = deleted
    return article


def test_root_has_no_ancestors():
    assert resolve_ancestors("Article", None, None) == []


def test_child_path_extends_parent_path():
    parent = _article(["a", "b"])
    assert resolve_ancestors("Article", parent.id, parent) == ["a", "b", parent.id]


def test_missing_parent_is_not_found():
    with pytest.raises(EntityNotFoundError):
        resolve_ancestors("Article", "ghost", None)


def test_deleted_parent_is_invalid_state():
    parent = _article([], deleted=True)
    with pytest.raises(InvalidStateError):
        resolve_ancestors("Article", parent.id, parent)


def test_moving_under_itself_is_a_cycle():
    node = _article([])
    with pytest.raises(CycleDetectedError):
        resolve_ancestors("Article", node.id, node, moving_id=node.id)


def test_moving_under_a_descendant_is_a_cycle():
    topic = Topic(name="Root", created_by="u")
    grandchild = Topic(name="Leaf", created_by="u", ancestors=[topic.id, "mid"])
    with pytest.raises(CycleDetectedError):
        resolve_ancestors("Topic", grandchild.id, grandchild, moving_id=topic.id)


def test_cycle_is_reported_before_deleted_parent():
    node = _article([])
    child = _article([node.id], deleted=True)
    with pytest.raises(CycleDetectedError):
        resolve_ancestors("Article", child.id, child, moving_id=node.id)


def test_rebase_keeps_the_path_below_the_pivot():
    assert rebase_ancestors(["r", "p", "x", "y"], "p", ["t1", "t2"]) == ["t1", "t2", "x", "y"]


def test_rebase_direct_child_of_pivot():
    assert rebase_ancestors(["p"], "p", ["t"]) == ["t"]


def test_rebase_rejects_unrelated_path():
    with pytest.raises(ValueError):
        rebase_ancestors(["a", "b"], "p", ["t"])


def test_depth_is_ancestor_count():
    assert depth(_article(["a", "b", "c"])) == 3
