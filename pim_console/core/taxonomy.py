"""Taxonomy lineage resolution and hierarchy trees.

A category (or family) lineage is rebuilt from two redundant sources: the
precomputed ``hierarchy_path`` and the parent pointers. Both are walked and
the result is de-duplicated by id, nearest ancestor first.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from itertools import pairwise
from typing import TypeVar

from pim_console.domain.exceptions import LineageMismatchError
from pim_console.infra.logging import get_logger
from pim_console.schemas.entities import Category, Family, ItemType

logger = get_logger(__name__)

NodeT = TypeVar("NodeT", Category, Family)


def _path_nearest_first(
    path_ids: list[str],
    parent_id: str | None,
    nodes_by_id: Mapping[str, NodeT],
    parent_of: Callable[[NodeT], str | None],
) -> list[str]:
    """Orient ``hierarchy_path`` nearest first.

    The backend stores it root first, ending at the direct parent. The
    orientation is read off the parent pointers of the path's own nodes, so
    a path already stored nearest first is kept as is.
    """
    root_first = int(bool(path_ids) and path_ids[-1] == parent_id)
    nearest_first = int(bool(path_ids) and path_ids[0] == parent_id)
    for upper, lower in pairwise(path_ids):
        root_first += parent_of(nodes_by_id[lower]) == upper
        nearest_first += parent_of(nodes_by_id[upper]) == lower
    if root_first > nearest_first:
        return path_ids[::-1]
    return path_ids


def resolve_lineage(
    node: NodeT,
    nodes_by_id: Mapping[str, NodeT],
    parent_of: Callable[[NodeT], str | None],
    *,
    strict: bool = False,
) -> list[NodeT]:
    """Compute a node's ancestor chain, nearest first, the node itself included.

    1. Seed with the node.
    2. Walk parent pointers until there is no parent or an id repeats.
    3. Append ``hierarchy_path`` ids the parent walk did not reach, nearest
       first whichever way round the path is stored.

    Ids that do not resolve against ``nodes_by_id`` are skipped.

    Args:
        node: Selected category or family
        nodes_by_id: Every fetched node of the same kind
        parent_of: Returns the parent id of a node
        strict: Raise when the two sources disagree instead of reconciling

    Returns:
        Lineage list, de-duplicated by id

    Raises:
        LineageMismatchError: In strict mode, on disagreement
    """
    lineage: list[NodeT] = [node]
    seen: set[str] = {node.id}

    from_parents: list[str] = []
    parent_id = parent_of(node)
    while parent_id and parent_id not in seen:
        parent = nodes_by_id.get(parent_id)
        if parent is None:
            break
        seen.add(parent_id)
        from_parents.append(parent_id)
        lineage.append(parent)
        parent_id = parent_of(parent)

    from_path = [
        ancestor_id
        for ancestor_id in dict.fromkeys(node.hierarchy_path)
        if ancestor_id != node.id and ancestor_id in nodes_by_id
    ]
    for ancestor_id in _path_nearest_first(from_path, parent_of(node), nodes_by_id, parent_of):
        if ancestor_id not in seen:
            seen.add(ancestor_id)
            lineage.append(nodes_by_id[ancestor_id])

    if set(from_path) != set(from_parents):
        if strict:
            raise LineageMismatchError(node.id, from_path, from_parents)
        logger.warning(
            "Lineage sources disagree, reconciling",
            node_id=node.id,
            hierarchy_path=from_path,
            parent_chain=from_parents,
        )

    return lineage


def category_lineage(
    category: Category,
    categories: Iterable[Category],
    *,
    strict: bool = False,
) -> list[Category]:
    by_id = {c.id: c for c in categories}
    return resolve_lineage(category, by_id, lambda c: c.parent_category_id, strict=strict)


def family_lineage(
    family: Family,
    families: Iterable[Family],
    *,
    strict: bool = False,
) -> list[Family]:
    by_id = {f.id: f for f in families}
    return resolve_lineage(family, by_id, lambda f: f.parent_family_id, strict=strict)


# =============================================================================
# Pickers
# =============================================================================


def admissible_categories(item_type: ItemType, categories: Iterable[Category]) -> list[Category]:
    """Categories an item of this type may be filed under.

    A category qualifies when the type links it or it links the type back.
    An item type without explicit category links admits every category.
    """
    categories = list(categories)
    if item_type.category_ids:
        allowed = set(item_type.category_ids)
        return [c for c in categories if c.id in allowed or item_type.id in c.linked_item_type_ids]
    return categories


def admissible_families(category: Category, families: Iterable[Family]) -> list[Family]:
    """Families nested under the category or explicitly linked to it."""
    linked = set(category.linked_family_ids)
    return [f for f in families if f.category_id == category.id or f.id in linked]


@dataclass
class TreeNode:
    id: str
    label: str
    description: str | None = None
    disabled: bool = False
    children: list[TreeNode] = field(default_factory=list)


def build_hierarchy_tree(
    nodes: Iterable[NodeT],
    get_id: Callable[[NodeT], str],
    get_parent_id: Callable[[NodeT], str | None],
    get_label: Callable[[NodeT], str],
    get_description: Callable[[NodeT], str | None] | None = None,
    get_disabled: Callable[[NodeT], bool] | None = None,
) -> list[TreeNode]:
    """Arrange flat taxonomy nodes into a sorted forest.

    Nodes whose parent is missing, unknown, or themselves become roots.
    Siblings are sorted by label, case-insensitively.
    """
    tree_nodes: dict[str, TreeNode] = {}
    parents: dict[str, str | None] = {}

    for node in nodes:
        node_id = get_id(node)
        parents[node_id] = get_parent_id(node)
        tree_nodes[node_id] = TreeNode(
            id=node_id,
            label=get_label(node),
            description=get_description(node) if get_description else None,
            disabled=get_disabled(node) if get_disabled else False,
        )

    roots: list[TreeNode] = []
    for node_id, tree_node in tree_nodes.items():
        parent_id = parents[node_id]
        if parent_id and parent_id != node_id and parent_id in tree_nodes:
            tree_nodes[parent_id].children.append(tree_node)
        else:
            roots.append(tree_node)

    def sort_nodes(level: list[TreeNode]) -> None:
        level.sort(key=lambda n: n.label.casefold())
        for child in level:
            sort_nodes(child.children)

    sort_nodes(roots)
    return roots


def category_tree(categories: Iterable[Category]) -> list[TreeNode]:
    return build_hierarchy_tree(
        categories,
        get_id=lambda c: c.id,
        get_parent_id=lambda c: c.parent_category_id,
        get_label=lambda c: c.name or c.key or c.id,
        get_description=lambda c: c.description,
    )


def family_tree(families: Iterable[Family]) -> list[TreeNode]:
    return build_hierarchy_tree(
        families,
        get_id=lambda f: f.id,
        get_parent_id=lambda f: f.parent_family_id,
        get_label=lambda f: f.name or f.key or f.id,
        get_description=lambda f: f.description,
    )
