"""Subcategory hierarchy helpers.

Subcategories are stored flat, each with a nullable ``parent_id``. These
helpers turn a flat list into the nested structure the storefront renders,
build breadcrumb names for admin lists, and guard parent assignments against
cycles. Every function works on plain mappings so it can be fed either
serialised ORM rows or test fixtures.
"""

from collections import defaultdict
from typing import Any, Hashable, Iterable, Mapping, Optional

from services.store_service.errors import SubCategoryCycleError

CHILDREN_KEY = "child_sub_categories"
BREADCRUMB_SEPARATOR = " > "


def build_subcategory_tree(
    subcategories: Iterable[Mapping[str, Any]], max_depth: int = 3
) -> list[dict]:
    """Nest a flat subcategory list under its top-level nodes.

    A node is top-level when its ``parent_id`` is null, points at itself, or
    points at a record that is not in the input. Children are attached for
    ``max_depth`` levels below the top-level nodes; nodes on the last level
    keep their own fields with an empty children list.
    """
    nodes = [dict(sub) for sub in subcategories]
    known_ids = {node["id"] for node in nodes}

    roots: list[dict] = []
    children_of: dict[Hashable, list[dict]] = defaultdict(list)
    for node in nodes:
        parent_id = node.get("parent_id")
        if parent_id is None or parent_id == node["id"] or parent_id not in known_ids:
            roots.append(node)
        else:
            children_of[parent_id].append(node)

    return [_attach_children(root, children_of, 0, max_depth) for root in roots]


def _attach_children(
    node: dict,
    children_of: Mapping[Hashable, list[dict]],
    level: int,
    max_depth: int,
) -> dict:
    if level >= max_depth:
        node[CHILDREN_KEY] = []
        return node
    node[CHILDREN_KEY] = [
        _attach_children(dict(child), children_of, level + 1, max_depth)
        for child in children_of.get(node["id"], [])
    ]
    return node


def attach_subcategory_trees(
    categories: Iterable[Mapping[str, Any]],
    subcategories: Iterable[Mapping[str, Any]],
    max_depth: int = 3,
) -> list[dict]:
    """Return categories with a ``sub_categories`` tree built per category."""
    by_category: dict[Hashable, list[Mapping[str, Any]]] = defaultdict(list)
    for sub in subcategories:
        by_category[sub["category_id"]].append(sub)

    result = []
    for category in categories:
        data = dict(category)
        data["sub_categories"] = build_subcategory_tree(
            by_category.get(category["id"], []), max_depth=max_depth
        )
        result.append(data)
    return result


def breadcrumb_name(
    subcategory_id: Hashable,
    by_id: Mapping[Hashable, Mapping[str, Any]],
    separator: str = BREADCRUMB_SEPARATOR,
) -> str:
    """Join the names from the root down to ``subcategory_id``.

    The walk stops at a node without a parent or with a parent missing from
    ``by_id``. Raises SubCategoryCycleError if a node is visited twice.
    """
    names: list[str] = []
    visited: set = set()
    current: Optional[Mapping[str, Any]] = by_id[subcategory_id]

    while current is not None:
        if current["id"] in visited:
            raise SubCategoryCycleError(
                f"Subcategory {subcategory_id} has a cyclic parent chain"
            )
        visited.add(current["id"])
        names.append(current["name"])

        parent_id = current.get("parent_id")
        current = by_id.get(parent_id) if parent_id is not None else None

    return separator.join(reversed(names))


def is_valid_parent(
    subcategory_id: Optional[Hashable],
    candidate_parent_id: Optional[Hashable],
    parent_of: Mapping[Hashable, Optional[Hashable]],
) -> bool:
    """Return False if making ``candidate_parent_id`` the parent would form a cycle.

    ``parent_of`` maps every known subcategory id to its current parent id.
    A brand-new subcategory (``subcategory_id`` is None) cannot close a loop,
    but an existing loop among its would-be ancestors still invalidates it.
    """
    if candidate_parent_id is None:
        return True
    if candidate_parent_id == subcategory_id:
        return False

    visited: set = set()
    current: Optional[Hashable] = candidate_parent_id
    while current is not None:
        if current == subcategory_id or current in visited:
            return False
        visited.add(current)
        current = parent_of.get(current)
    return True
