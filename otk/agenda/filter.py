"""
Tree filter.

Walks an outline in document order (pre-order, depth first) and keeps the
headlines that pass two stages:

1. match:  at least one match spec is true (an empty list matches nothing)
2. filter: no filter spec is true (an empty list excludes nothing)

Every headline is judged on its own; a matched ancestor neither includes
nor excludes its descendants.
"""

import logging
from typing import Iterable, Iterator, List, Sequence, Tuple, Union

from otk.agenda.core import AgendaError, PredicateSpec
from otk.models import HeadlineNode, Outline

logger = logging.getLogger(__name__)

Tree = Union[Outline, HeadlineNode, Iterable[HeadlineNode]]


def _roots(tree: Tree) -> List[HeadlineNode]:
    if isinstance(tree, HeadlineNode):
        return [tree]
    return list(tree)


def walk(tree: Tree) -> Iterator[HeadlineNode]:
    """Yield every headline of the tree in pre-order."""
    for node, _ancestors in walk_with_ancestors(tree):
        yield node


def walk_with_ancestors(tree: Tree) -> Iterator[Tuple[HeadlineNode, Tuple[HeadlineNode, ...]]]:
    """
    Yield (headline, ancestors) pairs in pre-order.

    Ancestors run from the outermost headline down to the direct parent.
    Iterative, so deep outlines do not hit the recursion limit.
    """
    stack = [(node, ()) for node in reversed(_roots(tree))]
    while stack:
        node, ancestors = stack.pop()
        yield node, ancestors
        lineage = ancestors + (node,)
        for child in reversed(node.children):
            stack.append((child, lineage))


def matches(
    node: HeadlineNode,
    match_specs: Sequence[PredicateSpec],
    filter_specs: Sequence[PredicateSpec] = (),
) -> bool:
    """Apply the match stage, then the filter stage, to one headline."""
    if not any(spec.evaluate(node) for spec in match_specs):
        return False
    return not any(spec.evaluate(node) for spec in filter_specs)


def filter_tree(
    tree: Tree,
    match_specs: Sequence[PredicateSpec],
    filter_specs: Sequence[PredicateSpec] = (),
) -> List[HeadlineNode]:
    """
    Select headlines from a tree.

    Args:
        tree: Outline, single headline or iterable of top-level headlines
        match_specs: OR-combined selection specs
        filter_specs: NONE-combined exclusion specs

    Returns:
        Surviving headlines in document order

    Raises:
        AgendaError: the first predicate failure, with `node` set to the
            headline being tested. No partial result is returned.
    """
    match_specs = list(match_specs)
    filter_specs = list(filter_specs)

    selected = []
    visited = 0
    for node in walk(tree):
        visited += 1
        try:
            keep = matches(node, match_specs, filter_specs)
        except AgendaError as e:
            if e.node is None:
                e.node = node
            logger.debug(f"Predicate failed on {node!r}: {e}")
            raise
        if keep:
            selected.append(node)

    logger.debug(f"Filtered {visited} headlines down to {len(selected)}")
    return selected
