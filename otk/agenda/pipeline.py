"""
Agenda pipeline: filter -> decorate -> render -> finalize.

A run is a single synchronous pass. Filtering completes (or fails) before
anything is decorated, so a failing predicate never yields a partial
agenda.
"""

import logging
from datetime import date
from typing import AbstractSet, Any, Callable, List, Optional, Sequence, Union

from otk.agenda.core import (
    AgendaContext,
    AgendaStyles,
    DecoratedEntry,
    PredicateSpec,
    as_spec,
    keyword_set,
)
from otk.agenda.decorate import decorate, resolve_today
from otk.agenda.filter import Tree, filter_tree
from otk.agenda.render import render

logger = logging.getLogger(__name__)

Finalizer = Callable[[List[DecoratedEntry]], Any]


def build_agenda(
    tree: Tree,
    match_specs: Sequence[PredicateSpec],
    filter_specs: Sequence[PredicateSpec],
    today: Union[int, str, date],
    done_keywords: Union[str, AbstractSet[str]],
    styles: Optional[AgendaStyles] = None,
    finalize: Optional[Finalizer] = None,
) -> Any:
    """
    Build an agenda from an outline.

    Args:
        tree: Outline or top-level headlines
        match_specs: Specs of which at least one must hold
        filter_specs: Specs of which none may hold
        today: Absolute day number, date or ISO string; checked before
            any headline is visited
        done_keywords: Keywords that count as finished
        styles: Style lookups; defaults to AgendaStyles()
        finalize: Collaborator receiving the entry list

    Returns:
        The list of DecoratedEntry, or whatever `finalize` returns
    """
    today = resolve_today(today)
    done_keywords = keyword_set(done_keywords)
    styles = styles or AgendaStyles()
    match_specs = [as_spec(s) for s in match_specs]
    filter_specs = [as_spec(s) for s in filter_specs]

    nodes = filter_tree(tree, match_specs, filter_specs)
    entries = [render(decorate(node, today, done_keywords, styles), styles) for node in nodes]
    logger.debug(f"Rendered {len(entries)} agenda entries")

    if finalize is not None:
        return finalize(entries)
    return entries


def run_agenda(
    tree: Tree,
    match_specs: Sequence[PredicateSpec],
    filter_specs: Sequence[PredicateSpec],
    context: AgendaContext,
    finalize: Optional[Finalizer] = None,
) -> Any:
    """build_agenda() with the ambient inputs taken from a context."""
    return build_agenda(
        tree,
        match_specs,
        filter_specs,
        today=context.today,
        done_keywords=context.done_keywords,
        styles=context.styles,
        finalize=finalize,
    )
