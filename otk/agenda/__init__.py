"""
OTK Agenda System - filtered, decorated views over an outline

An agenda run selects headlines, decorates them and renders each into a
styled line with attribute metadata:

1. Select: OR over match specs, then NONE over filter specs
2. Decorate: status (done / due today / scheduled) and keyword styles
3. Render: 'KEYWORD Title :tags:' plus an attribute map

Example:
    from otk.agenda import AgendaContext, build_agenda, todo, scheduled

    entries = build_agenda(
        outline,
        match_specs=[todo("TODO", "NEXT")],
        filter_specs=[scheduled(">", "2024-02-01")],
        today=context.today,
        done_keywords={"DONE"},
    )

    for entry in entries:
        print(entry.plain)
"""

from otk.agenda.core import (
    AgendaError,
    InvalidArgumentError,
    UnsupportedDateKindError,
    Status,
    PredicateSpec,
    Direct,
    WithArgs,
    as_spec,
    AgendaStyles,
    AgendaContext,
    DecoratedHeadline,
    DecoratedEntry,
)

from otk.agenda.predicates import (
    DateType,
    todo_predicate,
    date_predicate,
    tags_predicate,
    category_predicate,
    level_predicate,
    todo,
    scheduled,
    deadline,
    tagged,
    in_category,
    at_level,
)

from otk.agenda.filter import walk, walk_with_ancestors, matches, filter_tree
from otk.agenda.decorate import classify, decorate
from otk.agenda.render import entry_attributes, format_tags, render, render_all
from otk.agenda.pipeline import build_agenda, run_agenda
from otk.agenda.parser import (
    AgendaDefinition,
    AgendaParseError,
    AgendaParser,
    parse_agenda,
    parse_agenda_file,
)
from otk.agenda.registry import AgendaRegistry, AgendaNotFoundError

__all__ = [
    # Core
    "AgendaError",
    "InvalidArgumentError",
    "UnsupportedDateKindError",
    "Status",
    "PredicateSpec",
    "Direct",
    "WithArgs",
    "as_spec",
    "AgendaStyles",
    "AgendaContext",
    "DecoratedHeadline",
    "DecoratedEntry",
    # Predicates
    "DateType",
    "todo_predicate",
    "date_predicate",
    "tags_predicate",
    "category_predicate",
    "level_predicate",
    "todo",
    "scheduled",
    "deadline",
    "tagged",
    "in_category",
    "at_level",
    # Pipeline stages
    "walk",
    "walk_with_ancestors",
    "matches",
    "filter_tree",
    "classify",
    "decorate",
    "entry_attributes",
    "format_tags",
    "render",
    "render_all",
    "build_agenda",
    "run_agenda",
    # Definitions
    "AgendaDefinition",
    "AgendaParseError",
    "AgendaParser",
    "parse_agenda",
    "parse_agenda_file",
    "AgendaRegistry",
    "AgendaNotFoundError",
]
