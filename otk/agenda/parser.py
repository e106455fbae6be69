"""
YAML parser for agenda definitions.

Parses named agenda definitions into match/filter spec lists.

Example YAML:

    next-actions:
      description: Open NEXT items tagged work
      match:
        - todo: NEXT
        - tags:
            any: [work]
      filter:
        - done: true
        - scheduled:
            op: ">"
            date: "+7d"

    overdue:
      match:
        - deadline: {op: "<", date: today}
      filter:
        - done: true

Relative dates ('today', '+3d', '-1w') are resolved against the context's
today when the definition is parsed, never against the clock.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

import yaml

from otk.agenda.core import AgendaContext, AgendaError, PredicateSpec, WithArgs
from otk.agenda.pipeline import Finalizer, run_agenda
from otk.agenda.predicates import (
    COMPARATORS,
    DateType,
    at_level,
    deadline,
    in_category,
    scheduled,
    tagged,
    todo,
    todo_predicate,
)
from otk.dates import resolve_relative

if TYPE_CHECKING:
    from otk.agenda.filter import Tree

logger = logging.getLogger(__name__)


class AgendaParseError(AgendaError):
    """Error parsing an agenda definition."""
    pass


@dataclass
class AgendaDefinition:
    """A named pair of match and filter spec lists."""
    name: str
    match: List[PredicateSpec] = field(default_factory=list)
    filter: List[PredicateSpec] = field(default_factory=list)
    description: str = ""

    def evaluate(
        self,
        tree: "Tree",
        context: AgendaContext,
        finalize: Optional[Finalizer] = None,
    ) -> Any:
        """Run this definition over an outline."""
        return run_agenda(tree, self.match, self.filter, context, finalize=finalize)


def parse_agenda_file(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Parse a YAML file containing agenda definitions.

    Args:
        path: Path to YAML file

    Returns:
        Dictionary mapping agenda names to raw definitions
    """
    path = Path(path)

    if not path.exists():
        raise AgendaParseError(f"Agenda file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise AgendaParseError(f"Agenda file must contain a dictionary, got {type(data)}")

    return data


def parse_agenda(
    definition: Dict[str, Any],
    context: AgendaContext,
    name: str = "",
) -> AgendaDefinition:
    """Parse a single agenda definition against a context."""
    return AgendaParser(context).parse(definition, name=name)


class AgendaParser:
    """
    Parser for agenda definitions.

    Predicate entries:
    - todo: true | KEYWORD | [KEYWORDS] (checked against the context's
      todo keywords when it has any)
    - done: true (todo keyword is one of the context's done keywords)
    - scheduled / deadline: true | {op, date}
    - tags: [TAGS] | {any: [...]} | {all: [...]}
    - category: NAME | [NAMES]
    - level: N | {op, value}
    """

    KEYS = ("todo", "done", "scheduled", "deadline", "tags", "category", "level")

    def __init__(self, context: AgendaContext):
        self.context = context

    def parse(self, definition: Dict[str, Any], name: str = "") -> AgendaDefinition:
        """Parse a definition dictionary."""
        if not isinstance(definition, dict):
            raise AgendaParseError(f"Agenda definition must be a dictionary, got {type(definition)}")

        unknown = set(definition) - {"match", "filter", "description"}
        if unknown:
            raise AgendaParseError(f"Unknown keys in agenda {name!r}: {sorted(unknown)}")

        match = self._parse_specs(definition.get("match", []), "match")
        if not match:
            logger.warning(f"Agenda {name!r} has no match entries and will always be empty")

        return AgendaDefinition(
            name=name,
            match=match,
            filter=self._parse_specs(definition.get("filter", []), "filter"),
            description=definition.get("description", ""),
        )

    def _parse_specs(self, entries: Any, section: str) -> List[PredicateSpec]:
        if entries is None:
            return []
        if isinstance(entries, dict):
            entries = [entries]
        if not isinstance(entries, list):
            raise AgendaParseError(f"'{section}' must be a list, got {type(entries)}")

        specs = []
        for entry in entries:
            if not isinstance(entry, dict):
                raise AgendaParseError(f"Invalid {section} entry: {entry!r}")
            for key, value in entry.items():
                specs.append(self._parse_predicate(key, value))
        return specs

    def _parse_predicate(self, key: str, value: Any) -> PredicateSpec:
        """Parse one 'key: value' predicate entry."""
        if key == "todo":
            if value is True:
                return todo()
            if isinstance(value, str):
                value = [value]
            if not value or not _is_string_list(value):
                raise AgendaParseError(f"Invalid todo value: {value!r}")
            self._check_keywords(value)
            return todo(*value)

        if key == "done":
            if value is not True:
                raise AgendaParseError(f"'done' only accepts true, got {value!r}")
            return WithArgs(todo_predicate, (sorted(self.context.done_keywords),))

        if key in (DateType.SCHEDULED.value, DateType.DEADLINE.value):
            return self._parse_date(key, value)

        if key == "tags":
            if isinstance(value, str):
                return tagged(value)
            if _is_string_list(value):
                return tagged(*value)
            if isinstance(value, dict) and len(value) == 1:
                mode, tags = next(iter(value.items()))
                if mode in ("any", "all") and _is_string_list(tags):
                    return tagged(*tags, mode=mode)
            raise AgendaParseError(f"Invalid tags value: {value!r}")

        if key == "category":
            if isinstance(value, str):
                return in_category(value)
            if _is_string_list(value):
                return in_category(*value)
            raise AgendaParseError(f"Invalid category value: {value!r}")

        if key == "level":
            if _is_int(value):
                return at_level("=", value)
            if isinstance(value, dict) and _is_int(value.get("value")):
                return at_level(self._operator(value.get("op", "=")), value["value"])
            raise AgendaParseError(f"Invalid level value: {value!r}")

        raise AgendaParseError(f"Unknown predicate {key!r}; expected one of {list(self.KEYS)}")

    def _parse_date(self, key: str, value: Any) -> PredicateSpec:
        build = scheduled if key == DateType.SCHEDULED.value else deadline
        if value is True:
            return build()
        if not isinstance(value, dict) or "date" not in value:
            raise AgendaParseError(f"Invalid {key} value: {value!r}")

        op = self._operator(value.get("op", "="))
        target = resolve_relative(str(value["date"]), self.context.today)
        if target is None:
            raise AgendaParseError(f"Invalid {key} date: {value['date']!r}")
        return build(op, target)

    def _check_keywords(self, keywords: List[str]) -> None:
        known = self.context.todo_keywords
        if not known:
            return
        unknown = [k for k in keywords if k not in known]
        if unknown:
            raise AgendaParseError(f"Unknown todo keywords {unknown}; configured: {sorted(known)}")

    @staticmethod
    def _operator(op: Any) -> str:
        op = str(op).strip()
        if op not in COMPARATORS:
            raise AgendaParseError(f"Unknown operator {op!r}; expected one of {sorted(COMPARATORS)}")
        return op


def _is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
