"""
Predicate library for agenda selection.

Predicates are plain functions: (node, *args) -> bool. They are bound to
their extra arguments by a PredicateSpec (Direct / WithArgs) and combined
by the tree filter.

Arguments are validated before the node is looked at, so a malformed
argument fails even on nodes the predicate would not apply to.
"""

import operator
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Iterable, Optional, Union

from otk.agenda.core import Direct, InvalidArgumentError, WithArgs
from otk.dates import to_absolute

if TYPE_CHECKING:
    from otk.models import HeadlineNode


class DateType(str, Enum):
    """Which planning timestamp a date predicate looks at."""
    SCHEDULED = "scheduled"
    DEADLINE = "deadline"


COMPARATORS = {
    "<": operator.lt,
    "<=": operator.le,
    "=": operator.eq,
    "==": operator.eq,
    "!=": operator.ne,
    ">": operator.gt,
    ">=": operator.ge,
}

Comparator = Union[str, Callable[[int, int], bool]]

_COLLECTIONS = (list, tuple, set, frozenset)


def resolve_comparator(comparator: Comparator) -> Callable[[int, int], bool]:
    """Turn an operator name or callable into a comparison function."""
    if isinstance(comparator, str):
        try:
            return COMPARATORS[comparator.strip()]
        except KeyError:
            raise InvalidArgumentError(
                f"Unknown comparator {comparator!r}; expected one of {sorted(COMPARATORS)}",
                comparator,
            ) from None
    if not callable(comparator):
        raise InvalidArgumentError(f"Comparator is not callable: {comparator!r}", comparator)
    return comparator


def _string_set(value: Any, what: str) -> Optional[frozenset]:
    """
    Validate a string-or-collection-of-strings argument.

    Returns None for None, else a frozenset of strings.
    """
    if value is None:
        return None
    if isinstance(value, str):
        return frozenset([value])
    if isinstance(value, _COLLECTIONS) and all(isinstance(v, str) for v in value):
        return frozenset(value)
    raise InvalidArgumentError(f"Invalid {what} argument: {value!r}", value)


def _date_type(date_type: Union[str, DateType]) -> DateType:
    try:
        return DateType(date_type)
    except ValueError:
        raise InvalidArgumentError(
            f"Invalid date type {date_type!r}; expected 'scheduled' or 'deadline'",
            date_type,
        ) from None


# =============================================================================
# Predicates
# =============================================================================

def todo_predicate(node: "HeadlineNode", keywords: Union[str, Iterable[str], None] = None) -> bool:
    """
    Match headlines carrying a todo keyword.

    - keywords None: any keyword matches
    - keywords a string: exact match
    - keywords a list/tuple/set of strings: membership

    Raises:
        InvalidArgumentError: for any other keywords shape
    """
    wanted = _string_set(keywords, "keywords")
    if not node.todo_keyword:
        return False
    if wanted is None:
        return True
    return node.todo_keyword in wanted


def date_predicate(
    node: "HeadlineNode",
    date_type: Union[str, DateType],
    comparator: Optional[Comparator] = None,
    target: Union[str, int, date, None] = None,
) -> bool:
    """
    Match headlines by a planning date.

    Without a comparator this is a presence check. With one, the node's
    date and the target are both turned into absolute day numbers and
    compared as comparator(node_day, target_day).

    Args:
        node: Headline to test
        date_type: 'scheduled' or 'deadline'
        comparator: Operator name ('<', '<=', '=', '!=', '>', '>=') or a
            callable taking two day numbers
        target: 'YYYY-MM-DD' string, absolute day number or date

    Raises:
        InvalidArgumentError: bad date type, comparator or target
        UnsupportedDateKindError: the node's timestamp is not active/inactive
    """
    kind = _date_type(date_type)

    compare = None
    target_day = None
    if comparator is not None:
        compare = resolve_comparator(comparator)
        if target is None:
            raise InvalidArgumentError(
                f"Comparator {comparator!r} given without a target date", target
            )
        target_day = to_absolute(target)
        if target_day is None:
            raise InvalidArgumentError(f"Unusable target date: {target!r}", target)

    stamp = node.scheduled if kind is DateType.SCHEDULED else node.deadline
    if stamp is None:
        return False
    if compare is None:
        return True

    return bool(compare(stamp.absolute_day(), target_day))


def tags_predicate(node: "HeadlineNode", tags: Union[str, Iterable[str]], mode: str = "any") -> bool:
    """
    Match headlines by their own tags.

    Modes:
    - 'any': at least one of the tags is present
    - 'all': every tag is present
    """
    wanted = _string_set(tags, "tags")
    if wanted is None:
        raise InvalidArgumentError("tags_predicate requires tags", tags)
    if mode not in ("any", "all"):
        raise InvalidArgumentError(f"Invalid tags mode: {mode!r}", mode)

    present = set(node.tags)
    if mode == "all":
        return wanted <= present
    return bool(wanted & present)


def category_predicate(node: "HeadlineNode", categories: Union[str, Iterable[str]]) -> bool:
    """Match headlines whose category is one of `categories`."""
    wanted = _string_set(categories, "categories")
    if wanted is None:
        raise InvalidArgumentError("category_predicate requires categories", categories)
    return node.category is not None and node.category in wanted


def level_predicate(node: "HeadlineNode", comparator: Comparator, level: int) -> bool:
    """Match headlines by outline depth, e.g. level_predicate(node, '<=', 2)."""
    compare = resolve_comparator(comparator)
    if isinstance(level, bool) or not isinstance(level, int):
        raise InvalidArgumentError(f"Invalid level: {level!r}", level)
    return bool(compare(node.level, level))


# =============================================================================
# Spec builders
# =============================================================================

def todo(*keywords: str) -> Union[Direct, WithArgs]:
    """Spec for todo_predicate; no keywords means any keyword."""
    if not keywords:
        return Direct(todo_predicate)
    if len(keywords) == 1:
        return WithArgs(todo_predicate, (keywords[0],))
    return WithArgs(todo_predicate, (list(keywords),))


def scheduled(comparator: Optional[Comparator] = None, target: Any = None) -> WithArgs:
    """Spec for date_predicate on the scheduled date."""
    if comparator is None:
        return WithArgs(date_predicate, (DateType.SCHEDULED,))
    return WithArgs(date_predicate, (DateType.SCHEDULED, comparator, target))


def deadline(comparator: Optional[Comparator] = None, target: Any = None) -> WithArgs:
    """Spec for date_predicate on the deadline."""
    if comparator is None:
        return WithArgs(date_predicate, (DateType.DEADLINE,))
    return WithArgs(date_predicate, (DateType.DEADLINE, comparator, target))


def tagged(*tags: str, mode: str = "any") -> WithArgs:
    """Spec for tags_predicate."""
    return WithArgs(tags_predicate, (list(tags), mode))


def in_category(*categories: str) -> WithArgs:
    """Spec for category_predicate."""
    return WithArgs(category_predicate, (list(categories),))


def at_level(comparator: Comparator, level: int) -> WithArgs:
    """Spec for level_predicate."""
    return WithArgs(level_predicate, (comparator, level))
