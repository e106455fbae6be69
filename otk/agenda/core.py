"""
Core agenda abstractions.

This module defines the fundamental types shared by the agenda pipeline:
- AgendaError and friends: failures raised by predicates and definitions
- PredicateSpec: a predicate, optionally with bound extra arguments
- AgendaStyles: style lookups used by decoration and rendering
- AgendaContext: the explicit ambient inputs of one agenda run
- DecoratedHeadline / DecoratedEntry: the decorated copy of a node and
  its rendered form
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    FrozenSet,
    Iterable,
    Optional,
    Tuple,
    Union,
)

from rich.text import Text

from otk.dates import to_absolute, today_absolute

if TYPE_CHECKING:
    from otk.config import OtkConfig
    from otk.models import HeadlineNode, Timestamp


class AgendaError(Exception):
    """Base class for agenda failures."""

    node: Optional["HeadlineNode"] = None


class InvalidArgumentError(AgendaError, ValueError):
    """A predicate received a malformed argument."""

    def __init__(self, message: str, value: Any = None):
        super().__init__(message)
        self.value = value


class UnsupportedDateKindError(AgendaError):
    """A timestamp kind other than active/inactive was asked to compare."""

    def __init__(self, kind: str):
        super().__init__(f"Unsupported timestamp kind for comparison: {kind}")
        self.kind = kind


class Status(str, Enum):
    """Derived status of a scheduled headline."""
    DONE = "done"
    DUE_TODAY = "due-today"
    SCHEDULED = "scheduled"


# =============================================================================
# Predicate specs
# =============================================================================

PredicateFn = Callable[..., bool]


class PredicateSpec:
    """
    A predicate as configured by the caller.

    Two shapes exist: Direct(fn), called as fn(node), and
    WithArgs(fn, args), called as fn(node, *args).
    """

    predicate: PredicateFn

    def evaluate(self, node: "HeadlineNode") -> bool:
        raise NotImplementedError

    def __call__(self, node: "HeadlineNode") -> bool:
        return self.evaluate(node)


@dataclass(frozen=True)
class Direct(PredicateSpec):
    """A bare predicate."""
    predicate: PredicateFn

    def evaluate(self, node: "HeadlineNode") -> bool:
        return bool(self.predicate(node))

    def __repr__(self) -> str:
        return f"Direct({_name(self.predicate)})"


@dataclass(frozen=True)
class WithArgs(PredicateSpec):
    """A predicate with extra positional arguments bound after the node."""
    predicate: PredicateFn
    args: Tuple[Any, ...] = ()

    def __post_init__(self):
        if not isinstance(self.args, tuple):
            object.__setattr__(self, "args", tuple(self.args))

    def evaluate(self, node: "HeadlineNode") -> bool:
        return bool(self.predicate(node, *self.args))

    def __repr__(self) -> str:
        args = ", ".join(repr(a) for a in self.args)
        return f"WithArgs({_name(self.predicate)}, {args})"


def as_spec(value: Union[PredicateSpec, PredicateFn, tuple]) -> PredicateSpec:
    """
    Normalize caller input into a PredicateSpec.

    Accepts an existing spec, a bare callable, or a (callable, *args)
    tuple.

    Example:
        as_spec(todo_predicate)                  # Direct
        as_spec((todo_predicate, ["TODO"]))      # WithArgs
    """
    if isinstance(value, PredicateSpec):
        return value
    if isinstance(value, tuple) and value and callable(value[0]):
        if len(value) == 1:
            return Direct(value[0])
        return WithArgs(value[0], tuple(value[1:]))
    if callable(value):
        return Direct(value)
    raise InvalidArgumentError(f"Not a predicate spec: {value!r}", value)


def _name(fn: Callable) -> str:
    return getattr(fn, "__name__", repr(fn))


# =============================================================================
# Attribute keys
# =============================================================================

KEY_DELIMITER = ":"
BACK_REFERENCES = frozenset({"parent"})


def attribute_name(key: str) -> str:
    """Strip the parser's identity delimiter from an attribute key."""
    return str(key).lstrip(KEY_DELIMITER)


def clean_properties(properties: Dict[str, Any]) -> Dict[str, Any]:
    """
    Copy of `properties` with normalized keys and no back-references.

    ':parent' and 'parent' are both dropped; an empty key after
    stripping is dropped too.
    """
    cleaned = {}
    for key, value in properties.items():
        name = attribute_name(key)
        if not name or name.lower() in BACK_REFERENCES:
            continue
        cleaned[name] = value
    return cleaned


# =============================================================================
# Styles and context
# =============================================================================

DEFAULT_KEYWORD_STYLES: Dict[str, str] = {
    "TODO": "agenda.todo",
    "NEXT": "agenda.next",
    "WAITING": "agenda.waiting",
    "DONE": "agenda.done-keyword",
    "CANCELLED": "agenda.done-keyword",
}

DEFAULT_STATUS_STYLES: Dict[Status, str] = {
    Status.DONE: "agenda.done",
    Status.DUE_TODAY: "agenda.today",
    Status.SCHEDULED: "agenda.scheduled",
}

DEFAULT_TAG_STYLE = "agenda.tags"


@dataclass(frozen=True)
class AgendaStyles:
    """
    Style lookups for decoration and rendering.

    Values are rich style strings or theme style names.
    """
    keyword_styles: Dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_KEYWORD_STYLES)
    )
    status_styles: Dict[Status, str] = field(
        default_factory=lambda: dict(DEFAULT_STATUS_STYLES)
    )
    tag_style: str = DEFAULT_TAG_STYLE

    def keyword_style(self, keyword: str) -> Optional[str]:
        return self.keyword_styles.get(keyword)

    def status_style(self, status: Status) -> Optional[str]:
        return self.status_styles.get(status)

    @classmethod
    def from_config(cls, config: "OtkConfig") -> "AgendaStyles":
        return cls(
            keyword_styles=dict(config.keyword_styles),
            status_styles={Status(k): v for k, v in config.status_styles.items()},
            tag_style=config.tag_style,
        )


def keyword_set(keywords: Union[str, Iterable[str], None]) -> FrozenSet[str]:
    """
    Normalize a keyword argument into a frozenset.

    A bare string is one keyword, not a sequence of characters.
    """
    if keywords is None:
        return frozenset()
    if isinstance(keywords, str):
        return frozenset([keywords])
    try:
        result = frozenset(keywords)
    except TypeError:
        raise InvalidArgumentError(f"Invalid keywords: {keywords!r}", keywords) from None
    if not all(isinstance(k, str) for k in result):
        raise InvalidArgumentError(f"Keywords must be strings: {keywords!r}", keywords)
    return result


@dataclass(frozen=True)
class AgendaContext:
    """
    Explicit ambient inputs for one agenda run.

    Nothing in the pipeline reads the global configuration; a context is
    built once by the caller and passed down. An empty `todo_keywords`
    means any keyword is accepted in agenda definitions.
    """
    today: int
    done_keywords: FrozenSet[str] = frozenset({"DONE"})
    styles: AgendaStyles = field(default_factory=AgendaStyles)
    todo_keywords: FrozenSet[str] = frozenset()

    def __post_init__(self):
        today = to_absolute(self.today)
        if today is None:
            raise InvalidArgumentError(f"Unusable value for today: {self.today!r}", self.today)
        object.__setattr__(self, "today", today)
        object.__setattr__(self, "done_keywords", keyword_set(self.done_keywords))
        object.__setattr__(self, "todo_keywords", keyword_set(self.todo_keywords))

    @classmethod
    def create(
        cls,
        today: Union[int, str, date, None] = None,
        done_keywords: Union[str, Iterable[str]] = ("DONE",),
        styles: Optional[AgendaStyles] = None,
        todo_keywords: Union[str, Iterable[str], None] = None,
    ) -> "AgendaContext":
        """Create a context, defaulting today to the current date."""
        return cls(
            today=today_absolute() if today is None else today,
            done_keywords=keyword_set(done_keywords),
            styles=styles or AgendaStyles(),
            todo_keywords=keyword_set(todo_keywords),
        )

    @classmethod
    def from_config(
        cls,
        config: "OtkConfig",
        today: Union[int, str, date, None] = None,
    ) -> "AgendaContext":
        """Snapshot configuration into a context."""
        return cls.create(
            today=today,
            done_keywords=config.done_keywords,
            styles=AgendaStyles.from_config(config),
            todo_keywords=config.todo_keywords,
        )


# =============================================================================
# Decorated values
# =============================================================================

@dataclass(frozen=True)
class DecoratedHeadline:
    """
    A decorated copy of a headline.

    Holds only what rendering needs: no children and no parent.
    """
    level: int
    title: Text
    todo_keyword: Optional[str] = None
    todo_keyword_text: Optional[Text] = None
    tags: Tuple[str, ...] = ()
    scheduled: Optional["Timestamp"] = None
    deadline: Optional["Timestamp"] = None
    category: Optional[str] = None
    status: Optional[Status] = None
    properties: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DecoratedEntry:
    """
    A rendered agenda line.

    `text` is the visible styled string; `attributes` travels alongside
    it for the downstream renderer and never shows up in the text.
    """
    text: Text
    attributes: Dict[str, Any] = field(default_factory=dict)

    @property
    def plain(self) -> str:
        return self.text.plain

    def __str__(self) -> str:
        return self.text.plain

    def __rich__(self) -> Text:
        return self.text
