"""
Outline data model.

An outline is a tree of headline nodes as handed over by an external
parser. Nodes are immutable for the duration of an agenda run; nothing in
otk edits them in place.

The model deliberately has no parent attribute. Code that needs ancestor
context gets it from otk.agenda.filter.walk_with_ancestors().
"""
from dataclasses import dataclass, field
import datetime as dt
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Tuple

from rich.text import Text

from otk.dates import DATE_PATTERN, absolute_day


class TimestampKind(str, Enum):
    """Timestamp markup kinds. Only ACTIVE and INACTIVE are comparable."""
    ACTIVE = "active"
    INACTIVE = "inactive"
    ACTIVE_RANGE = "active-range"
    INACTIVE_RANGE = "inactive-range"
    DIARY = "diary"

    @property
    def comparable(self) -> bool:
        return self in (TimestampKind.ACTIVE, TimestampKind.INACTIVE)


@dataclass(frozen=True)
class Timestamp:
    """A planning timestamp (SCHEDULED or DEADLINE) on a headline."""
    kind: TimestampKind
    date: dt.date
    time: Optional[dt.time] = None

    def absolute_day(self) -> int:
        """
        Absolute day number of this timestamp.

        Raises:
            UnsupportedDateKindError: if the kind is not active/inactive
        """
        if not self.kind.comparable:
            from otk.agenda.core import UnsupportedDateKindError
            raise UnsupportedDateKindError(self.kind.value)
        return absolute_day(self.date)

    @classmethod
    def parse(cls, value: str, kind: Any = TimestampKind.ACTIVE) -> "Timestamp":
        """
        Parse 'YYYY-MM-DD' with an optional ' HH:MM' suffix.

        Examples:
            Timestamp.parse("2024-01-10")
            Timestamp.parse("2024-01-10 09:30", kind="inactive")
        """
        match = DATE_PATTERN.match(value.strip())
        if not match:
            raise ValueError(f"Not a timestamp: {value!r}")

        parsed_date = dt.date(*(int(g) for g in match.groups()))
        parsed_time = None
        rest = value.strip()[match.end():].split()
        for token in rest:
            if ":" in token:
                parsed_time = dt.datetime.strptime(token, "%H:%M").time()
                break

        return cls(kind=TimestampKind(kind), date=parsed_date, time=parsed_time)

    def __str__(self) -> str:
        stamp = self.date.isoformat()
        if self.time:
            stamp = f"{stamp} {self.time.strftime('%H:%M')}"
        if self.kind in (TimestampKind.INACTIVE, TimestampKind.INACTIVE_RANGE):
            return f"[{stamp}]"
        return f"<{stamp}>"


@dataclass(frozen=True)
class HeadlineNode:
    """
    One headline in the outline.

    `properties` holds whatever extra attributes the parser chose to
    forward. Their keys may still carry the parser's ':' prefix and may
    include a 'parent' back-reference; renderers must clean them.
    """
    level: int
    title: Text
    todo_keyword: Optional[str] = None
    tags: Tuple[str, ...] = ()
    scheduled: Optional[Timestamp] = None
    deadline: Optional[Timestamp] = None
    category: Optional[str] = None
    children: Tuple["HeadlineNode", ...] = ()
    properties: Dict[str, Any] = field(default_factory=dict)

    def __iter__(self) -> Iterator["HeadlineNode"]:
        return iter(self.children)

    @property
    def raw_title(self) -> str:
        return self.title.plain

    @classmethod
    def from_dict(cls, data: Dict[str, Any], level: int = 1) -> "HeadlineNode":
        """
        Build a headline (and its subtree) from plain data.

        Dates may be 'YYYY-MM-DD' strings (active) or dicts with
        'date' and 'kind' keys. Children inherit level + 1 unless they
        say otherwise.
        """
        level = data.get("level", level)
        children = tuple(
            cls.from_dict(child, level=level + 1)
            for child in data.get("children", [])
        )
        return cls(
            level=level,
            title=Text(data.get("title", "")),
            todo_keyword=data.get("todo") or data.get("todo_keyword"),
            tags=tuple(data.get("tags", ())),
            scheduled=_timestamp_from(data.get("scheduled")),
            deadline=_timestamp_from(data.get("deadline")),
            category=data.get("category"),
            children=children,
            properties=dict(data.get("properties", {})),
        )

    def __repr__(self) -> str:
        keyword = f"{self.todo_keyword} " if self.todo_keyword else ""
        return f"HeadlineNode(level={self.level}, {keyword}{self.title.plain!r})"


@dataclass(frozen=True)
class Outline:
    """A parsed outline document: an ordered forest of top-level headlines."""
    headlines: Tuple[HeadlineNode, ...] = ()
    title: Optional[str] = None

    def __iter__(self) -> Iterator[HeadlineNode]:
        return iter(self.headlines)

    def __len__(self) -> int:
        return len(self.headlines)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Outline":
        """Build an outline from {'title': ..., 'headlines': [...]}."""
        return cls(
            headlines=tuple(HeadlineNode.from_dict(h) for h in data.get("headlines", [])),
            title=data.get("title"),
        )


def _timestamp_from(value: Any) -> Optional[Timestamp]:
    if value is None or isinstance(value, Timestamp):
        return value
    if isinstance(value, dt.date):
        return Timestamp(TimestampKind.ACTIVE, value)
    if isinstance(value, dict):
        return Timestamp.parse(str(value["date"]), kind=value.get("kind", "active"))
    return Timestamp.parse(str(value))
