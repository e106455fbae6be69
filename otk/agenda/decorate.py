"""
Headline decoration.

Produces a DecoratedHeadline: a detached copy of the fields rendering
needs, with the title styled by scheduling status and the todo keyword
styled by its own lookup. The source headline is never touched.
"""

from datetime import date
from typing import AbstractSet, Optional, Union

from rich.text import Text

from otk.agenda.core import (
    AgendaStyles,
    DecoratedHeadline,
    InvalidArgumentError,
    Status,
    clean_properties,
    keyword_set,
)
from otk.dates import to_absolute
from otk.models import HeadlineNode


def resolve_today(today: Union[int, str, date]) -> int:
    """Absolute day number for `today`; unusable values raise InvalidArgumentError."""
    day = to_absolute(today)
    if day is None:
        raise InvalidArgumentError(f"Unusable value for today: {today!r}", today)
    return day


def classify(
    node: HeadlineNode,
    today: Union[int, str, date],
    done_keywords: Union[str, AbstractSet[str]],
) -> Optional[Status]:
    """
    Scheduling status of a headline.

    Only headlines scheduled with an active or inactive timestamp get a
    status; everything else returns None.
    """
    today = resolve_today(today)
    done_keywords = keyword_set(done_keywords)
    stamp = node.scheduled
    if stamp is None or not stamp.kind.comparable:
        return None
    if node.todo_keyword is not None and node.todo_keyword in done_keywords:
        return Status.DONE
    if stamp.absolute_day() == today:
        return Status.DUE_TODAY
    return Status.SCHEDULED


def style_keyword(keyword: Optional[str], styles: AgendaStyles) -> Optional[Text]:
    """Styled copy of a todo keyword; unmapped keywords stay unstyled."""
    if keyword is None:
        return None
    style = styles.keyword_style(keyword)
    if style:
        return Text(keyword, style=style)
    return Text(keyword)


def decorate(
    node: HeadlineNode,
    today: Union[int, str, date],
    done_keywords: Union[str, AbstractSet[str]],
    styles: Optional[AgendaStyles] = None,
) -> DecoratedHeadline:
    """
    Decorate one headline.

    Args:
        node: Source headline (left unmodified)
        today: Absolute day number (or date) to classify against
        done_keywords: Keywords that count as finished
        styles: Style lookups; defaults to AgendaStyles()

    Returns:
        A new DecoratedHeadline without children or parent
    """
    today = resolve_today(today)
    styles = styles or AgendaStyles()
    status = classify(node, today, done_keywords)

    title = node.title.copy()
    if status is not None:
        style = styles.status_style(status)
        if style:
            title.stylize(style)

    return DecoratedHeadline(
        level=node.level,
        title=title,
        todo_keyword=node.todo_keyword,
        todo_keyword_text=style_keyword(node.todo_keyword, styles),
        tags=tuple(node.tags),
        scheduled=node.scheduled,
        deadline=node.deadline,
        category=node.category,
        status=status,
        properties=clean_properties(node.properties),
    )
