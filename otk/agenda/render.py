"""
Entry rendering.

Turns a DecoratedHeadline into a DecoratedEntry: one styled line

    TODO Buy milk :home:errand:

plus an attribute map carried next to the text rather than inside it.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence

from rich.text import Text

from otk.agenda.core import (
    AgendaStyles,
    DecoratedEntry,
    DecoratedHeadline,
    clean_properties,
)

TAG_SEPARATOR = ":"


def entry_attributes(decorated: DecoratedHeadline) -> Dict[str, Any]:
    """
    Build the attribute map for an entry.

    Parser properties come first (keys normalized, back-references
    dropped); the headline's own fields win on a name clash.
    """
    attributes = clean_properties(decorated.properties)
    attributes.update({
        "level": decorated.level,
        "title": decorated.title.plain,
        "todo_keyword": decorated.todo_keyword,
        "tags": list(decorated.tags),
        "scheduled": decorated.scheduled,
        "deadline": decorated.deadline,
        "category": decorated.category,
        "status": decorated.status.value if decorated.status else None,
    })
    return attributes


def format_tags(tags: Sequence[str], style: Optional[str] = None) -> Optional[Text]:
    """':a:b:' for ['a', 'b']; None when there are no tags."""
    if not tags:
        return None
    joined = TAG_SEPARATOR + TAG_SEPARATOR.join(tags) + TAG_SEPARATOR
    if style:
        return Text(joined, style=style)
    return Text(joined)


def compose(parts: Iterable[Optional[Text]]) -> Text:
    """Join the present parts with single spaces, keeping their spans."""
    return Text(" ").join(part for part in parts if part is not None)


def render(decorated: DecoratedHeadline, styles: Optional[AgendaStyles] = None) -> DecoratedEntry:
    """Render one decorated headline into a DecoratedEntry."""
    styles = styles or AgendaStyles()
    text = compose([
        decorated.todo_keyword_text,
        decorated.title,
        format_tags(decorated.tags, styles.tag_style),
    ])
    return DecoratedEntry(text=text, attributes=entry_attributes(decorated))


def render_all(
    decorated: Iterable[DecoratedHeadline],
    styles: Optional[AgendaStyles] = None,
) -> List[DecoratedEntry]:
    """Render a sequence, keeping its order."""
    return [render(d, styles) for d in decorated]
