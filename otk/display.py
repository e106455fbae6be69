"""
Console output for agendas.

Thin glue between the agenda pipeline and a rich Console: builds a themed
console from config, joins rendered entries into one block and prints it.
Theme names used by the default styles (agenda.todo, agenda.tags, ...)
are resolved here, at print time.
"""
from typing import List, Optional, Sequence

from rich.console import Console
from rich.text import Text
from rich.theme import Theme

from otk.agenda.core import DecoratedEntry
from otk.config import OtkConfig, get_config


def make_theme(config: Optional[OtkConfig] = None) -> Theme:
    """Theme with the configured agenda style names."""
    config = config or get_config()
    return Theme(dict(config.theme))


def make_console(config: Optional[OtkConfig] = None, **kwargs) -> Console:
    """
    Create a console that knows the agenda theme.

    Extra keyword arguments go straight to rich.console.Console.
    """
    config = config or get_config()
    kwargs.setdefault("no_color", not config.color_output)
    return Console(theme=make_theme(config), **kwargs)


def join_entries(entries: Sequence[DecoratedEntry], header: Optional[str] = None) -> Text:
    """Aggregate entries into a single block, one per line."""
    lines: List[Text] = []
    if header:
        lines.append(Text(header, style="bold underline"))
    lines.extend(entry.text for entry in entries)
    return Text("\n").join(lines)


def print_agenda(
    entries: Sequence[DecoratedEntry],
    console: Optional[Console] = None,
    header: Optional[str] = None,
) -> Text:
    """
    Print an agenda and return the printed block.

    Usable as a finalizer: build_agenda(..., finalize=print_agenda).
    """
    console = console or make_console()
    block = join_entries(entries, header=header)
    if entries:
        console.print(block)
    else:
        console.print(Text("No entries.", style="dim"))
    return block
