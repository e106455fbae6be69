"""
Tests for console output of agendas.
"""
from io import StringIO

from rich.console import Console
from rich.text import Text

from otk.agenda import build_agenda, todo
from otk.config import OtkConfig
from otk.display import join_entries, make_console, make_theme, print_agenda

DONE = frozenset({"DONE"})


def capture_console(config=None):
    return make_console(config or OtkConfig(), file=StringIO(), width=80, color_system=None)


class TestTheme:
    """Tests for make_theme / make_console."""

    def test_theme_has_agenda_styles(self):
        theme = make_theme(OtkConfig())
        assert "agenda.todo" in theme.styles
        assert "agenda.tags" in theme.styles

    def test_console_resolves_agenda_styles(self):
        console = capture_console()
        assert str(console.get_style("agenda.todo")) == "bold red"

    def test_no_color_follows_config(self):
        console = make_console(OtkConfig(color_output=False), file=StringIO())
        assert console.no_color is True

    def test_explicit_kwargs_win(self):
        console = make_console(OtkConfig(color_output=False), file=StringIO(), no_color=False)
        assert console.no_color is False


class TestJoinEntries:
    """Entries are aggregated one per line."""

    def test_lines(self, sample_outline, today):
        entries = build_agenda(sample_outline, [todo("TODO")], [], today, DONE)
        block = join_entries(entries)

        assert isinstance(block, Text)
        assert block.plain == "TODO Write report :work:writing:\nTODO Buy milk :home:errand:"

    def test_header(self, sample_outline, today):
        entries = build_agenda(sample_outline, [todo("WAITING")], [], today, DONE)
        block = join_entries(entries, header="Waiting")
        assert block.plain == "Waiting\nWAITING Reply from Bob"

    def test_empty(self):
        assert join_entries([]).plain == ""


class TestPrintAgenda:
    """print_agenda works as a pipeline finalizer."""

    def test_prints_entries(self, sample_outline, today):
        console = capture_console()
        block = build_agenda(
            sample_outline,
            [todo("TODO")],
            [],
            today,
            DONE,
            finalize=lambda entries: print_agenda(entries, console=console),
        )

        output = console.file.getvalue()
        assert "TODO Write report :work:writing:" in output
        assert "TODO Buy milk :home:errand:" in output
        assert block.plain.count("\n") == 1

    def test_empty_agenda(self):
        console = capture_console()
        print_agenda([], console=console)
        assert "No entries." in console.file.getvalue()

    def test_accepts_plain_console(self, sample_outline, today):
        console = Console(file=StringIO(), width=80, color_system=None)
        entries = build_agenda(sample_outline, [todo("NEXT")], [], today, DONE)
        print_agenda(entries, console=console, header="Next")
        assert console.file.getvalue().splitlines() == ["Next", "NEXT Collect figures"]
