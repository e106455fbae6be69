"""
Tests for entry rendering: composition, tag formatting and attributes.
"""
from rich.text import Span, Text

from otk.agenda import (
    AgendaStyles,
    DecoratedEntry,
    decorate,
    entry_attributes,
    format_tags,
    render,
    render_all,
)

DONE = frozenset({"DONE"})


class TestFormatTags:
    """Tests for format_tags."""

    def test_colon_wrapped(self):
        assert format_tags(["a", "b"]).plain == ":a:b:"

    def test_single_tag(self):
        assert format_tags(["home"]).plain == ":home:"

    def test_no_tags_is_none(self):
        assert format_tags([]) is None
        assert format_tags(()) is None

    def test_style(self):
        assert format_tags(["a"], "magenta").style == "magenta"


class TestRenderComposition:
    """The visible line is keyword, title and tags joined by single spaces."""

    def test_full_line(self, node_factory, today):
        node = node_factory("Buy milk", todo="TODO", tags=["home", "errand"])
        entry = render(decorate(node, today, DONE))

        assert isinstance(entry, DecoratedEntry)
        assert entry.plain == "TODO Buy milk :home:errand:"
        assert str(entry) == "TODO Buy milk :home:errand:"

    def test_title_only(self, node_factory, today):
        entry = render(decorate(node_factory("Just a title"), today, DONE))
        assert entry.plain == "Just a title"

    def test_keyword_without_tags(self, node_factory, today):
        entry = render(decorate(node_factory("Call mom", todo="NEXT"), today, DONE))
        assert entry.plain == "NEXT Call mom"

    def test_tags_without_keyword(self, node_factory, today):
        entry = render(decorate(node_factory("Notes", tags=["ref"]), today, DONE))
        assert entry.plain == "Notes :ref:"

    def test_styles_survive_composition(self, node_factory, today):
        node = node_factory("Buy milk", todo="TODO", tags=["home", "errand"], scheduled="2024-01-20")
        entry = render(decorate(node, today, DONE))

        assert Span(0, 4, "agenda.todo") in entry.text.spans
        assert Span(5, 13, "agenda.scheduled") in entry.text.spans
        assert Span(14, 27, "agenda.tags") in entry.text.spans

    def test_custom_tag_style(self, node_factory, today):
        styles = AgendaStyles(tag_style="cyan")
        node = node_factory("Notes", tags=["ref"])
        entry = render(decorate(node, today, DONE, styles), styles)
        assert entry.text.spans == [Span(6, 11, "cyan")]

    def test_attributes_are_not_in_text(self, node_factory, today):
        node = node_factory("Plain", category="secret-category")
        entry = render(decorate(node, today, DONE))
        assert "secret-category" not in entry.plain
        assert entry.attributes["category"] == "secret-category"

    def test_rich_protocol(self, node_factory, today):
        entry = render(decorate(node_factory("Plain"), today, DONE))
        assert isinstance(entry.__rich__(), Text)


class TestEntryAttributes:
    """Attribute maps are built fresh and never leak back-references."""

    def test_known_fields(self, sample_outline, today):
        report = sample_outline.headlines[0].children[0]
        attributes = entry_attributes(decorate(report, today, DONE))

        assert attributes["level"] == 2
        assert attributes["title"] == "Write report"
        assert attributes["todo_keyword"] == "TODO"
        assert attributes["tags"] == ["work", "writing"]
        assert attributes["scheduled"] == report.scheduled
        assert attributes["deadline"] is None
        assert attributes["category"] == "work"
        assert attributes["status"] == "due-today"

    def test_no_parent_and_no_prefixed_keys(self, node_factory, today):
        node = node_factory(properties={
            ":CUSTOM_ID": "abc",
            ":parent": object(),
            "parent": "also dropped",
            "::EFFORT": "1:00",
        })
        attributes = render(decorate(node, today, DONE)).attributes

        assert "parent" not in attributes
        assert not any(key.startswith(":") for key in attributes)
        assert attributes["CUSTOM_ID"] == "abc"
        assert attributes["EFFORT"] == "1:00"

    def test_fields_win_over_properties(self, node_factory, today):
        node = node_factory("Real title", properties={":title": "shadow"})
        attributes = render(decorate(node, today, DONE)).attributes
        assert attributes["title"] == "Real title"

    def test_no_children_in_attributes(self, sample_outline, today):
        projects = sample_outline.headlines[0]
        attributes = render(decorate(projects, today, DONE)).attributes
        assert "children" not in attributes

    def test_fresh_map_per_entry(self, node_factory, today):
        decorated = decorate(node_factory(tags=["a"]), today, DONE)
        first = render(decorated).attributes
        first["tags"].append("mutated")
        assert render(decorated).attributes["tags"] == ["a"]


class TestRenderAll:
    """Tests for render_all."""

    def test_keeps_order(self, sample_outline, today):
        from otk.agenda import walk
        decorated = [decorate(n, today, DONE) for n in walk(sample_outline)]
        entries = render_all(decorated)
        assert [e.attributes["title"] for e in entries] == [d.title.plain for d in decorated]
