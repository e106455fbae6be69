"""
Tests for the tree filter: traversal order and match/filter semantics.
"""
import pytest

from rich.text import Text

from otk.agenda import (
    Direct,
    InvalidArgumentError,
    WithArgs,
    filter_tree,
    matches,
    scheduled,
    tagged,
    todo,
    todo_predicate,
    walk,
    walk_with_ancestors,
)
from otk.models import HeadlineNode


def always(node):
    return True


def never(node):
    return False


def titles(nodes):
    return [n.raw_title for n in nodes]


class TestWalk:
    """Tests for pre-order traversal."""

    def test_walk_is_preorder(self, sample_outline, preorder_titles):
        assert titles(walk(sample_outline)) == preorder_titles

    def test_walk_accepts_list_of_roots(self, sample_outline, preorder_titles):
        assert titles(walk(list(sample_outline.headlines))) == preorder_titles

    def test_walk_single_headline(self, sample_outline):
        projects = sample_outline.headlines[0]
        assert titles(walk(projects)) == ["Projects", "Write report", "Collect figures", "Send invoice"]

    def test_walk_with_ancestors(self, sample_outline):
        pairs = {node.raw_title: [a.raw_title for a in ancestors]
                 for node, ancestors in walk_with_ancestors(sample_outline)}
        assert pairs["Projects"] == []
        assert pairs["Collect figures"] == ["Projects", "Write report"]
        assert pairs["Reply from Bob"] == ["Notes"]

    def test_walk_deep_outline(self):
        node = HeadlineNode(level=3001, title=Text("leaf"))
        for level in range(3000, 0, -1):
            node = HeadlineNode(level=level, title=Text(f"n{level}"), children=(node,))
        assert sum(1 for _ in walk(node)) == 3001


class TestMatchStage:
    """Match specs are OR-combined."""

    def test_empty_match_specs_select_nothing(self, sample_outline):
        assert filter_tree(sample_outline, [], []) == []

    def test_always_true_reproduces_document_order(self, sample_outline, preorder_titles):
        assert titles(filter_tree(sample_outline, [Direct(always)], [])) == preorder_titles

    def test_one_true_spec_is_enough(self, node_factory):
        node = node_factory(todo="TODO")
        assert matches(node, [Direct(never), Direct(never), Direct(always)])

    def test_all_false_fails(self, node_factory):
        assert not matches(node_factory(), [Direct(never), Direct(never)])

    def test_or_of_predicates(self, sample_outline):
        result = filter_tree(sample_outline, [todo("WAITING"), tagged("errand")])
        assert titles(result) == ["Buy milk", "Reply from Bob"]

    def test_descendants_are_judged_independently(self, sample_outline):
        result = filter_tree(sample_outline, [todo()])
        assert titles(result) == [
            "Write report",
            "Collect figures",
            "Send invoice",
            "Buy milk",
            "Reply from Bob",
        ]


class TestFilterStage:
    """Filter specs are NONE-combined."""

    def test_empty_filter_keeps_everything_matched(self, sample_outline):
        assert len(filter_tree(sample_outline, [todo()], [])) == 5

    def test_single_true_filter_excludes(self, node_factory):
        node = node_factory(todo="TODO")
        assert not matches(node, [Direct(always)], [Direct(never), Direct(never), Direct(always)])

    def test_all_false_filters_keep(self, node_factory):
        assert matches(node_factory(), [Direct(always)], [Direct(never), Direct(never)])

    def test_filter_never_widens(self, sample_outline):
        result = filter_tree(sample_outline, [todo("TODO")], [Direct(never)])
        assert titles(result) == ["Write report", "Buy milk"]

    def test_exclude_done_and_scheduled(self, sample_outline):
        result = filter_tree(
            sample_outline,
            [todo()],
            [todo("DONE"), scheduled(">", "2024-01-15")],
        )
        assert titles(result) == ["Write report", "Collect figures", "Reply from Bob"]

    def test_with_args_spec_in_filter(self, sample_outline):
        result = filter_tree(sample_outline, [todo()], [WithArgs(todo_predicate, (["DONE", "WAITING"],))])
        assert titles(result) == ["Write report", "Collect figures", "Buy milk"]


class TestFilterErrors:
    """Predicate failures abort the whole pass."""

    def test_error_propagates_with_node(self, sample_outline):
        def explode_on_invoice(node):
            if node.raw_title == "Send invoice":
                raise InvalidArgumentError("bad argument")
            return True

        with pytest.raises(InvalidArgumentError) as exc_info:
            filter_tree(sample_outline, [Direct(explode_on_invoice)])
        assert exc_info.value.node.raw_title == "Send invoice"

    def test_invalid_argument_in_filter_spec(self, sample_outline):
        with pytest.raises(InvalidArgumentError):
            filter_tree(sample_outline, [todo()], [WithArgs(todo_predicate, (42,))])

    def test_filter_not_evaluated_for_unmatched(self, sample_outline):
        seen = []

        def record(node):
            seen.append(node.raw_title)
            return False

        filter_tree(sample_outline, [todo("WAITING")], [Direct(record)])
        assert seen == ["Reply from Bob"]
