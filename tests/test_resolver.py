"""Tests for resolving the next page."""

import itertools

import pytest
from quizflow.authoring.sync import sync
from quizflow.config import FlowConfig
from quizflow.core.ir import (
    QUIZ_COMPLETE, Condition, Connection, FlowGraph, Operator, Trigger,
)
from quizflow.engine.resolver import linear_next, resolve_next

from sample_quiz import make_pages


@pytest.fixture
def pages():
    return make_pages("P1", "P2", "P3")


@pytest.fixture
def graph(pages):
    return sync(FlowGraph(enabled=True), pages)


def option_edge(conn_id, from_id, to_id, element_id="e", option_index=None, operator=Operator.OPTION_SELECTED, value=""):
    return Connection(
        id=conn_id, from_id=from_id, to_id=to_id,
        condition=Condition(operator=operator, value=value, element_id=element_id, option_index=option_index),
    )


class TestLinearFallback:

    def test_linear_next(self, pages):
        assert linear_next("P1", pages) == "P2"
        assert linear_next("P3", pages) == QUIZ_COMPLETE
        assert linear_next("unknown", pages) == QUIZ_COMPLETE
        assert linear_next("P1", []) == QUIZ_COMPLETE

    def test_scenario_a_disabled_graph(self, pages):
        graph = sync(FlowGraph(enabled=False), pages)
        assert resolve_next(graph, "P1", pages) == "P2"
        assert resolve_next(graph, "P3", pages) == QUIZ_COMPLETE

    def test_disabled_graph_ignores_connections(self, pages, graph):
        graph = graph.with_changes(enabled=False, connections=[
            Connection(id="c1", from_id="node_P1", to_id="node_P3"),
        ])
        assert resolve_next(graph, "P1", pages) == "P2"

    def test_page_without_node_behaves_linear(self, pages):
        graph = FlowGraph(enabled=True)
        assert resolve_next(graph, "P2", pages) == "P3"

    def test_enabled_graph_without_connections_is_linear(self, pages, graph):
        assert resolve_next(graph, "P1", pages) == "P2"
        assert resolve_next(graph, "P3", pages, Trigger(element_id="e", value="x")) == QUIZ_COMPLETE


class TestPageLevel:

    def test_scenario_b_page_level_edge_skips_a_page(self, pages, graph):
        graph = graph.with_changes(connections=[Connection(id="c1", from_id="node_P1", to_id="node_P3")])
        assert resolve_next(graph, "P1", pages) == "P3"

    def test_page_level_applies_with_any_trigger(self, pages, graph):
        graph = graph.with_changes(connections=[Connection(id="c1", from_id="node_P1", to_id="node_P3")])
        assert resolve_next(graph, "P1", pages, Trigger(element_id="whatever", value="1")) == "P3"

    def test_backward_edge(self, pages, graph):
        graph = graph.with_changes(connections=[Connection(id="c1", from_id="node_P3", to_id="node_P1")])
        assert resolve_next(graph, "P3", pages) == "P1"

    def test_first_page_level_edge_wins(self, pages, graph):
        graph = graph.with_changes(connections=[
            Connection(id="c1", from_id="node_P1", to_id="node_P3"),
            Connection(id="c2", from_id="node_P1", to_id="node_P2"),
        ])
        assert resolve_next(graph, "P1", pages) == "P3"


class TestElementLevel:

    @pytest.fixture
    def choice_graph(self, graph):
        return graph.with_changes(connections=[
            option_edge("c0", "node_P1", "node_P2", option_index=0),
            option_edge("c1", "node_P1", "node_P3", option_index=1),
        ])

    def test_scenario_c_option_routing(self, pages, choice_graph):
        assert resolve_next(choice_graph, "P1", pages, Trigger(element_id="e", option_index=1)) == "P3"
        assert resolve_next(choice_graph, "P1", pages, Trigger(element_id="e", option_index=0)) == "P2"

    def test_scenario_c_unrelated_element_falls_back_to_linear(self, pages, choice_graph):
        assert resolve_next(choice_graph, "P1", pages, Trigger(element_id="other", option_index=1)) == "P2"

    def test_no_trigger_with_only_element_edges_is_linear(self, pages, choice_graph):
        assert resolve_next(choice_graph, "P1", pages) == "P2"

    def test_specific_option_beats_generic_edge(self, pages, graph):
        graph = graph.with_changes(connections=[
            option_edge("generic", "node_P1", "node_P2", operator=Operator.EXISTS),
            option_edge("specific", "node_P1", "node_P3", option_index=1),
        ])
        assert resolve_next(graph, "P1", pages, Trigger(element_id="e", option_index=1)) == "P3"
        assert resolve_next(graph, "P1", pages, Trigger(element_id="e", option_index=0)) == "P2"

    def test_value_conditions(self, pages, graph):
        graph = graph.with_changes(connections=[
            option_edge("adult", "node_P1", "node_P3", operator=Operator.GREATER_THAN, value="17"),
        ])
        assert resolve_next(graph, "P1", pages, Trigger(element_id="e", value="30")) == "P3"
        assert resolve_next(graph, "P1", pages, Trigger(element_id="e", value="12")) == "P2"
        assert resolve_next(graph, "P1", pages, Trigger(element_id="e", value="n/a")) == "P2"

    def test_unknown_operator_falls_through(self, pages, graph):
        graph = graph.with_changes(connections=[
            option_edge("weird", "node_P1", "node_P3", operator="sounds_like", value="x"),
        ])
        assert resolve_next(graph, "P1", pages, Trigger(element_id="e", value="x")) == "P2"

    def test_strict_clickable_policy(self, pages, graph):
        graph = graph.with_changes(connections=[
            option_edge("img", "node_P1", "node_P3", operator=Operator.IMAGE_CLICKED),
        ])
        click = Trigger(element_id="e", element_type="text")
        assert resolve_next(graph, "P1", pages, click) == "P3"
        strict = FlowConfig(strict_clickable_types=True)
        assert resolve_next(graph, "P1", pages, click, strict) == "P2"

    def test_sample_quiz(self, sample_quiz):
        pages, graph = sample_quiz
        assert resolve_next(graph, "page1", pages, Trigger("elem1", "multiple_choice", "26-35", 1)) == "page3"
        assert resolve_next(graph, "page1", pages, Trigger("btn1", "continue_button")) == "page2"
        assert resolve_next(graph, "page2", pages, Trigger("elem2", "text", "hi")) == "page4"
        assert resolve_next(graph, "page3", pages) == "page4"
        assert resolve_next(graph, "page4", pages) == QUIZ_COMPLETE


class TestRobustness:

    def test_edges_to_missing_nodes_are_skipped(self, pages, graph):
        graph = graph.with_changes(connections=[
            Connection(id="ghost", from_id="node_P1", to_id="node_gone"),
            Connection(id="real", from_id="node_P1", to_id="node_P3"),
        ])
        assert resolve_next(graph, "P1", pages) == "P3"

    def test_edges_to_deleted_pages_are_skipped(self, pages, graph):
        graph = graph.with_changes(connections=[Connection(id="c", from_id="node_P1", to_id="node_P3")])
        assert resolve_next(graph, "P1", pages[:2]) == "P2"

    def test_resolution_is_deterministic(self, pages, graph):
        graph = graph.with_changes(connections=[
            option_edge("c0", "node_P1", "node_P3", option_index=0),
        ])
        trigger = Trigger(element_id="e", option_index=0)
        results = {resolve_next(graph, "P1", pages, trigger) for _ in range(20)}
        assert results == {"P3"}


def _graphs(pages):
    """A spread of graphs: every combination of a few edge shapes, enabled or not."""
    base = sync(FlowGraph(), pages)
    shapes = [
        Connection(id="pl", from_id="node_P1", to_id="node_P3"),
        option_edge("o0", "node_P2", "node_P1", option_index=0),
        option_edge("eq", "node_P2", "node_P3", operator=Operator.EQUALS, value="x"),
        Connection(id="dangling", from_id="node_P3", to_id="node_missing"),
        option_edge("bad", "node_P1", "node_P2", operator="bogus"),
    ]
    for enabled in (True, False):
        for r in range(len(shapes) + 1):
            for combo in itertools.combinations(shapes, r):
                yield base.with_changes(enabled=enabled, connections=combo)


TRIGGERS = [
    None,
    Trigger(element_id="e", option_index=0),
    Trigger(element_id="e", value="x"),
    Trigger(element_id="other", value=None),
]


def test_resolution_is_total(pages):
    valid = {p.id for p in pages} | {QUIZ_COMPLETE}
    for graph in _graphs(pages):
        for page in pages:
            for trigger in TRIGGERS:
                assert resolve_next(graph, page.id, pages, trigger) in valid


def test_disabled_graph_equals_graph_without_connections(pages):
    for graph in _graphs(pages):
        disabled = graph.with_changes(enabled=False)
        cleared = graph.with_changes(connections=[])
        for page in pages:
            for trigger in TRIGGERS:
                assert resolve_next(disabled, page.id, pages, trigger) == \
                    resolve_next(cleared, page.id, pages, trigger)
