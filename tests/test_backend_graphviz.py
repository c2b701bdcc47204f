"""Tests for the Graphviz backend exporter."""

import pytest
import graphviz
from quizflow.core.ir import FlowGraph, Node
from quizflow.backend.graphviz import GraphvizExporter


class TestGraphvizExporter:
    """Tests for GraphvizExporter functionality."""

    def test_to_digraph_structure(self, sample_quiz):
        _, graph = sample_quiz
        dot = GraphvizExporter.to_digraph(graph, name="funnel")

        assert isinstance(dot, graphviz.Digraph)
        assert dot.name == "funnel"

        source = dot.source
        assert "node_page1" in source
        assert "<B>Age</B>" in source
        assert "shape=box" in source
        assert "rankdir=LR" in source

    def test_edges(self, sample_quiz):
        _, graph = sample_quiz
        source = GraphvizExporter.to_digraph(graph).source

        assert "node_page1 -> node_page2" in source
        assert "node_page1 -> node_page3" in source
        assert '"Adults (26-35)"' in source
        assert "style=dashed" in source

    def test_to_dot_returns_string(self, sample_quiz):
        _, graph = sample_quiz
        dot_source = GraphvizExporter.to_dot(graph)

        assert isinstance(dot_source, str)
        assert "digraph quiz" in dot_source

    def test_disabled_graph_label(self, sample_quiz):
        _, graph = sample_quiz
        source = GraphvizExporter.to_dot(graph.with_changes(enabled=False))
        assert "conditional navigation disabled" in source

    def test_titles_are_escaped(self):
        graph = FlowGraph(nodes={"n": Node(id="n", page_id="p", title="A & <B>")})
        source = GraphvizExporter.to_dot(graph)
        assert "A &amp; &lt;B&gt;" in source

    def test_untitled_nodes_show_page_id(self):
        graph = FlowGraph(nodes={"n": Node(id="n", page_id="page-7")})
        assert "<B>page-7</B>" in GraphvizExporter.to_dot(graph)

    def test_pinned_positions(self, sample_quiz):
        _, graph = sample_quiz
        source = GraphvizExporter.to_digraph(graph, use_positions=True).source
        # node_page2 sits at (350, 50) on the canvas, y is flipped
        assert 'pos="4.86' in source
        assert ',-0.69' in source

    def test_pinned_positions_use_neato(self, sample_quiz):
        _, graph = sample_quiz

        assert GraphvizExporter.to_digraph(graph).engine == "dot"
        assert GraphvizExporter.to_digraph(graph, use_positions=True).engine == "neato"
        assert "pos=" in GraphvizExporter.to_dot(graph, use_positions=True)
        assert "pos=" not in GraphvizExporter.to_dot(graph)

    def test_escape_html(self):
        assert GraphvizExporter._escape_html('"x" & y') == "&quot;x&quot; &amp; y"
