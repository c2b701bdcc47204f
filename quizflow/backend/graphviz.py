import graphviz
from quizflow.core.ir import FlowGraph
from quizflow.backend.labels import connection_label


class GraphvizExporter:
    """Exports a navigation graph to Graphviz/Dot format or renders it."""

    # Pixels per inch when pinning nodes at their canvas positions.
    _DPI = 72.0

    @staticmethod
    def _escape_html(text: str) -> str:
        """Escape HTML special characters for Graphviz."""
        return (
            text.replace('&', '&amp;')
            .replace('<', '&lt;')
            .replace('>', '&gt;')
            .replace('"', '&quot;')
        )

    @staticmethod
    def _html_label(title: str, page_id: str) -> str:
        """Node label with the page title in bold and its id underneath."""
        return (
            f'<<B>{GraphvizExporter._escape_html(title)}</B><BR/>'
            f'<FONT POINT-SIZE="9">{GraphvizExporter._escape_html(page_id)}</FONT>>'
        )

    @staticmethod
    def to_digraph(graph: FlowGraph, name: str = "quiz", use_positions: bool = False) -> graphviz.Digraph:
        """
        Converts a navigation graph to a graphviz.Digraph object.

        Args:
            graph: The graph to convert
            name: Name of the resulting digraph
            use_positions: If True, pin nodes at their canvas x/y and lay out
                with the neato engine, which honours pinned positions
        """
        dot = graphviz.Digraph(name=name, comment=name, engine='neato' if use_positions else 'dot')
        dot.attr(rankdir='LR')
        if not graph.enabled:
            dot.attr(label='conditional navigation disabled', labelloc='t')

        for node in graph.nodes.values():
            attrs = {}
            if use_positions:
                # Graphviz y grows upwards, the canvas grows downwards.
                attrs['pos'] = f"{node.x / GraphvizExporter._DPI},{-node.y / GraphvizExporter._DPI}!"
            dot.node(node.id, label=GraphvizExporter._html_label(node.title or node.page_id, node.page_id),
                     shape='box', **attrs)

        for connection in graph.connections:
            if connection.from_id not in graph.nodes or connection.to_id not in graph.nodes:
                continue
            dot.edge(
                connection.from_id, connection.to_id,
                label=connection_label(connection),
                style='dashed' if connection.fallback else 'solid',
            )

        return dot

    @staticmethod
    def to_dot(graph: FlowGraph, name: str = "quiz", use_positions: bool = False) -> str:
        """Returns the DOT source string for the graph."""
        return GraphvizExporter.to_digraph(graph, name=name, use_positions=use_positions).source

    @staticmethod
    def render(graph: FlowGraph, filename: str, format: str = 'png', view: bool = False,
               use_positions: bool = False):
        """Renders the graph to a file."""
        dot = GraphvizExporter.to_digraph(graph, use_positions=use_positions)
        dot.render(filename, format=format, view=view)
