"""SVG backend for navigation graphs using Graphviz.

Requirements:
    Graphviz must be installed on your system:
    - macOS: brew install graphviz
    - Ubuntu/Debian: sudo apt-get install graphviz
    - Windows: Download from https://graphviz.org/download/

Example:
    >>> from quizflow import JsonSerializer, SvgExporter
    >>> pages, graph = JsonSerializer.load_quiz(quiz_document)
    >>> svg_string = SvgExporter.to_svg(graph)
"""

from quizflow.backend.graphviz import GraphvizExporter


__all__ = ["SvgExporter"]


class SvgExporter:
    """Exports a navigation graph to SVG format using Graphviz."""

    @staticmethod
    def to_svg(graph, name: str = "quiz", use_positions: bool = False) -> str:
        """
        Convert a navigation graph to an SVG string using Graphviz.

        Raises:
            RuntimeError: If the Graphviz executable is not available
        """
        try:
            digraph = GraphvizExporter.to_digraph(graph, name=name, use_positions=use_positions)
            # pipe() returns bytes
            return digraph.pipe(format='svg').decode('utf-8')
        except Exception as e:
            if 'graphviz' in str(e).lower() or 'dot' in str(e).lower():
                raise RuntimeError(
                    "Graphviz executable not found. "
                    "Please install Graphviz: https://graphviz.org/download/"
                ) from e
            raise
