"""Backend exporters for navigation graphs."""

from quizflow.backend.graphviz import GraphvizExporter
from quizflow.backend.mermaid import MermaidExporter
from quizflow.backend.svg import SvgExporter

__all__ = [
    "GraphvizExporter",
    "MermaidExporter",
    "SvgExporter",
]
