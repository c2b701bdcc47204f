import re
from typing import Dict

from quizflow.core.ir import FlowGraph
from quizflow.backend.labels import connection_label


class MermaidExporter:
    """Exports a navigation graph to Mermaid.js syntax."""

    @staticmethod
    def _sanitize(text: str) -> str:
        """Escape special characters for Mermaid syntax."""
        return text.replace('"', '#quot;').replace("(", "#40;").replace(")", "#41;")

    @staticmethod
    def _node_ref(node_id: str) -> str:
        """Mermaid node ids may only hold word characters."""
        return re.sub(r'\W', '_', node_id)

    @staticmethod
    def _node_refs(graph: FlowGraph) -> Dict[str, str]:
        """Mermaid id per node; ids that sanitize alike get a numeric suffix."""
        refs: Dict[str, str] = {}
        used = set()
        for node_id in graph.nodes:
            base = MermaidExporter._node_ref(node_id)
            ref, n = base, 1
            while ref in used:
                n += 1
                ref = f"{base}_{n}"
            used.add(ref)
            refs[node_id] = ref
        return refs

    @staticmethod
    def to_mermaid(graph: FlowGraph, direction: str = "LR") -> str:
        """
        Convert a navigation graph to Mermaid diagram syntax.

        Args:
            graph: The graph to convert
            direction: Graph direction (LR, TD, etc.)
        """
        refs = MermaidExporter._node_refs(graph)
        lines = [f"graph {direction}"]
        if not graph.enabled:
            lines.append("    %% conditional navigation disabled: pages follow authoring order")

        for node in graph.nodes.values():
            label = MermaidExporter._sanitize(node.title or node.page_id)
            lines.append(f'    {refs[node.id]}["{label}"]')

        for connection in graph.connections:
            if connection.from_id not in graph.nodes or connection.to_id not in graph.nodes:
                continue
            src = refs[connection.from_id]
            dst = refs[connection.to_id]
            label = MermaidExporter._sanitize(connection_label(connection))
            if connection.fallback:
                arrow = f"-. {label} .->" if label else "-.->"
            else:
                arrow = f"-- {label} -->" if label else "-->"
            lines.append(f"    {src} {arrow} {dst}")

        return "\n".join(lines)
