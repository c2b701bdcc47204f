"""
JSON serialization for navigation graphs and quiz pages.

The graph format is the ``flowSystem`` object stored alongside a quiz:

    {"enabled": true, "defaultFlow": false,
     "nodes": [{"id", "pageId", "title", "x", "y", "type": "page"}],
     "connections": [{"id", "from", "to", "condition"?, "label"?, "fallback"?}]}

Optional keys that were absent when loading stay absent when saving, so a
stored graph round-trips without gaining or losing fields.
"""

import json
from typing import Any, Dict, List, Optional, Tuple

from quizflow.core.ir import (
    Condition, Connection, Element, FlowGraph, Node, Operator, Page, Trigger,
    NODE_TYPE_PAGE,
)

# camelCase wire key -> Condition attribute, in the order they are written.
_CONDITION_KEYS = (
    ("pageId", "page_id"),
    ("elementId", "element_id"),
    ("elementType", "element_type"),
    ("field", "field"),
    ("operator", "operator"),
    ("value", "value"),
    ("optionIndex", "option_index"),
)


def _require(data: Dict[str, Any], key: str, what: str) -> Any:
    if key not in data or data[key] is None:
        raise ValueError(f"{what} is missing required key '{key}': {data!r}")
    return data[key]


def _optional_int(raw: Any) -> Optional[int]:
    if raw is None or raw == "":
        return None
    return int(raw)


class JsonSerializer:
    """Converts graphs, pages and triggers to and from plain JSON data."""

    @staticmethod
    def condition_to_dict(condition: Condition) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for key, attr in _CONDITION_KEYS:
            if attr == "operator":
                data[key] = condition.wire_operator
                continue
            value = getattr(condition, attr)
            if value is not None:
                data[key] = value
        return data

    @staticmethod
    def condition_from_dict(data: Dict[str, Any]) -> Condition:
        value = data.get("value")
        return Condition(
            operator=data.get("operator", Operator.EXISTS.value),
            value=None if value is None else str(value),
            page_id=data.get("pageId"),
            element_id=data.get("elementId"),
            element_type=data.get("elementType"),
            field=data.get("field"),
            option_index=_optional_int(data.get("optionIndex")),
        )

    @staticmethod
    def to_dict(graph: FlowGraph) -> Dict[str, Any]:
        nodes_data = []
        for node in graph.nodes.values():
            nodes_data.append({
                "id": node.id,
                "pageId": node.page_id,
                "title": node.title,
                "x": node.x,
                "y": node.y,
                "type": node.type,
            })

        connections_data = []
        for connection in graph.connections:
            entry: Dict[str, Any] = {
                "id": connection.id,
                "from": connection.from_id,
                "to": connection.to_id,
            }
            if connection.condition is not None:
                entry["condition"] = JsonSerializer.condition_to_dict(connection.condition)
            if connection.label is not None:
                entry["label"] = connection.label
            if connection.fallback is not None:
                entry["fallback"] = connection.fallback
            connections_data.append(entry)

        return {
            "enabled": graph.enabled,
            # Kept for older readers that only look at defaultFlow.
            "defaultFlow": graph.default_flow,
            "nodes": nodes_data,
            "connections": connections_data,
        }

    @staticmethod
    def to_json(graph: FlowGraph, indent: int = 2) -> str:
        return json.dumps(JsonSerializer.to_dict(graph), indent=indent)

    @staticmethod
    def from_dict(data: Optional[Dict[str, Any]]) -> FlowGraph:
        if not data:
            return FlowGraph()

        if "enabled" in data:
            enabled = bool(data["enabled"])
        else:
            enabled = not bool(data.get("defaultFlow", True))

        nodes: Dict[str, Node] = {}
        for node_data in data.get("nodes", []):
            node_id = _require(node_data, "id", "Node")
            if node_id in nodes:
                raise ValueError(f"Node with id {node_id} already exists.")
            nodes[node_id] = Node(
                id=node_id,
                page_id=_require(node_data, "pageId", "Node"),
                title=node_data.get("title", ""),
                x=node_data.get("x", 0),
                y=node_data.get("y", 0),
                type=node_data.get("type", NODE_TYPE_PAGE),
            )

        connections: List[Connection] = []
        for conn_data in data.get("connections", []):
            condition_data = conn_data.get("condition")
            connections.append(Connection(
                id=_require(conn_data, "id", "Connection"),
                from_id=_require(conn_data, "from", "Connection"),
                to_id=_require(conn_data, "to", "Connection"),
                condition=JsonSerializer.condition_from_dict(condition_data) if condition_data else None,
                label=conn_data.get("label"),
                fallback=conn_data.get("fallback"),
            ))

        return FlowGraph(enabled=enabled, nodes=nodes, connections=tuple(connections))

    @staticmethod
    def from_json(json_str: str) -> FlowGraph:
        data = json.loads(json_str)
        return JsonSerializer.from_dict(data)

    @staticmethod
    def _option_text(option: Any) -> str:
        if isinstance(option, dict):
            return str(option.get("text", option.get("label", "")))
        return str(option)

    @staticmethod
    def element_from_dict(data: Dict[str, Any]) -> Element:
        properties = dict(data.get("properties") or {})
        raw_options = data.get("options")
        if raw_options is None:
            raw_options = properties.get("options") or []
        return Element(
            id=str(_require(data, "id", "Element")),
            type=str(data.get("type", "")),
            options=tuple(JsonSerializer._option_text(o) for o in raw_options),
            properties=properties,
        )

    @staticmethod
    def page_from_dict(data: Dict[str, Any]) -> Page:
        return Page(
            id=str(_require(data, "id", "Page")),
            title=data.get("title") or "",
            elements=tuple(JsonSerializer.element_from_dict(e) for e in data.get("elements", [])),
        )

    @staticmethod
    def pages_from_list(data: List[Dict[str, Any]]) -> List[Page]:
        return [JsonSerializer.page_from_dict(p) for p in data]

    @staticmethod
    def trigger_from_dict(data: Dict[str, Any]) -> Trigger:
        return Trigger(
            element_id=str(_require(data, "elementId", "Trigger")),
            element_type=data.get("elementType"),
            value=data.get("value"),
            option_index=_optional_int(data.get("optionIndex")),
        )

    @staticmethod
    def load_quiz(data: Dict[str, Any]) -> Tuple[List[Page], FlowGraph]:
        """
        Read pages and graph from a quiz document.

        Accepts ``{"pages", "flowSystem"}`` as well as the same keys nested
        under ``"structure"``.
        """
        structure = data.get("structure", data)
        if "pages" not in structure:
            raise ValueError("Quiz document has no 'pages' list.")
        pages = JsonSerializer.pages_from_list(structure["pages"])
        graph = JsonSerializer.from_dict(structure.get("flowSystem"))
        return pages, graph
