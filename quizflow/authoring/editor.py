"""Author operations on a navigation graph, each committed as one swap."""

import logging
import uuid
from dataclasses import replace
from typing import Iterable, List, Optional

from quizflow.authoring.guard import (
    ConnectionRejected, RejectReason, can_connect, check_endpoints, find_duplicate,
)
from quizflow.authoring.sync import sync
from quizflow.config import DEFAULT_CONFIG, FlowConfig
from quizflow.core.ir import (
    Condition, Connection, FlowGraph, GraphStore, Node, Operator, Page,
)
from quizflow.engine.conditions import BUTTON_ELEMENT_TYPES, IMAGE_ELEMENT_TYPES

logger = logging.getLogger(__name__)


class FlowEditor:
    """
    Authoring API over a ``GraphStore``.

    Example:
        store = GraphStore()
        editor = FlowEditor(store, pages)
        editor.set_enabled(True)
        editor.connect("node_p1", "node_p3", element_id="q1", option_index=1)
        graph = store.graph
    """

    def __init__(self, store: GraphStore, pages: Iterable[Page], config: Optional[FlowConfig] = None):
        self.store = store
        self.pages: List[Page] = list(pages)
        self.config = config or DEFAULT_CONFIG

    @property
    def graph(self) -> FlowGraph:
        return self.store.graph

    def sync(self) -> FlowGraph:
        return self.store.replace(sync(self.graph, self.pages, self.config))

    def set_pages(self, pages: Iterable[Page]) -> FlowGraph:
        self.pages = list(pages)
        return self.sync()

    def set_enabled(self, enabled: bool) -> FlowGraph:
        graph = self.graph
        if graph.enabled != enabled:
            graph = graph.with_changes(enabled=enabled)
        if enabled:
            graph = sync(graph, self.pages, self.config)
        logger.info(f"Conditional navigation {'enabled' if enabled else 'disabled'}")
        return self.store.replace(graph)

    def reset(self) -> FlowGraph:
        """Back to plain page order: disabled, no nodes, no connections."""
        logger.info("Resetting navigation graph to linear flow")
        return self.store.replace(FlowGraph())

    def _page_for_node(self, node: Node) -> Optional[Page]:
        for page in self.pages:
            if page.id == node.page_id:
                return page
        return None

    def build_condition(self, from_node: Node, element_id: str, option_index: Optional[int] = None) -> Condition:
        """Derive the condition for an element-level connection from the page's element."""
        page = self._page_for_node(from_node)
        element = page.get_element(element_id) if page else None
        element_type = element.type if element else None

        value = ""
        if option_index is not None:
            operator = Operator.OPTION_SELECTED
            if element and 0 <= option_index < len(element.options):
                value = element.options[option_index]
        elif element_type in IMAGE_ELEMENT_TYPES:
            operator = Operator.IMAGE_CLICKED
        elif element_type in BUTTON_ELEMENT_TYPES:
            operator = Operator.BUTTON_CLICKED
        else:
            operator = Operator.EXISTS

        field = element.properties.get("fieldId") if element else None
        return Condition(
            operator=operator,
            value=value,
            page_id=from_node.page_id,
            element_id=element_id,
            element_type=element_type,
            field=field or element_id,
            option_index=option_index,
        )

    def _check(self, graph: FlowGraph, connection: Connection) -> None:
        """Raise ``ConnectionRejected`` unless ``connection`` may join ``graph``."""
        for result in (check_endpoints(graph, connection.from_id, connection.to_id),
                       can_connect(graph, connection.from_id, connection.element_id)):
            if not result:
                logger.info(
                    f"Rejected connection {connection.from_id} -> {connection.to_id}: {result.reason.value}"
                )
                raise ConnectionRejected(result.reason)

    def connect(
        self,
        from_node_id: str,
        to_node_id: str,
        element_id: Optional[str] = None,
        option_index: Optional[int] = None,
        condition: Optional[Condition] = None,
        label: Optional[str] = None,
        fallback: Optional[bool] = None,
    ) -> Connection:
        """
        Add a connection, or return the existing one it would duplicate.

        An explicit ``condition`` decides the connection's level; when it
        names no element, ``element_id``/``option_index`` are attached to it.

        Raises:
            ConnectionRejected: if an endpoint is unknown, the connection is a
                self loop, or it would mix page-level and element-level
                connections on the origin node. The graph is left untouched.
        """
        graph = self.graph
        element_id = element_id or None

        if condition is not None and not condition.element_id and element_id is not None:
            condition = replace(
                condition,
                element_id=element_id,
                option_index=condition.option_index if condition.option_index is not None else option_index,
            )
        elif condition is None and element_id is not None and from_node_id in graph.nodes:
            condition = self.build_condition(graph.nodes[from_node_id], element_id, option_index)

        connection = Connection(
            id=f"conn_{uuid.uuid4().hex[:12]}",
            from_id=from_node_id,
            to_id=to_node_id,
            condition=condition,
            label=label,
            fallback=fallback,
        )
        self._check(graph, connection)

        existing = find_duplicate(graph, connection)
        if existing is not None:
            logger.debug(f"Ignoring duplicate of connection {existing.id}")
            return existing

        self.store.replace(graph.with_changes(connections=graph.connections + (connection,)))
        logger.debug(f"Added connection {connection.id}: {from_node_id} -> {to_node_id}")
        return connection

    def update_connection(self, connection_id: str, **changes) -> Connection:
        """
        Change fields of a connection (``to_id``, ``label``, ``condition``, ``fallback``).

        The edited connection is checked like a new one against the others
        leaving its node, so it can neither mix levels nor duplicate them.
        """
        graph = self.graph
        current = graph.get_connection(connection_id)
        if current is None:
            raise ValueError(f"Connection {connection_id} does not exist.")
        unknown = set(changes) - {"to_id", "label", "condition", "fallback"}
        if unknown:
            raise ValueError(f"Cannot update connection fields: {', '.join(sorted(unknown))}")

        updated = replace(current, **changes)
        if updated.to_id not in graph.nodes:
            raise ValueError(f"Target node {updated.to_id} does not exist.")

        others = graph.with_changes(connections=[c for c in graph.connections if c.id != connection_id])
        self._check(others, updated)
        if find_duplicate(others, updated) is not None:
            raise ConnectionRejected(RejectReason.DUPLICATE)

        self.store.replace(graph.with_changes(
            connections=[updated if c.id == connection_id else c for c in graph.connections]
        ))
        return updated

    def remove_connection(self, connection_id: str) -> FlowGraph:
        graph = self.graph
        remaining = [c for c in graph.connections if c.id != connection_id]
        if len(remaining) == len(graph.connections):
            return graph
        return self.store.replace(graph.with_changes(connections=remaining))

    def move_node(self, node_id: str, dx: float, dy: float) -> Node:
        graph = self.graph
        node = graph.get_node(node_id)
        if node is None:
            raise ValueError(f"Node {node_id} does not exist.")
        moved = replace(node, x=node.x + dx, y=node.y + dy)
        nodes = dict(graph.nodes)
        nodes[node_id] = moved
        self.store.replace(graph.with_changes(nodes=nodes))
        return moved
