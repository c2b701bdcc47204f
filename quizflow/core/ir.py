"""
Intermediate representation of a quiz and its navigation graph.

Pages and elements come from the quiz-authoring side and are only read here.
Nodes and connections form the navigation graph that decides which page a
respondent sees next. All graph values are immutable; changes build a new
``FlowGraph`` which is swapped in through ``GraphStore.replace``.
"""

import dataclasses
import enum
from dataclasses import dataclass, field, replace as _dc_replace
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

# Returned by the resolver when the respondent has finished the last page.
QUIZ_COMPLETE = "__quiz_complete__"

NODE_TYPE_PAGE = "page"


class Operator(str, enum.Enum):
    """Comparison applied by a condition to a respondent's trigger."""
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    EXISTS = "exists"
    OPTION_SELECTED = "option_selected"
    IMAGE_CLICKED = "image_clicked"
    BUTTON_CLICKED = "button_clicked"

    @classmethod
    def parse(cls, raw: Union[str, "Operator"]) -> Union["Operator", str]:
        """
        Normalize an operator spelling.

        Accepts both ``not_equals`` and ``not-equals``. Unknown operators are
        returned unchanged as plain strings so that they survive a save/load
        cycle; the resolver never matches them.
        """
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).strip().lower().replace("-", "_"))
        except ValueError:
            return raw


@dataclass(frozen=True)
class Element:
    """A question or clickable element on a page."""
    id: str
    type: str
    options: Tuple[str, ...] = ()
    properties: Dict[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class Page:
    """One page of the quiz, in authoring order."""
    id: str
    title: str = ""
    elements: Tuple[Element, ...] = ()

    def get_element(self, element_id: str) -> Optional[Element]:
        for element in self.elements:
            if element.id == element_id:
                return element
        return None


@dataclass(frozen=True)
class Node:
    """Represents one page inside the navigation graph."""
    id: str
    page_id: str
    title: str = ""
    x: float = 0
    y: float = 0
    type: str = NODE_TYPE_PAGE

    @staticmethod
    def id_for_page(page_id: str) -> str:
        return f"node_{page_id}"

    def __repr__(self):
        return f"<Node id={self.id} page={self.page_id} title='{self.title}'>"


@dataclass(frozen=True)
class Condition:
    """Ties a connection to a respondent's answer on the origin page."""
    operator: Union[Operator, str] = Operator.EXISTS
    # None when a stored condition carried no value at all.
    value: Optional[str] = ""
    page_id: Optional[str] = None
    element_id: Optional[str] = None
    element_type: Optional[str] = None
    field: Optional[str] = None
    option_index: Optional[int] = None
    # Stored spelling of a known operator, e.g. "not-equals".
    # ("field" above shadows dataclasses.field in this body.)
    spelling: Optional[str] = dataclasses.field(default=None, compare=False, repr=False)

    def __post_init__(self):
        raw = self.operator
        operator = Operator.parse(raw)
        spelling = self.spelling
        if isinstance(operator, Operator) and not isinstance(raw, Operator) and raw != operator.value:
            spelling = raw
        if spelling is not None and Operator.parse(spelling) != operator:
            spelling = None
        object.__setattr__(self, "operator", operator)
        object.__setattr__(self, "spelling", spelling)

    @property
    def wire_operator(self) -> str:
        """The operator as it is written back to JSON."""
        if self.spelling is not None:
            return self.spelling
        return self.operator.value if isinstance(self.operator, Operator) else self.operator

    @property
    def is_element_level(self) -> bool:
        return bool(self.element_id)


@dataclass(frozen=True)
class Connection:
    """A directed, optionally conditional link between two nodes."""
    id: str
    from_id: str
    to_id: str
    condition: Optional[Condition] = None
    label: Optional[str] = None
    fallback: Optional[bool] = None

    @property
    def element_id(self) -> Optional[str]:
        return self.condition.element_id if self.condition else None

    @property
    def option_index(self) -> Optional[int]:
        return self.condition.option_index if self.condition else None

    @property
    def is_element_level(self) -> bool:
        return bool(self.element_id)

    @property
    def is_page_level(self) -> bool:
        return not self.is_element_level

    def __repr__(self):
        return f"<Connection {self.from_id} -> {self.to_id} element={self.element_id} option={self.option_index}>"


@dataclass(frozen=True)
class Trigger:
    """The answer or click a respondent just produced on the current page."""
    element_id: str
    element_type: Optional[str] = None
    value: Any = None
    option_index: Optional[int] = None


@dataclass(frozen=True)
class FlowGraph:
    """
    The navigation graph of a quiz.

    ``nodes`` is keyed by node id in insertion order; ``connections`` keeps
    authoring order, which the resolver uses to break ties. ``enabled``
    controls whether the resolver consults the graph at all.
    """
    enabled: bool = False
    nodes: Dict[str, Node] = field(default_factory=dict)
    connections: Tuple[Connection, ...] = ()

    @property
    def default_flow(self) -> bool:
        return not self.enabled

    def get_node(self, node_id: str) -> Optional[Node]:
        return self.nodes.get(node_id)

    def node_for_page(self, page_id: str) -> Optional[Node]:
        for node in self.nodes.values():
            if node.page_id == page_id:
                return node
        return None

    def get_connection(self, connection_id: str) -> Optional[Connection]:
        for connection in self.connections:
            if connection.id == connection_id:
                return connection
        return None

    def outgoing(self, node_id: str) -> List[Connection]:
        return [c for c in self.connections if c.from_id == node_id]

    def page_ids(self) -> List[str]:
        return [node.page_id for node in self.nodes.values()]

    def with_changes(self, **changes) -> "FlowGraph":
        """Return a copy of the graph with the given fields replaced."""
        if "nodes" in changes:
            changes["nodes"] = dict(changes["nodes"])
        if "connections" in changes:
            changes["connections"] = tuple(changes["connections"])
        return _dc_replace(self, **changes)

    def __repr__(self):
        return (
            f"<FlowGraph enabled={self.enabled} nodes={len(self.nodes)} "
            f"connections={len(self.connections)}>"
        )


GraphListener = Callable[[FlowGraph], None]


class GraphStore:
    """
    Holds the current graph of one authoring session.

    ``replace`` is the only way to change it, so every write is a whole-graph
    swap. Listeners (typically the persistence layer) are told about each
    swap after it happened.
    """

    def __init__(self, graph: Optional[FlowGraph] = None):
        self._graph = graph if graph is not None else FlowGraph()
        self._listeners: List[GraphListener] = []

    @property
    def graph(self) -> FlowGraph:
        return self._graph

    def subscribe(self, listener: GraphListener) -> None:
        self._listeners.append(listener)

    def replace(self, graph: FlowGraph) -> FlowGraph:
        if graph is self._graph:
            return graph
        self._graph = graph
        for listener in self._listeners:
            listener(graph)
        return graph


def page_index(pages: Iterable[Page]) -> Dict[str, int]:
    """Map page id to its position in the page order."""
    return {page.id: idx for idx, page in enumerate(pages)}
