"""
Authoring checks run before a new connection is committed.

A page either redirects uniformly (page-level connections, no element) or
per answer (element-level connections keyed by element and option). The
two kinds never coexist on the same origin node.
"""

import enum
from dataclasses import dataclass
from typing import Optional, Tuple

from quizflow.core.ir import Connection, FlowGraph


class RejectReason(str, enum.Enum):
    ELEMENT_LEVEL_EXISTS = "element_level_exists"
    PAGE_LEVEL_EXISTS = "page_level_exists"
    UNKNOWN_NODE = "unknown_node"
    SELF_LOOP = "self_loop"
    DUPLICATE = "duplicate"


_MESSAGES = {
    RejectReason.ELEMENT_LEVEL_EXISTS: "page already redirects per answer; remove its element connections first",
    RejectReason.PAGE_LEVEL_EXISTS: "page already redirects uniformly; remove its page connection first",
    RejectReason.UNKNOWN_NODE: "connection endpoint is not a node of the graph",
    RejectReason.SELF_LOOP: "a page cannot connect to itself",
    RejectReason.DUPLICATE: "an equivalent connection already leaves this page",
}


@dataclass(frozen=True)
class GuardResult:
    allowed: bool
    reason: Optional[RejectReason] = None

    @property
    def message(self) -> str:
        return _MESSAGES.get(self.reason, "") if self.reason else ""

    def __bool__(self):
        return self.allowed


ALLOWED = GuardResult(True)


class ConnectionRejected(ValueError):
    """Raised when an author tries to commit a connection the guard refuses."""

    def __init__(self, reason: RejectReason):
        self.reason = reason
        super().__init__(_MESSAGES[reason])


def can_connect(graph: FlowGraph, from_node_id: str, element_id: Optional[str] = None) -> GuardResult:
    """Check a proposed connection from ``from_node_id`` against existing ones."""
    element_id = element_id or None
    for connection in graph.outgoing(from_node_id):
        if element_id is None and connection.is_element_level:
            return GuardResult(False, RejectReason.ELEMENT_LEVEL_EXISTS)
        if element_id is not None and connection.is_page_level:
            return GuardResult(False, RejectReason.PAGE_LEVEL_EXISTS)
    return ALLOWED


def check_endpoints(graph: FlowGraph, from_node_id: str, to_node_id: str) -> GuardResult:
    if from_node_id not in graph.nodes or to_node_id not in graph.nodes:
        return GuardResult(False, RejectReason.UNKNOWN_NODE)
    if from_node_id == to_node_id:
        return GuardResult(False, RejectReason.SELF_LOOP)
    return ALLOWED


def connection_key(connection: Connection) -> Tuple[str, Optional[str], Optional[int]]:
    return connection.from_id, connection.element_id, connection.option_index


def find_duplicate(graph: FlowGraph, candidate: Connection) -> Optional[Connection]:
    """
    Return the existing connection that ``candidate`` would duplicate.

    Element-level connections are unique per (origin, element, option);
    page-level ones per (origin, target).
    """
    for existing in graph.outgoing(candidate.from_id):
        if candidate.is_element_level:
            if connection_key(existing) == connection_key(candidate):
                return existing
        elif existing.is_page_level and existing.to_id == candidate.to_id:
            return existing
    return None
