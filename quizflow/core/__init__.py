"""Core data structures for quizflow navigation graphs."""

from .ir import (
    QUIZ_COMPLETE,
    Condition,
    Connection,
    Element,
    FlowGraph,
    GraphStore,
    Node,
    Operator,
    Page,
    Trigger,
)
from .serialization import JsonSerializer

__all__ = [
    "QUIZ_COMPLETE",
    "Condition",
    "Connection",
    "Element",
    "FlowGraph",
    "GraphStore",
    "Node",
    "Operator",
    "Page",
    "Trigger",
    "JsonSerializer",
]
