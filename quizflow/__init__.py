"""
quizflow - conditional navigation between the pages of a quiz.

Main APIs:
- FlowGraph / GraphStore: the navigation graph and its session holder
- sync / can_connect / FlowEditor / EdgeGesture: authoring
- resolve_next / QuizRunner / replay: respondent navigation

Backends:
- MermaidExporter: Mermaid.js diagram syntax
- GraphvizExporter: Graphviz DOT format
- SvgExporter: SVG format (requires Graphviz)
"""

from quizflow.core.ir import (
    QUIZ_COMPLETE, Condition, Connection, Element, FlowGraph, GraphStore,
    Node, Operator, Page, Trigger,
)
from quizflow.core.serialization import JsonSerializer
from quizflow.config import FlowConfig, load_config
from quizflow.authoring import (
    ConnectionRejected, EdgeGesture, FlowEditor, GuardResult, RejectReason,
    can_connect, sync,
)
from quizflow.engine import QuizRunner, linear_next, replay, resolve_next
from quizflow.backend import GraphvizExporter, MermaidExporter, SvgExporter

__all__ = [
    # Core IR
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
    # Serialization and config
    "JsonSerializer",
    "FlowConfig",
    "load_config",
    # Authoring
    "ConnectionRejected",
    "EdgeGesture",
    "FlowEditor",
    "GuardResult",
    "RejectReason",
    "can_connect",
    "sync",
    # Navigation
    "QuizRunner",
    "linear_next",
    "replay",
    "resolve_next",
    # Backends
    "GraphvizExporter",
    "MermaidExporter",
    "SvgExporter",
]
