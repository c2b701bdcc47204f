"""
Authoring side of the navigation graph.

- sync: keeps nodes consistent with the page list
- can_connect: page-level vs element-level exclusivity check
- FlowEditor: author operations committed through GraphStore.replace
- EdgeGesture: drag-to-connect state machine for the canvas
"""

from .sync import sync
from .guard import (
    ConnectionRejected,
    GuardResult,
    RejectReason,
    can_connect,
    check_endpoints,
    connection_key,
)
from .editor import FlowEditor
from .gesture import EdgeGesture, GestureOutcome, GesturePhase, GestureState, node_at

__all__ = [
    "sync",
    "ConnectionRejected",
    "GuardResult",
    "RejectReason",
    "can_connect",
    "check_endpoints",
    "connection_key",
    "FlowEditor",
    "EdgeGesture",
    "GestureOutcome",
    "GesturePhase",
    "GestureState",
    "node_at",
]
