"""
Drag-to-connect gesture for the flow canvas.

The gesture owns no graph state: it tracks where a drag started and where
the pointer currently is, and on release asks a ``FlowEditor`` to commit the
connection. Every canvas creates its own ``EdgeGesture``.

    idle --start--> drawing --release over other node--> committing --> idle
                            --release elsewhere/cancel--> cancelled --> idle
"""

import enum
import logging
from dataclasses import dataclass, replace
from typing import Callable, Optional

from quizflow.authoring.editor import FlowEditor
from quizflow.authoring.guard import ConnectionRejected, RejectReason
from quizflow.config import DEFAULT_CONFIG, FlowConfig
from quizflow.core.ir import Connection, FlowGraph, Node

logger = logging.getLogger(__name__)


class GesturePhase(str, enum.Enum):
    IDLE = "idle"
    DRAWING = "drawing"
    COMMITTING = "committing"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class GestureState:
    """Immutable snapshot of the gesture."""
    phase: GesturePhase = GesturePhase.IDLE
    origin_node_id: Optional[str] = None
    element_id: Optional[str] = None
    option_index: Optional[int] = None
    start_x: float = 0
    start_y: float = 0
    current_x: float = 0
    current_y: float = 0


@dataclass(frozen=True)
class GestureOutcome:
    committed: bool
    connection: Optional[Connection] = None
    reason: Optional[RejectReason] = None


CANCELLED = GestureOutcome(committed=False)


def node_at(graph: FlowGraph, x: float, y: float, config: FlowConfig = DEFAULT_CONFIG) -> Optional[Node]:
    """Topmost node whose box contains the point, if any."""
    hit = None
    for node in graph.nodes.values():
        if node.x <= x <= node.x + config.node_width and node.y <= y <= node.y + config.node_height:
            hit = node
    return hit


class EdgeGesture:
    """State machine for drawing one connection at a time."""

    def __init__(self, editor: FlowEditor):
        self.editor = editor
        self._state = GestureState()
        self._on_state_change: Optional[Callable[[GestureState], None]] = None

    @property
    def state(self) -> GestureState:
        return self._state

    @property
    def is_drawing(self) -> bool:
        return self._state.phase == GesturePhase.DRAWING

    def set_on_state_change(self, callback: Callable[[GestureState], None]):
        self._on_state_change = callback

    def _set_state(self, state: GestureState) -> GestureState:
        self._state = state
        if self._on_state_change:
            self._on_state_change(state)
        return state

    def start(self, node_id: str, x: float, y: float,
              element_id: Optional[str] = None, option_index: Optional[int] = None) -> GestureState:
        if self.is_drawing:
            logger.debug(f"Ignoring gesture start on {node_id}: already drawing")
            return self._state
        if node_id not in self.editor.graph.nodes:
            return self._state
        return self._set_state(GestureState(
            phase=GesturePhase.DRAWING,
            origin_node_id=node_id,
            element_id=element_id,
            option_index=option_index,
            start_x=x, start_y=y,
            current_x=x, current_y=y,
        ))

    def move(self, x: float, y: float) -> GestureState:
        if not self.is_drawing:
            return self._state
        return self._set_state(replace(self._state, current_x=x, current_y=y))

    def cancel(self) -> GestureOutcome:
        if self.is_drawing:
            self._set_state(GestureState(phase=GesturePhase.CANCELLED))
            self._set_state(GestureState())
        return CANCELLED

    def release(self, target_node_id: Optional[str] = None) -> GestureOutcome:
        """
        Finish the drag over ``target_node_id``; ``None`` means empty canvas.

        Releasing over another node commits through the editor. Releasing
        over nothing or over the origin cancels. Either way the gesture ends
        up idle again.
        """
        if not self.is_drawing:
            return CANCELLED
        s = self._state
        if target_node_id is None or target_node_id == s.origin_node_id \
                or target_node_id not in self.editor.graph.nodes:
            return self.cancel()

        self._set_state(replace(s, phase=GesturePhase.COMMITTING))
        try:
            connection = self.editor.connect(
                s.origin_node_id, target_node_id,
                element_id=s.element_id, option_index=s.option_index,
            )
        except ConnectionRejected as e:
            return GestureOutcome(committed=False, reason=e.reason)
        finally:
            self._set_state(GestureState())
        return GestureOutcome(committed=True, connection=connection)

    def release_at(self, x: float, y: float) -> GestureOutcome:
        """Release at canvas coordinates, hit testing the nodes."""
        self.move(x, y)
        target = node_at(self.editor.graph, x, y, self.editor.config)
        return self.release(target.id if target else None)
