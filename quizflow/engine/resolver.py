"""
Decides which page a respondent sees next.

Resolution is a pure function of the graph, the current page, the page list
and the trigger. It never raises: whenever the graph has nothing to say,
the respondent simply moves on to the next page in authoring order.
"""

import logging
from typing import List, Optional, Sequence

from quizflow.config import DEFAULT_CONFIG, FlowConfig
from quizflow.core.ir import QUIZ_COMPLETE, Connection, FlowGraph, Page, Trigger
from quizflow.engine.conditions import matches

logger = logging.getLogger(__name__)


def linear_next(current_page_id: str, pages: Sequence[Page]) -> str:
    """The page after ``current_page_id`` in page order, or ``QUIZ_COMPLETE``."""
    for idx, page in enumerate(pages):
        if page.id == current_page_id:
            if idx + 1 < len(pages):
                return pages[idx + 1].id
            return QUIZ_COMPLETE
    logger.warning(f"Page {current_page_id} is not part of the quiz; ending navigation")
    return QUIZ_COMPLETE


def _target_page(graph: FlowGraph, connection: Connection, live_page_ids) -> Optional[str]:
    node = graph.get_node(connection.to_id)
    if node is None or node.page_id not in live_page_ids:
        return None
    return node.page_id


def _element_match(candidates: List[Connection], trigger: Trigger, strict: bool) -> List[Connection]:
    matched = []
    for connection in candidates:
        if connection.element_id != trigger.element_id:
            continue
        try:
            ok = matches(connection.condition, trigger, strict_clickable_types=strict)
        except Exception as e:
            # A malformed condition must not strand the respondent.
            logger.debug(f"Condition of connection {connection.id} failed to evaluate: {e}")
            ok = False
        if ok:
            matched.append(connection)
    # A connection keyed to the exact option beats generic ones on the element.
    matched.sort(key=lambda c: 0 if (
        c.option_index is not None and c.option_index == trigger.option_index
    ) else 1)
    return matched


def resolve_next(
    graph: FlowGraph,
    current_page_id: str,
    pages: Sequence[Page],
    trigger: Optional[Trigger] = None,
    config: Optional[FlowConfig] = None,
) -> str:
    """
    Compute the page to show after ``current_page_id``.

    Args:
        graph: The quiz's navigation graph.
        current_page_id: Page the respondent is on.
        pages: Pages in authoring order.
        trigger: The answer or click just produced, if any.
        config: Evaluation policy; defaults to ``DEFAULT_CONFIG``.

    Returns:
        A page id from ``pages`` or ``QUIZ_COMPLETE``.
    """
    config = config or DEFAULT_CONFIG

    if not graph.enabled:
        return linear_next(current_page_id, pages)

    origin = graph.node_for_page(current_page_id)
    if origin is None:
        return linear_next(current_page_id, pages)

    live_page_ids = {page.id for page in pages}
    outgoing = graph.outgoing(origin.id)

    if trigger is not None:
        element_level = [c for c in outgoing if c.is_element_level]
        for connection in _element_match(element_level, trigger, config.strict_clickable_types):
            target = _target_page(graph, connection, live_page_ids)
            if target is not None:
                logger.debug(f"Connection {connection.id} matched trigger on {trigger.element_id}")
                return target

    for connection in outgoing:
        if connection.is_page_level:
            target = _target_page(graph, connection, live_page_ids)
            if target is not None:
                return target

    return linear_next(current_page_id, pages)
