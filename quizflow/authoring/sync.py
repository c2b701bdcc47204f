"""Keeps the graph's nodes in step with the quiz's page list."""

import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Sequence

from quizflow.config import DEFAULT_CONFIG, FlowConfig
from quizflow.core.ir import FlowGraph, Node, Page

logger = logging.getLogger(__name__)


def default_title(page: Page, index: int) -> str:
    return page.title or f"Page {index + 1}"


def default_position(index: int, config: FlowConfig = DEFAULT_CONFIG):
    return config.base_x + index * config.spacing_x, config.base_y


def free_position(index: int, taken: Iterable[Node], config: FlowConfig = DEFAULT_CONFIG):
    """
    The default slot for page ``index``, moved right one column at a time
    until no node in ``taken`` sits in it.

    A slot is one column wide (``spacing_x``) and one node high.
    """
    step = config.spacing_x if config.spacing_x > 0 else config.node_width
    taken = list(taken)
    x, y = default_position(index, config)
    while any(abs(n.x - x) < step and abs(n.y - y) < config.node_height for n in taken):
        x += step
    return x, y


def sync(graph: FlowGraph, pages: Sequence[Page], config: Optional[FlowConfig] = None) -> FlowGraph:
    """
    Reconcile ``graph`` with the authoritative ordered ``pages``.

    Creates a node for every page lacking one, refreshes stale titles,
    removes nodes of deleted pages and drops connections whose endpoints no
    longer exist. Returns ``graph`` itself when nothing needed to change, so
    callers can skip a ``replace``.
    """
    config = config or DEFAULT_CONFIG
    live_pages = {page.id: (idx, page) for idx, page in enumerate(pages)}
    changed = False

    nodes: Dict[str, Node] = {}
    seen_pages = set()
    for node_id, node in graph.nodes.items():
        if node.page_id not in live_pages or node.page_id in seen_pages:
            logger.debug(f"Removing node {node_id} for missing or duplicate page {node.page_id}")
            changed = True
            continue
        seen_pages.add(node.page_id)
        idx, page = live_pages[node.page_id]
        title = default_title(page, idx)
        if node.title != title:
            node = replace(node, title=title)
            changed = True
        nodes[node_id] = node

    for idx, page in enumerate(pages):
        if page.id in seen_pages:
            continue
        node_id = Node.id_for_page(page.id)
        # A stale node may already own the derived id; suffix until free.
        suffix = 1
        while node_id in nodes:
            suffix += 1
            node_id = f"{Node.id_for_page(page.id)}_{suffix}"
        x, y = free_position(idx, nodes.values(), config)
        nodes[node_id] = Node(id=node_id, page_id=page.id, title=default_title(page, idx), x=x, y=y)
        seen_pages.add(page.id)
        logger.debug(f"Created node {node_id} for page {page.id}")
        changed = True

    connections = [
        c for c in graph.connections
        if c.from_id in nodes and c.to_id in nodes
    ]
    if len(connections) != len(graph.connections):
        logger.debug(f"Pruned {len(graph.connections) - len(connections)} dangling connection(s)")
        changed = True

    if not changed:
        return graph
    return graph.with_changes(nodes=nodes, connections=connections)


def dangling_connections(graph: FlowGraph) -> List[str]:
    """Ids of connections whose endpoints do not resolve to a node."""
    return [
        c.id for c in graph.connections
        if c.from_id not in graph.nodes or c.to_id not in graph.nodes
    ]
