"""
WAYPOINT ROUTING - Deterministic Resolution of the Next Step

Given a graph, the current node name and a state value, evaluate that node's
edges in stored order and return the destination of the first edge whose
guard accepts the state.

Contract:
- No matching edge (including a terminal node) -> None. This is the defined
  "process complete" signal, not an error.
- Unknown current node -> NodeNotFoundError. Caller misuse stays
  distinguishable from the terminal signal.
- Guards are re-evaluated on every call; nothing is cached.
"""
import logging
from typing import Any, List, Optional

from waypoint.errors import WalkLimitExceededError
from waypoint.schemas import Edge, Graph

logger = logging.getLogger(__name__)


def match_edge(graph: Graph, current: str, state: Any) -> Optional[Edge]:
    """
    Return the first edge of `current` whose guard accepts `state`.

    Raises:
        NodeNotFoundError: If `current` is not a node of the graph
    """
    for edge in graph.get_node(current).edges:
        if edge.accepts(state):
            return edge
    return None


def next_node(graph: Graph, current: str, state: Any) -> Optional[str]:
    """
    Resolve the next node name, or None when no edge matches.

    Raises:
        NodeNotFoundError: If `current` is not a node of the graph
    """
    edge = match_edge(graph, current, state)
    if edge is None:
        logger.debug("No route from '%s'", current)
        return None

    logger.debug("Routed '%s' => '%s'", current, edge.destination)
    return edge.destination


def walk(graph: Graph, start: str, state: Any, max_steps: Optional[int] = None) -> List[str]:
    """
    Follow next_node() from `start` until no edge matches.

    Args:
        graph: The decision graph
        start: Node to start from (included in the result)
        state: State value handed to every guard
        max_steps: Maximum transitions to take. Defaults to the node count,
                   which is enough for any acyclic graph.

    Returns:
        Visited node names, in order, ending at the node that yielded None.

    Raises:
        NodeNotFoundError: If `start` or a routed destination is not a node
        WalkLimitExceededError: If the walk takes more than max_steps steps
    """
    limit = len(graph) if max_steps is None else max_steps
    path = [start]
    current = start

    while True:
        destination = next_node(graph, current, state)
        if destination is None:
            return path
        if len(path) > limit:
            raise WalkLimitExceededError(path, limit)
        path.append(destination)
        current = destination
