"""
WAYPOINT TOPOLOGY - Layered Topological Order

Groups node names into layers so that every edge points from an earlier
layer to a later one (Kahn's algorithm, layered variant):

1. in-degree(n) = number of edges, across the whole graph, whose destination
   is n. Duplicate edges count once each. Edges to names that are not nodes
   are ignored.
2. Each round takes every remaining node with in-degree 0 as one layer,
   stops tracking them, and decrements the in-degree of their destinations.
3. Stop when a round finds no node at in-degree 0.

Isolated nodes land in the first layer. Nodes on a cycle (and everything
only reachable through one) never reach in-degree 0; strict mode raises
CyclicGraphError naming them, non-strict mode returns the partial layering.
"""
import logging
from typing import Dict, List, Set

from waypoint.errors import CyclicGraphError
from waypoint.schemas import Graph

logger = logging.getLogger(__name__)


def compute_in_degrees(graph: Graph) -> Dict[str, int]:
    """In-degree of every node, counting each edge whose destination exists."""
    in_degree = {name: 0 for name in graph.nodes}
    for n in graph.nodes.values():
        for edge in n.edges:
            if edge.destination in in_degree:
                in_degree[edge.destination] += 1
    return in_degree


def topological_order(graph: Graph, strict: bool = True) -> List[Set[str]]:
    """
    Compute the layered topological order of a graph.

    Args:
        graph: The decision graph
        strict: If True, raise when some nodes cannot be layered (cycle).
                If False, return whatever layers were computed.

    Returns:
        List of layers; each layer is a set of node names

    Raises:
        CyclicGraphError: If strict and the graph is not acyclic
    """
    remaining = compute_in_degrees(graph)
    layers: List[Set[str]] = []

    while True:
        layer = {name for name, degree in remaining.items() if degree == 0}
        if not layer:
            break

        for name in layer:
            del remaining[name]
        layers.append(layer)

        for name in layer:
            for edge in graph.nodes[name].edges:
                if edge.destination in remaining:
                    remaining[edge.destination] -= 1

    if remaining:
        if strict:
            raise CyclicGraphError(remaining)
        logger.warning(
            "Partial topological order: %d node(s) left unlayered (%s)",
            len(remaining),
            ", ".join(sorted(remaining)),
        )

    logger.debug("Computed %d layer(s) over %d node(s)", len(layers), len(graph))
    return layers


def layer_index(graph: Graph) -> Dict[str, int]:
    """
    Map each node name to its layer number.

    Raises:
        CyclicGraphError: If the graph is not acyclic
    """
    return {
        name: depth
        for depth, layer in enumerate(topological_order(graph))
        for name in layer
    }
