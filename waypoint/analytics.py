"""
WAYPOINT ANALYTICS - Read-only Graph Metrics

Bridges a decision Graph onto a rustworkx PyDiGraph so that Rust-native
algorithms (descendants, DAG checks, connectivity) can answer questions
such as:
- Which nodes can never be reached from the entry node?
- Where does the process end? (terminal nodes)
- How deep is the longest route through the graph?

All functions are read-only queries. The validator and the router never
depend on this module.
"""
import rustworkx as rx
from dataclasses import dataclass
from typing import Any, Dict, List

from waypoint.errors import NodeNotFoundError
from waypoint.schemas import Graph
from waypoint.topology import topological_order


# =============================================================================
# RUSTWORKX BRIDGE
# =============================================================================

@dataclass
class GraphBridge:
    """
    A PyDiGraph view of a decision graph.

    Node payloads are node names; edge payloads are the Edge structs.
    Edges to unknown destinations have no target index and are left out.
    """
    digraph: rx.PyDiGraph
    node_map: Dict[str, int]   # name -> rustworkx index
    inv_map: Dict[int, str]    # rustworkx index -> name

    def index_of(self, name: str) -> int:
        if name not in self.node_map:
            raise NodeNotFoundError(name)
        return self.node_map[name]


def to_digraph(graph: Graph) -> GraphBridge:
    """Build a multigraph PyDiGraph mirroring the graph's known edges."""
    digraph = rx.PyDiGraph(multigraph=True)
    names = list(graph.nodes)
    indices = digraph.add_nodes_from(names)
    node_map = dict(zip(names, indices))

    for name, n in graph.nodes.items():
        for edge in n.edges:
            target = node_map.get(edge.destination)
            if target is not None:
                digraph.add_edge(node_map[name], target, edge)

    return GraphBridge(
        digraph=digraph,
        node_map=node_map,
        inv_map={idx: name for name, idx in node_map.items()},
    )


# =============================================================================
# QUERIES
# =============================================================================

def get_root_nodes(graph: Graph) -> List[str]:
    """Nodes no known edge points to (entry candidates)."""
    bridge = to_digraph(graph)
    return [
        name for name, idx in bridge.node_map.items()
        if bridge.digraph.in_degree(idx) == 0
    ]


def get_terminal_nodes(graph: Graph) -> List[str]:
    """Nodes with no edges (where a process ends)."""
    return [name for name, n in graph.nodes.items() if n.is_terminal]


def find_unreachable_nodes(graph: Graph, start: str) -> List[str]:
    """
    Nodes that no route from `start` can ever visit.

    Raises:
        NodeNotFoundError: If `start` is not a node
    """
    bridge = to_digraph(graph)
    start_idx = bridge.index_of(start)
    reachable = set(rx.descendants(bridge.digraph, start_idx))
    reachable.add(start_idx)
    return sorted(
        name for name, idx in bridge.node_map.items()
        if idx not in reachable
    )


def get_graph_metrics(graph: Graph) -> Dict[str, Any]:
    """Basic structural metrics. Never raises on malformed graphs."""
    bridge = to_digraph(graph)
    is_dag = rx.is_directed_acyclic_graph(bridge.digraph)
    unknown = sum(
        1 for n in graph.nodes.values() for edge in n.edges
        if edge.destination not in graph.nodes
    )

    metrics: Dict[str, Any] = {
        "node_count": len(graph),
        "edge_count": graph.edge_count,
        "unknown_destination_count": unknown,
        "terminal_count": len(get_terminal_nodes(graph)),
        "is_dag": is_dag,
        "weakly_connected_components": (
            rx.number_weakly_connected_components(bridge.digraph) if len(graph) else 0
        ),
        "layer_count": None,
        "max_depth": None,
    }

    if is_dag:
        metrics["layer_count"] = len(topological_order(graph))
        metrics["max_depth"] = rx.dag_longest_path_length(bridge.digraph) if len(graph) else 0

    return metrics
