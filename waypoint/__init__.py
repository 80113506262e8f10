"""
WAYPOINT - Decision graphs with validated, deterministic routing.

This package provides:
- Graph model and builders (Edge, Node, Graph, to, catchall, node, create_graph)
- Routing (next_node, walk)
- Structural validation (validate, validate_all, GraphInvariants)
- Layered topological order (topological_order)
- Read-only analytics over a rustworkx bridge
"""

from waypoint.errors import (
    GraphError,
    NodeNotFoundError,
    GraphInvariantError,
    CyclicGraphError,
    WalkLimitExceededError,
    ConfigError,
)
from waypoint.schemas import (
    Edge,
    Node,
    Graph,
    ValidatorConfig,
    to,
    catchall,
    node,
    create_graph,
    outline,
)
from waypoint.routing import next_node, match_edge, walk
from waypoint.graph_invariants import (
    GraphInvariants,
    InvariantRule,
    InvariantViolation,
    InvariantReport,
    validate,
    validate_all,
    is_valid,
)
from waypoint.topology import topological_order, layer_index

__all__ = [
    # Errors
    "GraphError",
    "NodeNotFoundError",
    "GraphInvariantError",
    "CyclicGraphError",
    "WalkLimitExceededError",
    "ConfigError",
    # Model
    "Edge",
    "Node",
    "Graph",
    "ValidatorConfig",
    "to",
    "catchall",
    "node",
    "create_graph",
    "outline",
    # Routing
    "next_node",
    "match_edge",
    "walk",
    # Validation
    "GraphInvariants",
    "InvariantRule",
    "InvariantViolation",
    "InvariantReport",
    "validate",
    "validate_all",
    "is_valid",
    # Topology
    "topological_order",
    "layer_index",
]
