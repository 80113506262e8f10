"""
WAYPOINT ERRORS - Usage and Configuration Failures

Structural problems in a graph (unknown destinations, missing catchalls,
cycles) are NOT exceptions: the validator returns them as data. The
exceptions here cover caller misuse and configuration problems only:

- NodeNotFoundError: routing from a node name the graph does not define
- CyclicGraphError: strict layering of a graph that is not acyclic
- WalkLimitExceededError: a walk that did not reach a terminal signal
- ConfigError: unknown or malformed validator configuration
"""
from typing import Iterable, List, Optional


# =============================================================================
# CUSTOM EXCEPTIONS
# =============================================================================

class GraphError(Exception):
    """Base exception for decision graph operations."""
    pass


class NodeNotFoundError(GraphError):
    """Raised when a node name is not in the graph."""
    def __init__(self, node_name: str):
        self.node_name = node_name
        super().__init__(f"Node not found: {node_name}")


class GraphInvariantError(GraphError):
    """Raised when an operation requires an invariant the graph breaks."""
    pass


class CyclicGraphError(GraphInvariantError):
    """Raised when layering cannot place every node (graph is not acyclic)."""
    def __init__(self, nodes: Iterable[str]):
        self.nodes: List[str] = sorted(nodes)
        super().__init__(
            f"Graph is not acyclic; unable to layer node(s): {', '.join(self.nodes)}"
        )


class WalkLimitExceededError(GraphError):
    """Raised when a walk takes more steps than allowed."""
    def __init__(self, path: List[str], max_steps: int):
        self.path = path
        self.max_steps = max_steps
        super().__init__(
            f"Walk exceeded {max_steps} step(s) without reaching a terminal node: "
            f"{' => '.join(path)}"
        )


class ConfigError(GraphError):
    """Raised when validator configuration cannot be built."""
    def __init__(self, message: str, key: Optional[str] = None):
        self.key = key
        super().__init__(message)
