"""
WAYPOINT SCHEMAS - The Grammar of a Decision Graph

This module defines the passive data that every other module reads:
- Edge: a guarded transition to a destination node name
- Node: an ordered tuple of edges plus an opaque context payload
- ValidatorConfig: per-graph toggles for the structural validator
- Graph: node name -> Node, carrying its ValidatorConfig

Design Principles:
1. STRICT TYPING: msgspec.Struct, kw_only, frozen. Nothing mutates a graph
   once it is built.
2. OPAQUE CONTEXT: node/edge context is carried, never inspected. `None`
   means "no context"; an empty value ({} / "") is a real context.
3. ORDER IS MEANING: a node's edges are evaluated in stored order, so they
   are kept as a tuple.
4. NO VALIDATION AT CONSTRUCTION: builders accept any input, including
   edges to nodes that do not exist. Use graph_invariants.validate().

Usage:
    graph = create_graph({
        "questionType": node([
            to("date", lambda s: s["questionType"] == "date"),
            catchall("multipleChoice"),
        ]),
        "date": node([catchall("finish")]),
        "multipleChoice": node([catchall("finish")]),
        "finish": node([]),
    })
"""
import msgspec
from typing import Any, Callable, Dict, Iterable, List, Mapping, Tuple, Union

from waypoint.errors import ConfigError, NodeNotFoundError


Guard = Callable[[Any], bool]


def _accept_all(state: Any) -> bool:
    """Guard used by every catchall edge."""
    return True


# =============================================================================
# EDGE / NODE
# =============================================================================

class Edge(msgspec.Struct, kw_only=True, frozen=True):
    """
    A directed, guarded transition owned by exactly one node.

    `destination` need not name an existing node; that is a validity
    condition reported by the validator, not a construction error.
    """
    destination: str
    guard: Guard
    is_catchall: bool = False
    context: Any = None

    def accepts(self, state: Any) -> bool:
        """Evaluate the guard. Catchall edges accept every state."""
        if self.is_catchall:
            return True
        return bool(self.guard(state))


class Node(msgspec.Struct, kw_only=True, frozen=True):
    """A named state in the graph: ordered edges plus opaque context."""
    edges: Tuple[Edge, ...] = ()
    context: Any = None

    @property
    def is_terminal(self) -> bool:
        """A node with no edges. Exempt from every per-node rule."""
        return len(self.edges) == 0

    @property
    def catchall_index(self) -> int:
        """Index of the first catchall edge, or -1 if there is none."""
        for index, edge in enumerate(self.edges):
            if edge.is_catchall:
                return index
        return -1


# =============================================================================
# VALIDATOR CONFIGURATION
# =============================================================================

class ValidatorConfig(msgspec.Struct, kw_only=True, frozen=True, forbid_unknown_fields=True):
    """
    Structural rule toggles. Each flag disables the rule it names when True.

    Defaults are all False (strictest). The catchall placement rule has no
    toggle and always runs.
    """
    allow_cycles: bool = False
    allow_conditional_ends: bool = False
    allow_unknown_destinations: bool = False

    def with_overrides(self, **overrides: Any) -> "ValidatorConfig":
        """
        Return a new config with `overrides` applied over this one.

        Raises:
            ConfigError: If an override names an unknown toggle or is not a bool
        """
        merged = msgspec.structs.asdict(self)
        merged.update(overrides)
        return coerce_validator_config(merged)


def coerce_validator_config(
    value: Union["ValidatorConfig", Mapping[str, Any], None]
) -> ValidatorConfig:
    """
    Build a ValidatorConfig from defaults plus a partial mapping.

    Raises:
        ConfigError: If the mapping holds unknown keys or non-bool values
    """
    if value is None:
        return ValidatorConfig()
    if isinstance(value, ValidatorConfig):
        return value
    try:
        return msgspec.convert(dict(value), type=ValidatorConfig)
    except msgspec.ValidationError as e:
        raise ConfigError(f"Invalid validator configuration: {e}") from e


# =============================================================================
# GRAPH
# =============================================================================

class Graph(msgspec.Struct, kw_only=True, frozen=True):
    """
    A decision graph: node name -> Node, plus validator configuration.

    Iteration order over nodes only affects the order of independent
    validator messages, never which messages are produced.
    """
    nodes: Dict[str, Node]
    validators: ValidatorConfig = msgspec.field(default_factory=ValidatorConfig)

    def has_node(self, name: str) -> bool:
        return name in self.nodes

    def get_node(self, name: str) -> Node:
        """
        Look up a node by name.

        Raises:
            NodeNotFoundError: If no node has this name
        """
        try:
            return self.nodes[name]
        except KeyError:
            raise NodeNotFoundError(name) from None

    @property
    def edge_count(self) -> int:
        return sum(len(n.edges) for n in self.nodes.values())

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, name: object) -> bool:
        return name in self.nodes


# =============================================================================
# BUILDERS
# =============================================================================

def to(destination: str, when: Guard, context: Any = None) -> Edge:
    """Conditional edge: matches when `when(state)` is truthy."""
    return Edge(destination=destination, guard=when, is_catchall=False, context=context)


def catchall(destination: str, context: Any = None) -> Edge:
    """Catchall edge: matches every state. Belongs last in a node's edges."""
    return Edge(destination=destination, guard=_accept_all, is_catchall=True, context=context)


def node(edges: Iterable[Edge], context: Any = None) -> Node:
    return Node(edges=tuple(edges), context=context)


def create_graph(
    nodes: Mapping[str, Node],
    validators: Union[ValidatorConfig, Mapping[str, Any], None] = None,
    **overrides: Any,
) -> Graph:
    """
    Assemble a Graph from a node mapping.

    Args:
        nodes: node name -> Node
        validators: a ValidatorConfig or a partial mapping of toggles;
                    missing toggles default to False
        **overrides: toggles applied last, e.g. allow_cycles=True

    Raises:
        ConfigError: If a toggle name is unknown or its value is not a bool
    """
    config = coerce_validator_config(validators)
    if overrides:
        config = config.with_overrides(**overrides)
    return Graph(nodes=dict(nodes), validators=config)


# =============================================================================
# SERIALIZATION HELPERS
# =============================================================================

def outline(graph: Graph) -> Dict[str, List[Dict[str, Any]]]:
    """
    Describe the routing structure as builtins (guards and contexts omitted).

    The result is JSON-encodable, e.g. with msgspec.json.encode().
    """
    return {
        name: [
            {"destination": edge.destination, "catchall": edge.is_catchall}
            for edge in n.edges
        ]
        for name, n in graph.nodes.items()
    }
