"""
WAYPOINT GRAPH INVARIANTS - Structural Correctness of a Decision Graph

This module checks the shape of a declaratively authored graph before it is
used to drive a process. It never raises: every problem found is returned so
a single call surfaces the full diagnostic picture.

Invariants Implemented:
1. Catchall Placement: a catchall edge must be the last edge of its node
   (always checked, no toggle)
2. Acyclicity: no node can reach itself (toggle: allow_cycles)
3. Conditional Ends: every non-terminal node needs a catchall edge
   (toggle: allow_conditional_ends)
4. Destinations: every edge targets a node of the same graph
   (toggle: allow_unknown_destinations)

Terminal nodes (no edges) are exempt from all of them.

Message format:
    error with definition of node '<name>': <detail>
"""
import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Tuple

from waypoint.schemas import Graph, Node

logger = logging.getLogger(__name__)


# =============================================================================
# INVARIANT RESULTS
# =============================================================================

class InvariantRule(str, Enum):
    """The structural rules, in the order validate_all() runs them."""
    CATCHALL_PLACEMENT = "catchall_placement"
    CYCLES = "cycles"
    CONDITIONAL_ENDS = "conditional_ends"
    DESTINATIONS = "destinations"


@dataclass
class InvariantViolation:
    """A specific invariant violation on one node."""
    rule: InvariantRule
    node_name: str
    message: str
    nodes_involved: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        return f"error with definition of node '{self.node_name}': {self.message}"


@dataclass
class InvariantReport:
    """Complete validation report."""
    valid: bool
    violations: List[InvariantViolation]
    metrics: Dict[str, Any]

    @property
    def messages(self) -> List[str]:
        return [str(v) for v in self.violations]

    def by_rule(self, rule: InvariantRule) -> List[InvariantViolation]:
        return [v for v in self.violations if v.rule == rule]


def _non_terminal(graph: Graph) -> Iterator[Tuple[str, Node]]:
    for name, n in graph.nodes.items():
        if not n.is_terminal:
            yield name, n


# =============================================================================
# GRAPH INVARIANTS
# =============================================================================

class GraphInvariants:
    """
    Rule-checkers over a Graph.

    All methods are static and total over the node mapping; each returns
    zero or more violations per node. validate_all() decides which of them
    run, based on the graph's ValidatorConfig.
    """

    @staticmethod
    def validate_catchall_placement(graph: Graph) -> List[InvariantViolation]:
        """
        A node's first catchall edge must be its last edge.

        Edges after a catchall can never match, whatever their guards say.
        """
        violations = []
        for name, n in _non_terminal(graph):
            index = n.catchall_index
            if index != -1 and index != len(n.edges) - 1:
                violations.append(InvariantViolation(
                    rule=InvariantRule.CATCHALL_PLACEMENT,
                    node_name=name,
                    message="catchall route should be the last route in the list of 'next' predicates",
                ))
        return violations

    @staticmethod
    def validate_conditional_ends(graph: Graph) -> List[InvariantViolation]:
        """Every non-terminal node must carry a catchall edge."""
        violations = []
        for name, n in _non_terminal(graph):
            if n.catchall_index == -1:
                violations.append(InvariantViolation(
                    rule=InvariantRule.CONDITIONAL_ENDS,
                    node_name=name,
                    message="catchall route is required for all nodes that have any 'next' predicates defined",
                ))
        return violations

    @staticmethod
    def validate_destinations(graph: Graph) -> List[InvariantViolation]:
        """One violation per edge whose destination is not a node."""
        violations = []
        for name, n in _non_terminal(graph):
            for edge in n.edges:
                if edge.destination not in graph.nodes:
                    violations.append(InvariantViolation(
                        rule=InvariantRule.DESTINATIONS,
                        node_name=name,
                        message=f"unknown destination node '{edge.destination}'",
                        nodes_involved=[edge.destination],
                    ))
        return violations

    @staticmethod
    def find_cycles(graph: Graph, root: str) -> List[Tuple[str, List[str]]]:
        """
        Depth-first search from `root` with an explicit path stack.

        Reaching a name already on the current path records
        (closing_node, path + [repeated_name]) and stops that branch; the
        remaining branches of earlier ancestors still run. Unknown
        destinations and terminal nodes end a branch silently.

        Edges are explored in stored order, matching a recursive walk.

        Returns:
            List of (node whose edge closes the loop, full path)
        """
        found: List[Tuple[str, List[str]]] = []
        start = graph.nodes.get(root)
        if start is None or start.is_terminal:
            return found

        path = [root]
        stack = [iter(start.edges)]

        while stack:
            edge = next(stack[-1], None)
            if edge is None:
                stack.pop()
                path.pop()
                continue

            destination = edge.destination
            if destination in path:
                found.append((path[-1], path + [destination]))
                continue

            successor = graph.nodes.get(destination)
            if successor is None or successor.is_terminal:
                continue

            path.append(destination)
            stack.append(iter(successor.edges))

        return found

    @staticmethod
    def validate_cycles(graph: Graph) -> List[InvariantViolation]:
        """
        Report every cycle reachable from every node used as a root.

        A physical cycle is reported once per distinct root-and-path that
        rediscovers it, so one loop fed by several ancestors yields several
        messages.
        """
        violations = []
        for root in graph.nodes:
            for closing_node, cycle_path in GraphInvariants.find_cycles(graph, root):
                violations.append(InvariantViolation(
                    rule=InvariantRule.CYCLES,
                    node_name=closing_node,
                    message=f"cycle detected: {' => '.join(cycle_path)}",
                    nodes_involved=cycle_path,
                ))
        return violations

    @staticmethod
    def validate_all(graph: Graph) -> InvariantReport:
        """
        Run the rules enabled by the graph's ValidatorConfig.

        Order: catchall placement, cycles, conditional ends, destinations.

        Returns:
            InvariantReport; valid iff no violation was found
        """
        config = graph.validators
        checks = [(InvariantRule.CATCHALL_PLACEMENT, GraphInvariants.validate_catchall_placement)]
        if not config.allow_cycles:
            checks.append((InvariantRule.CYCLES, GraphInvariants.validate_cycles))
        if not config.allow_conditional_ends:
            checks.append((InvariantRule.CONDITIONAL_ENDS, GraphInvariants.validate_conditional_ends))
        if not config.allow_unknown_destinations:
            checks.append((InvariantRule.DESTINATIONS, GraphInvariants.validate_destinations))

        violations: List[InvariantViolation] = []
        for rule, check in checks:
            found = check(graph)
            logger.debug("Rule %s: %d violation(s)", rule.value, len(found))
            violations.extend(found)

        counts = Counter(v.rule.value for v in violations)
        metrics = {
            "node_count": len(graph),
            "edge_count": graph.edge_count,
            "rules_checked": [rule.value for rule, _ in checks],
            "violation_counts": {rule.value: counts.get(rule.value, 0) for rule, _ in checks},
        }

        if violations:
            logger.info(
                "Graph failed validation with %d violation(s) across %d node(s)",
                len(violations),
                len({v.node_name for v in violations}),
            )

        return InvariantReport(
            valid=not violations,
            violations=violations,
            metrics=metrics,
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def validate(graph: Graph) -> List[str]:
    """
    Validate a graph and return human-readable error messages.

    An empty list means the graph is well formed under its configuration.
    """
    return GraphInvariants.validate_all(graph).messages


def validate_all(graph: Graph) -> InvariantReport:
    """Convenience function returning the structured report."""
    return GraphInvariants.validate_all(graph)


def is_valid(graph: Graph) -> bool:
    """Quick check that validate() would return no errors."""
    return GraphInvariants.validate_all(graph).valid
