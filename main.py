"""
WAYPOINT MAIN - Entry Point and CLI

Commands:
    check    - Validate a graph and print every structural error
    layers   - Print the layered topological order of a graph
    metrics  - Print structural metrics as JSON
    outline  - Print node -> destinations as JSON

A graph is named by TARGET, an importable "package.module:attribute" whose
value is a waypoint Graph.

Usage:
    # Validate (exit status 1 when errors are found)
    python main.py check surveys.creator:graph

    # Layers, one per line
    python main.py layers surveys.creator:graph

    # Best-effort layers for a graph that may contain cycles
    python main.py layers surveys.creator:graph --partial

    # Metrics / outline
    python main.py metrics surveys.creator:graph
    python main.py --log-level DEBUG outline surveys.creator:graph
"""
import importlib
import sys
from pathlib import Path
from typing import List, Optional

import msgspec

# Add waypoint to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from waypoint.errors import CyclicGraphError, GraphError
from waypoint.schemas import Graph, outline


def load_target(target: str) -> Graph:
    """
    Import "module:attribute" and return the Graph it names.

    Raises:
        GraphError: If the target is malformed or does not name a Graph
    """
    module_name, sep, attribute = target.partition(":")
    if not sep or not module_name or not attribute:
        raise GraphError(f"Target must look like 'module:attribute', got '{target}'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise GraphError(f"Cannot import '{module_name}': {e}") from e
    except Exception as e:
        raise GraphError(f"Error while importing '{module_name}': {type(e).__name__}: {e}") from e

    value = module
    for part in attribute.split("."):
        try:
            value = getattr(value, part)
        except AttributeError:
            raise GraphError(f"'{module_name}' has no attribute '{attribute}'") from None

    if not isinstance(value, Graph):
        raise GraphError(f"'{target}' is a {type(value).__name__}, not a Graph")
    return value


def cmd_check(args) -> int:
    """Handle check command."""
    from waypoint.graph_invariants import validate_all

    graph = load_target(args.target)
    report = validate_all(graph)

    for message in report.messages:
        print(message)

    if report.valid:
        print(f"OK: {len(graph)} node(s), {graph.edge_count} edge(s)")
        return 0

    print(f"FAILED: {len(report.violations)} error(s)", file=sys.stderr)
    return 1


def cmd_layers(args) -> int:
    """Handle layers command."""
    from waypoint.topology import topological_order

    graph = load_target(args.target)
    try:
        layers = topological_order(graph, strict=not args.partial)
    except CyclicGraphError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for depth, layer in enumerate(layers):
        print(f"{depth}: {', '.join(sorted(layer))}")
    return 0


def cmd_metrics(args) -> int:
    """Handle metrics command."""
    from waypoint.analytics import get_graph_metrics

    graph = load_target(args.target)
    print(msgspec.json.encode(get_graph_metrics(graph)).decode())
    return 0


def cmd_outline(args) -> int:
    """Handle outline command."""
    graph = load_target(args.target)
    print(msgspec.json.encode(outline(graph)).decode())
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point with subcommands."""
    import argparse

    from waypoint.config import configure_logging

    parser = argparse.ArgumentParser(
        description="Waypoint - Decision graph validation and layering",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (overrides WAYPOINT_LOG_LEVEL and the bundled waypoint.toml)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # check command
    check_parser = subparsers.add_parser("check", help="Validate a graph")
    check_parser.add_argument("target", help="module:attribute naming a Graph")
    check_parser.set_defaults(func=cmd_check)

    # layers command
    layers_parser = subparsers.add_parser("layers", help="Print topological layers")
    layers_parser.add_argument("target", help="module:attribute naming a Graph")
    layers_parser.add_argument(
        "--partial",
        action="store_true",
        help="Print the layers that can be computed instead of failing on cycles"
    )
    layers_parser.set_defaults(func=cmd_layers)

    # metrics command
    metrics_parser = subparsers.add_parser("metrics", help="Print graph metrics as JSON")
    metrics_parser.add_argument("target", help="module:attribute naming a Graph")
    metrics_parser.set_defaults(func=cmd_metrics)

    # outline command
    outline_parser = subparsers.add_parser("outline", help="Print graph outline as JSON")
    outline_parser.add_argument("target", help="module:attribute naming a Graph")
    outline_parser.set_defaults(func=cmd_outline)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 2

    try:
        configure_logging(args.log_level)
        return args.func(args)
    except GraphError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
