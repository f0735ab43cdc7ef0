"""Navigation graph, smart wiring and graph analysis."""

from appflow.graph.analysis import (
    Issue,
    to_mermaid,
    to_networkx,
    unreachable_nodes,
    validate_project,
)
from appflow.graph.navigation import NavigationGraph
from appflow.graph.wiring import SmartWiring, WiringReport

__all__ = [
    "Issue",
    "NavigationGraph",
    "SmartWiring",
    "WiringReport",
    "to_mermaid",
    "to_networkx",
    "unreachable_nodes",
    "validate_project",
]
