"""Core of a visual app builder: component trees, navigation graphs and preview."""

__version__ = "0.1.0"

from appflow.graph.navigation import NavigationGraph
from appflow.graph.wiring import SmartWiring
from appflow.model import Node, NodeKind, Project, UIComponent
from appflow.results import NoopReason, OpResult
from appflow.runtime.preview import PreviewSession
from appflow.tree.engine import ComponentTree, Placement, make_component

__all__ = [
    "ComponentTree",
    "NavigationGraph",
    "Node",
    "NodeKind",
    "NoopReason",
    "OpResult",
    "Placement",
    "PreviewSession",
    "Project",
    "SmartWiring",
    "UIComponent",
    "make_component",
]
