"""Component tree editing."""

from appflow.tree.engine import (
    ComponentTree,
    Located,
    Placement,
    iter_components,
    make_component,
    subtree_ids,
)

__all__ = [
    "ComponentTree",
    "Located",
    "Placement",
    "iter_components",
    "make_component",
    "subtree_ids",
]
