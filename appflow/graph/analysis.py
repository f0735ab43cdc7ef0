"""Read-only analysis of a project's navigation graph."""

import re
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional, Set

import networkx as nx

from appflow.logic.conditions import to_text
from appflow.model.actions import Action, ActionType, Condition, GatewayRule, Operator
from appflow.model.components import ButtonProps
from appflow.model.project import Project
from appflow.tree.engine import iter_components


@dataclass
class Issue:
    """A problem found by :func:`validate_project`."""
    severity: str  # "error" or "warning"
    code: str
    message: str
    node_id: Optional[str] = None
    component_id: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.severity == "error"

    def __str__(self) -> str:
        return f"[{self.severity}] {self.code}: {self.message}"


def to_networkx(project: Project) -> nx.DiGraph:
    """Directed graph of node ids with ``kind`` and ``name`` attributes.

    Edges to unknown nodes are left out.
    """
    graph = nx.DiGraph()
    for node in project.screens:
        graph.add_node(node.id, kind=node.kind.value, name=node.name)
    for node in project.screens:
        for target_id in node.outgoing_connections:
            if target_id in graph:
                graph.add_edge(node.id, target_id)
    return graph


def unreachable_nodes(project: Project) -> List[str]:
    """Nodes that cannot be reached from the entry node, in project order."""
    entry = project.entry_node
    if entry is None:
        return []
    graph = to_networkx(project)
    reachable = nx.descendants(graph, entry.id) | {entry.id}
    return [node.id for node in project.screens if node.id not in reachable]


def _all_component_ids(project: Project) -> Set[str]:
    return {
        component.id
        for node in project.screens
        for component in iter_components(node.component_tree)
    }


def validate_project(project: Project) -> List[Issue]:
    """Collect structural problems; never raises."""
    issues: List[Issue] = []
    node_ids = set(project.node_ids())
    component_ids = _all_component_ids(project)

    def check_action(action: Action, node_id: str, component_id: Optional[str] = None):
        if action.type == ActionType.NAVIGATE:
            if not action.target_id:
                issues.append(Issue(
                    "warning", "navigate_without_target",
                    "Navigate action has no target", node_id, component_id,
                ))
            elif action.target_id not in node_ids:
                issues.append(Issue(
                    "error", "unknown_action_target",
                    f"Action targets unknown node {action.target_id}", node_id, component_id,
                ))
        elif action.type == ActionType.LINK and not action.url:
            issues.append(Issue(
                "warning", "link_without_url", "Link action has no URL", node_id, component_id,
            ))

    def check_conditions(conditions: List[Condition], node_id: str, component_id: Optional[str] = None):
        for condition in conditions:
            if condition.field_id and condition.field_id not in component_ids:
                issues.append(Issue(
                    "warning", "unknown_condition_field",
                    f"Condition reads unknown component {condition.field_id}",
                    node_id, component_id,
                ))

    if project.screens and not any(node.is_screen for node in project.screens):
        issues.append(Issue("warning", "no_screens", "Project has no screens"))

    for node in project.screens:
        for target_id in node.outgoing_connections:
            if target_id not in node_ids:
                issues.append(Issue(
                    "error", "dangling_edge",
                    f"Edge {node.id} -> {target_id} references unknown node", node.id,
                ))

        counts = Counter(component.id for component in iter_components(node.component_tree))
        for component_id, count in counts.items():
            if count > 1:
                issues.append(Issue(
                    "error", "duplicate_component_id",
                    f"Component id {component_id} appears {count} times", node.id, component_id,
                ))

        if node.is_gateway:
            if not node.rules:
                issues.append(Issue(
                    "warning", "gateway_without_rules",
                    f"Gateway {node.name or node.id} has no rules", node.id,
                ))
            for rule in node.rules:
                check_conditions(rule.conditions, node.id)
                check_action(rule.action, node.id)

        for component in iter_components(node.component_tree):
            props = component.props
            if not isinstance(props, ButtonProps):
                continue
            for rule in props.rules():
                check_conditions(rule.conditions, node.id, component.id)
                check_action(rule.action, node.id, component.id)

    for node_id in unreachable_nodes(project):
        issues.append(Issue(
            "warning", "unreachable_node",
            f"Node {node_id} is not reachable from the entry node", node_id,
        ))

    return issues


# ----------------------------------------------------------------------
# Mermaid
# ----------------------------------------------------------------------

_OPERATOR_SYMBOLS = {
    Operator.EQUALS: "==",
    Operator.NOT_EQUALS: "!=",
    Operator.CONTAINS: "contains",
    Operator.GREATER_THAN: ">",
    Operator.LESS_THAN: "<",
}


def _mermaid_id(node_id: str) -> str:
    return re.sub(r"[^A-Za-z0-9_]", "_", node_id)


def _mermaid_text(text: str) -> str:
    return text.replace('"', "#quot;")


def describe_condition(condition: Condition) -> str:
    if not condition.field_id:
        return "always"
    if condition.operator == Operator.IS_TRUE:
        return condition.field_id
    if condition.operator == Operator.IS_FALSE:
        return f"not {condition.field_id}"
    symbol = _OPERATOR_SYMBOLS[condition.operator]
    return f"{condition.field_id} {symbol} {to_text(condition.value)}"


def describe_rule(rule: GatewayRule) -> str:
    """Short label for a rule; ``else`` for the default rule."""
    if rule.is_default:
        return "else"
    return " and ".join(describe_condition(condition) for condition in rule.conditions)


def to_mermaid(project: Project) -> str:
    """Generate Mermaid diagram representation."""
    lines = ["graph TD"]

    for node in project.screens:
        label = _mermaid_text(node.name or node.id)
        if node.is_gateway:
            lines.append(f'    {_mermaid_id(node.id)}{{"{label}"}}')
        else:
            lines.append(f'    {_mermaid_id(node.id)}["{label}"]')

    node_ids = set(project.node_ids())
    for node in project.screens:
        for target_id in node.outgoing_connections:
            if target_id not in node_ids:
                continue
            arrow = "-->"
            if node.is_gateway:
                rule = next((r for r in node.rules if r.action.targets(target_id)), None)
                if rule is not None:
                    arrow = f'-->|"{_mermaid_text(describe_rule(rule))}"|'
            lines.append(f"    {_mermaid_id(node.id)} {arrow} {_mermaid_id(target_id)}")

    return "\n".join(lines)
