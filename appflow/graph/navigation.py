"""
Navigation graph over a project's screens and gateways.

:class:`NavigationGraph` wraps one :class:`~appflow.model.Project` and is the
only place nodes and edges are created or removed, so the edge invariants
hold for every project it has touched:

* edges only point at nodes of the same project;
* no node has an edge to itself;
* a node never lists the same target twice.
"""

from typing import Any, Dict, Iterable, List, Optional, Union

import structlog

from appflow.config import Features, Settings, get_settings
from appflow.errors import UnknownNodeError
from appflow.ids import new_node_id
from appflow.model.actions import Action, ActionType
from appflow.model.components import ButtonProps
from appflow.model.project import Node, NodeKind, Position, Project
from appflow.results import NoopReason, OpResult
from appflow.tree.engine import ComponentTree
from appflow.graph.wiring import SmartWiring

logger = structlog.get_logger(__name__)

DEFAULT_POSITION = (100.0, 100.0)


class NavigationGraph:
    """Owns node and edge edits for a single project."""

    def __init__(
        self,
        project: Project,
        wiring: Optional[SmartWiring] = None,
        settings: Optional[Settings] = None,
    ):
        self.project = project
        self.settings = settings or get_settings()
        if wiring is None and Features(self.settings).smart_wiring:
            wiring = SmartWiring(self.settings)
        self.wiring = wiring
        self._trees: Dict[str, ComponentTree] = {}

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, node_id: str) -> Optional[Node]:
        return self.project.get_node(node_id)

    def require(self, node_id: str) -> Node:
        """Like :meth:`get` but raises :class:`UnknownNodeError`."""
        node = self.get(node_id)
        if node is None:
            raise UnknownNodeError(node_id)
        return node

    def __contains__(self, node_id: str) -> bool:
        return self.get(node_id) is not None

    def __len__(self) -> int:
        return len(self.project.screens)

    def nodes(self, kind: Optional[NodeKind] = None) -> List[Node]:
        return list(self.project.iter_nodes(kind))

    def successors(self, node_id: str) -> List[Node]:
        node = self.require(node_id)
        return [target for target in map(self.get, node.outgoing_connections) if target is not None]

    def predecessors(self, node_id: str) -> List[Node]:
        self.require(node_id)
        return [node for node in self.project.screens if node_id in node.outgoing_connections]

    def edges(self) -> List[tuple]:
        return [
            (node.id, target_id)
            for node in self.project.screens
            for target_id in node.outgoing_connections
        ]

    def tree(self, node_id: str) -> ComponentTree:
        """The component tree editor for a node's root list.

        The editor wraps the node's own list, so edits made through it are
        edits to the project.
        """
        node = self.require(node_id)
        tree = self._trees.get(node_id)
        if tree is None or tree.roots is not node.component_tree:
            tree = ComponentTree(node.component_tree)
            self._trees[node_id] = tree
        return tree

    # ------------------------------------------------------------------
    # Nodes
    # ------------------------------------------------------------------

    def _default_name(self, kind: NodeKind) -> str:
        count = sum(1 for _ in self.project.iter_nodes(kind)) + 1
        return f"Gateway {count}" if kind == NodeKind.GATEWAY else f"Screen {count}"

    def _next_position(self) -> Position:
        if not self.project.screens:
            return Position(x=DEFAULT_POSITION[0], y=DEFAULT_POSITION[1])
        last = self.project.screens[-1].position
        return Position(x=last.x, y=last.y + self.settings.node_spacing_y)

    def add_node(
        self,
        kind: NodeKind = NodeKind.SCREEN,
        position: Optional[Union[Position, tuple]] = None,
        name: Optional[str] = None,
    ) -> Node:
        """Create a node with a fresh id and append it to the project."""
        kind = NodeKind(kind)
        if position is None:
            position = self._next_position()
        elif isinstance(position, tuple):
            position = Position(x=position[0], y=position[1])

        node = Node(
            id=self._fresh_id(kind),
            kind=kind,
            name=name or self._default_name(kind),
            position=position,
        )
        self.project.screens.append(node)
        self.project.touch()

        logger.info("node_added", node_id=node.id, kind=kind.value, name=node.name)
        return node

    def _fresh_id(self, kind: NodeKind) -> str:
        node_id = new_node_id(kind.value)
        while node_id in self:
            node_id = new_node_id(kind.value)
        return node_id

    def move(self, node_id: str, x: float, y: float) -> OpResult:
        node = self.get(node_id)
        if node is None:
            return OpResult.noop(NoopReason.NOT_FOUND)
        if node.position.x == x and node.position.y == y:
            return OpResult.noop(NoopReason.UNCHANGED)
        node.position = Position(x=x, y=y)
        self.project.touch()
        return OpResult.ok(node)

    def rename(self, node_id: str, name: str) -> OpResult:
        node = self.get(node_id)
        if node is None:
            return OpResult.noop(NoopReason.NOT_FOUND)
        if node.name == name:
            return OpResult.noop(NoopReason.UNCHANGED)
        node.name = name
        self.project.touch()
        return OpResult.ok(node)

    def remove_node(self, node_id: str) -> OpResult:
        """Remove a node and null out everything that pointed at it.

        Edges into the node are dropped. Navigate actions aimed at it (gateway
        rules, button actions) become ``none`` actions; the rules and buttons
        themselves stay where they are.
        """
        node = self.get(node_id)
        if node is None:
            return OpResult.noop(NoopReason.NOT_FOUND)

        self.project.screens.remove(node)
        self._trees.pop(node_id, None)

        edges_removed = 0
        actions_nulled = 0
        for other in self.project.screens:
            if node_id in other.outgoing_connections:
                other.outgoing_connections.remove(node_id)
                edges_removed += 1

            for rule in other.rules:
                if rule.action.targets(node_id):
                    rule.action = Action.none()
                    actions_nulled += 1

            for component in self.tree(other.id).walk():
                if isinstance(component.props, ButtonProps):
                    actions_nulled += _null_button_actions(component.props, node_id)

        self.project.touch()
        logger.info(
            "node_removed",
            node_id=node_id,
            edges_removed=edges_removed,
            actions_nulled=actions_nulled,
        )
        return OpResult.ok(node)

    def merge_nodes(self, nodes: Iterable[Union[Node, Dict[str, Any]]]) -> List[Node]:
        """Add a batch of externally generated nodes.

        Ids that collide with the project are replaced and every reference
        inside the batch follows the new id; an id repeated within the batch
        keeps pointing at its first carrier.
        Edges to nodes that exist neither in the project nor in the batch are
        dropped. Nodes without a position are stacked below the last node.
        """
        batch = [
            node.model_copy(deep=True) if isinstance(node, Node) else Node.model_validate(node)
            for node in nodes
        ]

        existing = set(self.project.node_ids())
        taken = set(existing)
        remap: Dict[str, str] = {}
        for node in batch:
            if node.id in taken:
                fresh = self._fresh_id(node.kind)
                while fresh in taken:
                    fresh = self._fresh_id(node.kind)
                # References follow the first batch node that carried the id.
                if node.id in existing:
                    remap.setdefault(node.id, fresh)
                logger.debug("merged_node_rekeyed", old_id=node.id, new_id=fresh)
                node.id = fresh
            taken.add(node.id)

        added: List[Node] = []
        for node in batch:
            connections = []
            for target_id in node.outgoing_connections:
                target_id = remap.get(target_id, target_id)
                if target_id in taken and target_id != node.id and target_id not in connections:
                    connections.append(target_id)
            node.outgoing_connections = connections

            for rule in node.rules:
                _remap_action(rule.action, remap)
            for component in ComponentTree(node.component_tree).walk():
                if isinstance(component.props, ButtonProps):
                    for action in component.props.iter_actions():
                        _remap_action(action, remap)

            if "position" not in node.model_fields_set:
                node.position = self._next_position()
            if not node.name:
                node.name = self._default_name(node.kind)

            self.project.screens.append(node)
            added.append(node)

        self.project.touch()
        logger.info("nodes_merged", count=len(added), rekeyed=len(remap))
        return added

    # ------------------------------------------------------------------
    # Edges
    # ------------------------------------------------------------------

    def connect(self, source_id: str, target_id: str) -> OpResult:
        """Add ``source -> target`` and run smart wiring for the new edge.

        The result value is the :class:`~appflow.graph.wiring.WiringReport`
        (``None`` when wiring is disabled).
        """
        if source_id == target_id:
            return OpResult.noop(NoopReason.SELF_LOOP)
        source = self.get(source_id)
        target = self.get(target_id)
        if source is None or target is None:
            logger.debug("connect_skipped", source=source_id, target=target_id)
            return OpResult.noop(NoopReason.NOT_FOUND)
        if target_id in source.outgoing_connections:
            return OpResult.noop(NoopReason.DUPLICATE_EDGE)

        source.outgoing_connections.append(target_id)
        report = self.wiring.apply(self, source, target) if self.wiring else None
        self.project.touch()

        logger.info("edge_connected", source=source_id, target=target_id)
        return OpResult.ok(report)

    def disconnect(self, source_id: str, target_id: str) -> OpResult:
        """Remove the edge only; wired UI stays."""
        source = self.get(source_id)
        if source is None or target_id not in source.outgoing_connections:
            return OpResult.noop(NoopReason.NOT_FOUND)

        source.outgoing_connections.remove(target_id)
        self.project.touch()

        logger.info("edge_disconnected", source=source_id, target=target_id)
        return OpResult.ok()


def _null_button_actions(props: ButtonProps, node_id: str) -> int:
    count = 0
    if props.action is not None and props.action.targets(node_id):
        props.action = Action.none()
        count += 1
    for rule in props.actions or []:
        if rule.action.targets(node_id):
            rule.action = Action.none()
            count += 1
    return count


def _remap_action(action: Action, remap: Dict[str, str]) -> None:
    if action.type == ActionType.NAVIGATE and action.target_id in remap:
        action.target_id = remap[action.target_id]
