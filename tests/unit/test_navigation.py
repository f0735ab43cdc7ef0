"""
Tests for appflow.graph.navigation and the smart wiring it triggers.

Tests cover:
- node creation (ids, default names, stacking positions)
- connect/disconnect invariants (no self-loops, no duplicates, no dangling edges)
- smart wiring for screen->screen, screen->gateway and gateway->screen edges
- cascade-null node removal
- merging externally generated node batches
"""

import pytest

from appflow.errors import UnknownNodeError
from appflow.graph.navigation import NavigationGraph
from appflow.graph.wiring import SmartWiring
from appflow.model import (
    Action,
    ActionType,
    ButtonProps,
    ComponentType,
    GatewayRule,
    NodeKind,
    Project,
)
from appflow.results import NoopReason


def buttons(graph, node_id):
    return graph.tree(node_id).find_all(lambda c: c.type == ComponentType.BUTTON)


# ============================================================================
# NODES
# ============================================================================

class TestNodes:

    def test_add_node_defaults(self, graph):
        first = graph.add_node()
        assert first.kind == NodeKind.SCREEN
        assert first.name == "Screen 1"
        assert (first.position.x, first.position.y) == (100.0, 100.0)
        assert first.id.startswith("screen-")
        assert first.component_tree == []

    def test_add_node_stacks_below_last(self, graph):
        graph.add_node(position=(40, 60))
        second = graph.add_node()
        assert (second.position.x, second.position.y) == (40.0, 410.0)

    def test_names_count_per_kind(self, graph):
        graph.add_node(NodeKind.SCREEN)
        gateway = graph.add_node(NodeKind.GATEWAY)
        screen = graph.add_node("screen")
        assert gateway.name == "Gateway 1"
        assert gateway.rules == []
        assert screen.name == "Screen 2"

    def test_ids_are_unique(self, graph):
        ids = {graph.add_node().id for _ in range(30)}
        assert len(ids) == 30

    def test_move_and_rename(self, graph):
        node = graph.add_node()
        assert graph.move(node.id, 5, 6)
        assert (node.position.x, node.position.y) == (5.0, 6.0)
        assert graph.move(node.id, 5, 6).reason == NoopReason.UNCHANGED
        assert graph.rename(node.id, "Login")
        assert node.name == "Login"
        assert graph.rename("missing", "x").reason == NoopReason.NOT_FOUND

    def test_require_raises_for_unknown(self, graph):
        with pytest.raises(UnknownNodeError) as exc:
            graph.require("missing")
        assert exc.value.node_id == "missing"
        assert graph.get("missing") is None

    def test_tree_edits_write_through(self, graph, build):
        node = graph.add_node()
        graph.tree(node.id).insert(None, build("t1", "Text"))
        assert node.component_tree[0].id == "t1"
        assert graph.tree(node.id) is graph.tree(node.id)


# ============================================================================
# EDGES
# ============================================================================

class TestEdges:

    def test_connect_appends_edge(self, two_screens):
        graph, a, b = two_screens
        assert graph.connect(a.id, b.id)
        assert a.outgoing_connections == [b.id]
        assert [n.id for n in graph.successors(a.id)] == [b.id]
        assert [n.id for n in graph.predecessors(b.id)] == [a.id]

    def test_connect_is_idempotent(self, two_screens):
        graph, a, b = two_screens
        graph.connect(a.id, b.id)
        snapshot = graph.project.to_dict()
        result = graph.connect(a.id, b.id)
        assert result.reason == NoopReason.DUPLICATE_EDGE
        snapshot["lastModified"] = graph.project.last_modified
        assert graph.project.to_dict() == snapshot

    def test_self_loop_is_rejected(self, two_screens):
        graph, a, _ = two_screens
        assert graph.connect(a.id, a.id).reason == NoopReason.SELF_LOOP
        assert a.outgoing_connections == []
        assert a.component_tree == []

    def test_unknown_endpoint_is_rejected(self, two_screens):
        graph, a, _ = two_screens
        assert graph.connect(a.id, "ghost").reason == NoopReason.NOT_FOUND
        assert a.outgoing_connections == []

    def test_disconnect_keeps_wired_ui(self, two_screens):
        graph, a, b = two_screens
        graph.connect(a.id, b.id)
        assert graph.disconnect(a.id, b.id)
        assert a.outgoing_connections == []
        assert len(buttons(graph, a.id)) == 1
        assert graph.disconnect(a.id, b.id).reason == NoopReason.NOT_FOUND

    def test_edges(self, two_screens):
        graph, a, b = two_screens
        graph.connect(a.id, b.id)
        graph.connect(b.id, a.id)
        assert graph.edges() == [(a.id, b.id), (b.id, a.id)]


# ============================================================================
# SMART WIRING
# ============================================================================

class TestSmartWiring:

    def test_screen_to_screen(self, two_screens):
        graph, a, b = two_screens
        report = graph.connect(a.id, b.id).value

        footer = a.component_tree[-1]
        assert footer.type == ComponentType.GROUP
        assert footer.label == "Footer Actions"
        assert len(footer.children) == 1
        cont = footer.children[0]
        assert cont.label == "Continue"
        assert cont.props.action == Action.navigate(b.id)
        assert cont.id == report.button_id

        header = b.component_tree[0]
        assert header.type == ComponentType.GROUP
        assert header.label == "Header Bar"
        back = header.children[0]
        assert back.label == "← Back"
        assert back.props.action.type == ActionType.BACK
        assert back.props.variant == "ghost"
        assert header.id == report.header_id

    def test_second_edge_reuses_footer(self, graph):
        a = graph.add_node()
        b = graph.add_node()
        c = graph.add_node()
        graph.connect(a.id, b.id)
        graph.connect(a.id, c.id)

        footers = [x for x in a.component_tree if x.label == "Footer Actions"]
        assert len(footers) == 1
        assert [btn.props.action.target_id for btn in footers[0].children] == [b.id, c.id]

    def test_reconnect_does_not_duplicate(self, two_screens):
        graph, a, b = two_screens
        graph.connect(a.id, b.id)
        graph.disconnect(a.id, b.id)
        report = graph.connect(a.id, b.id).value

        assert not report.changed
        assert len(buttons(graph, a.id)) == 1
        headers = [x for x in b.component_tree if x.label == "Header Bar"]
        assert len(headers) == 1

    def test_existing_header_component_suppresses_back_bar(self, two_screens, build):
        graph, a, b = two_screens
        graph.tree(b.id).insert(None, build("hdr", "Header"))
        graph.connect(a.id, b.id)
        assert [c.id for c in b.component_tree] == ["hdr"]

    def test_group_named_header_bar_without_back_button_gets_a_bar(self, two_screens, build):
        graph, a, b = two_screens
        graph.tree(b.id).insert(None, build("hb", "Group", label="Header Bar", children=[]))
        report = graph.connect(a.id, b.id).value
        assert report.header_id is not None
        assert [c.id for c in b.component_tree] == [report.header_id, "hb"]

    def test_footer_added_behind_the_trees_back_is_used(self, two_screens, build):
        graph, a, b = two_screens
        graph.tree(a.id)
        a.component_tree.append(build("foot", "Group", label="Footer Actions", children=[]))

        report = graph.connect(a.id, b.id).value
        assert report.footer_id is None
        assert [c.id for c in a.component_tree[0].children] == [report.button_id]

    def test_report_matches_tree_when_button_cannot_be_added(self, two_screens, build, monkeypatch):
        graph, a, b = two_screens
        graph.tree(a.id).insert(None, build("foot", "Group", label="Footer Actions", children=[
            build("cont_fixed"),
        ]))
        monkeypatch.setattr(
            "appflow.graph.wiring.new_component_id", lambda prefix: f"{prefix}_fixed"
        )

        result = graph.connect(a.id, b.id)
        assert result
        assert result.value.button_id is None
        assert [c.id for c in a.component_tree[0].children] == ["cont_fixed"]
        assert a.component_tree[0].children[0].type == ComponentType.TEXT

    def test_existing_nested_link_suppresses_button(self, two_screens, build):
        graph, a, b = two_screens
        nested = build("g", "Group", children=[
            build("g2", "Group", children=[
                build("go", "Button", action={"type": "navigate", "targetId": b.id}),
            ]),
        ])
        graph.tree(a.id).insert(None, nested)
        report = graph.connect(a.id, b.id).value
        assert report.button_id is None
        assert len(buttons(graph, a.id)) == 1

    def test_link_in_multi_action_list_counts(self, two_screens, build):
        graph, a, b = two_screens
        graph.tree(a.id).insert(None, build("go", "Button", actions=[
            {"conditions": [], "action": {"type": "navigate", "targetId": b.id}},
        ]))
        graph.connect(a.id, b.id)
        assert len(buttons(graph, a.id)) == 1

    def test_screen_to_gateway(self, graph):
        screen = graph.add_node(NodeKind.SCREEN)
        gateway = graph.add_node(NodeKind.GATEWAY)
        graph.connect(screen.id, gateway.id)

        proceed = buttons(graph, screen.id)[0]
        assert proceed.label == "Proceed"
        assert proceed.props.action.target_id == gateway.id
        # Gateways have no UI.
        assert gateway.component_tree == []

    def test_gateway_default_rule(self, graph):
        gateway = graph.add_node(NodeKind.GATEWAY)
        s1 = graph.add_node(NodeKind.SCREEN)
        s2 = graph.add_node(NodeKind.SCREEN)

        graph.connect(gateway.id, s1.id)
        assert gateway.rules == [GatewayRule(conditions=[], action=Action.navigate(s1.id))]

        graph.connect(gateway.id, s2.id)
        assert len(gateway.rules) == 1
        assert gateway.outgoing_connections == [s1.id, s2.id]
        # No back bar on screens reached from a gateway.
        assert s1.component_tree == []

    def test_wiring_can_be_disabled(self, settings):
        settings.enable_smart_wiring = False
        graph = NavigationGraph(Project(), settings=settings)
        a = graph.add_node()
        b = graph.add_node()
        result = graph.connect(a.id, b.id)
        assert result.applied
        assert result.value is None
        assert a.component_tree == []

    def test_labels_come_from_settings(self, settings):
        settings.continue_label = "Next"
        graph = NavigationGraph(Project(), wiring=SmartWiring(settings), settings=settings)
        a = graph.add_node()
        b = graph.add_node()
        graph.connect(a.id, b.id)
        assert buttons(graph, a.id)[0].label == "Next"


# ============================================================================
# REMOVAL
# ============================================================================

class TestRemoveNode:

    def test_cascade_null(self, graph):
        a = graph.add_node()
        b = graph.add_node()
        gateway = graph.add_node(NodeKind.GATEWAY)
        graph.connect(a.id, b.id)
        graph.connect(gateway.id, b.id)

        assert graph.remove_node(b.id)
        assert b.id not in graph
        assert a.outgoing_connections == []
        assert gateway.outgoing_connections == []

        cont = buttons(graph, a.id)[0]
        assert cont.props.action.type == ActionType.NONE
        assert cont.props.action.target_id is None
        assert gateway.rules[0].action.type == ActionType.NONE

    def test_multi_action_buttons_are_nulled(self, two_screens, build):
        graph, a, b = two_screens
        graph.tree(a.id).insert(None, build("go", "Button", actions=[
            {"conditions": [{"fieldId": "x", "operator": "equals", "value": "1"}],
             "action": {"type": "navigate", "targetId": b.id}},
            {"conditions": [], "action": {"type": "back"}},
        ]))
        graph.remove_node(b.id)

        props = graph.tree(a.id).get("go").props
        assert isinstance(props, ButtonProps)
        assert [r.action.type for r in props.actions] == [ActionType.NONE, ActionType.BACK]
        assert props.actions[0].conditions[0].field_id == "x"

    def test_remove_missing(self, graph):
        assert graph.remove_node("missing").reason == NoopReason.NOT_FOUND

    def test_ids_are_not_reused(self, graph):
        node = graph.add_node()
        graph.remove_node(node.id)
        assert graph.add_node().id != node.id


# ============================================================================
# MERGE
# ============================================================================

class TestMergeNodes:

    def test_merge_batch(self, graph):
        existing = graph.add_node(name="Home")
        added = graph.merge_nodes([
            {"id": "login", "kind": "screen", "name": "Login", "outgoingConnections": ["welcome", "ghost"]},
            {"id": "welcome", "kind": "screen", "name": "Welcome"},
        ])
        assert [n.id for n in added] == ["login", "welcome"]
        assert added[0].outgoing_connections == ["welcome"]
        assert added[0].position.y == existing.position.y + 350
        assert graph.project.node_ids() == [existing.id, "login", "welcome"]

    def test_colliding_ids_are_rekeyed(self, graph):
        graph.merge_nodes([{"id": "home", "name": "Home"}])
        added = graph.merge_nodes([
            {"id": "home", "name": "Home 2", "outgoingConnections": ["next"]},
            {
                "id": "next",
                "name": "Next",
                "outgoingConnections": ["home"],
                "componentTree": [
                    {"id": "b", "type": "Button", "props": {"action": {"type": "navigate", "targetId": "home"}}},
                ],
            },
        ])
        new_home, nxt = added
        assert new_home.id != "home"
        assert new_home.outgoing_connections == ["next"]
        assert nxt.outgoing_connections == [new_home.id]
        assert nxt.component_tree[0].props.action.target_id == new_home.id

    def test_edges_to_existing_nodes_are_kept(self, graph):
        home = graph.add_node()
        added = graph.merge_nodes([{"id": "n1", "outgoingConnections": [home.id]}])
        assert added[0].outgoing_connections == [home.id]
        assert added[0].name == "Screen 2"

    def test_legacy_nodes(self, graph):
        added = graph.merge_nodes([
            {"id": "g", "type": "gateway", "x": 10, "y": 20, "connections": ["s"],
             "logic": [{"type": "navigate", "targetId": "s", "conditions": []}]},
            {"id": "s", "type": "screen", "components": []},
        ])
        gateway = added[0]
        assert gateway.is_gateway
        assert (gateway.position.x, gateway.position.y) == (10.0, 20.0)
        assert gateway.rules[0].action.target_id == "s"
        assert gateway.outgoing_connections == ["s"]
