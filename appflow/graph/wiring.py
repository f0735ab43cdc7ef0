"""
Smart wiring: the UI synthesized when two nodes get connected.

Connecting ``source -> target`` in the flow view is also a promise that the
user can get from one to the other, so the wiring step adds the missing
affordances:

* a screen reached from another screen gets a header bar with a back button;
* a screen source gets a Continue (or Proceed, for gateways) button in its
  footer group, unless some button already navigates to the target;
* a gateway source with no rules gets a default rule to the target.

Each step checks for an existing affordance first, so reconnecting never
duplicates what was synthesized before.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

import structlog

from appflow.config import Settings, get_settings
from appflow.ids import new_component_id
from appflow.model.actions import Action, ActionType, GatewayRule
from appflow.model.components import ButtonProps, ComponentType, UIComponent
from appflow.model.project import Node
from appflow.tree.engine import ComponentTree, Placement

if TYPE_CHECKING:
    from appflow.graph.navigation import NavigationGraph

logger = structlog.get_logger(__name__)

HEADER_BAR_STYLE = {
    "flexDirection": "row",
    "alignItems": "center",
    "padding": 10,
    "justifyContent": "flex-start",
    "backgroundColor": "#1e293b",
}

FOOTER_STYLE = {
    "flexDirection": "row",
    "gap": 10,
    "marginTop": 20,
    "paddingTop": 20,
    "borderTopWidth": 1,
    "borderColor": "#334155",
}


@dataclass
class WiringReport:
    """What a single wiring pass added."""
    header_id: Optional[str] = None
    button_id: Optional[str] = None
    footer_id: Optional[str] = None
    rule_added: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.header_id or self.button_id or self.rule_added)


def links_to(component: UIComponent, target_id: str) -> bool:
    """True when ``component`` is a button with an action aimed at ``target_id``."""
    props = component.props
    return isinstance(props, ButtonProps) and props.targets(target_id)


def _is_back_button(component: UIComponent) -> bool:
    props = component.props
    return (isinstance(props, ButtonProps) and props.action is not None
            and props.action.type == ActionType.BACK)

class SmartWiring:
    """Synthesizes navigation UI for new edges."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def apply(self, graph: "NavigationGraph", source: Node, target: Node) -> WiringReport:
        report = WiringReport()

        if target.is_screen and not source.is_gateway:
            report.header_id = self._ensure_header(graph.tree(target.id))

        if source.is_gateway:
            report.rule_added = self._ensure_default_rule(source, target)
        else:
            report.button_id, report.footer_id = self._ensure_link_button(
                graph.tree(source.id), target
            )

        if report.changed:
            logger.info(
                "smart_wiring_applied",
                source=source.id,
                target=target.id,
                header=report.header_id,
                button=report.button_id,
                rule_added=report.rule_added,
            )
        return report

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def has_header(self, tree: ComponentTree) -> bool:
        for component in tree.roots:
            if component.type == ComponentType.HEADER:
                return True
            if (component.type == ComponentType.GROUP
                    and component.label == self.settings.header_bar_label
                    and any(_is_back_button(child) for child in component.children or [])):
                return True
        return False

    def _ensure_header(self, tree: ComponentTree) -> Optional[str]:
        if self.has_header(tree):
            return None

        back_button = UIComponent.model_validate({
            "id": new_component_id("back"),
            "type": ComponentType.BUTTON,
            "label": self.settings.back_label,
            "props": {"variant": "ghost", "action": {"type": ActionType.BACK}},
            "style": {"width": "auto", "padding": 8},
        })
        header = UIComponent.model_validate({
            "id": new_component_id("header_grp"),
            "type": ComponentType.GROUP,
            "label": self.settings.header_bar_label,
            "style": HEADER_BAR_STYLE,
            "children": [back_button],
        })
        if not tree.prepend(header):
            logger.warning("header_not_added", header_id=header.id)
            return None
        return header.id

    def _ensure_link_button(self, tree: ComponentTree, target: Node):
        if tree.find_all(lambda c: links_to(c, target.id)):
            return None, None

        label = self.settings.proceed_label if target.is_gateway else self.settings.continue_label
        button = UIComponent.model_validate({
            "id": new_component_id("cont"),
            "type": ComponentType.BUTTON,
            "label": label,
            "props": {"variant": "primary", "action": Action.navigate(target.id)},
            "style": {"flex": 1},
        })

        footer = self.find_footer(tree)
        if footer is not None:
            if not tree.insert(footer.id, button, Placement.INSIDE):
                logger.warning("link_button_not_added", footer_id=footer.id, target=target.id)
                return None, None
            return button.id, None

        footer = UIComponent.model_validate({
            "id": new_component_id("footer"),
            "type": ComponentType.GROUP,
            "label": self.settings.footer_group_label,
            "style": FOOTER_STYLE,
            "children": [button],
        })
        if not tree.insert(None, footer):
            logger.warning("footer_not_added", footer_id=footer.id, target=target.id)
            return None, None
        return button.id, footer.id

    def find_footer(self, tree: ComponentTree) -> Optional[UIComponent]:
        for component in tree.roots:
            if (component.type == ComponentType.GROUP
                    and component.label == self.settings.footer_group_label):
                return component
        return None

    def _ensure_default_rule(self, gateway: Node, target: Node) -> bool:
        if gateway.rules:
            return False
        gateway.rules.append(GatewayRule(action=Action.navigate(target.id)))
        return True
