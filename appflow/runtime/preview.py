"""
Preview runtime.

A :class:`PreviewSession` plays a project the way the generated app would:
it tracks the current node, a back stack and the values typed into inputs,
and executes the actions buttons resolve to. Side effects that belong to the
host (submitting a form, opening a URL) are handed to callbacks.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

import structlog

from appflow.config import Features, Settings, get_settings
from appflow.logic.resolver import resolve
from appflow.logic.validation import validate_input
from appflow.model.actions import Action, ActionType
from appflow.model.components import (
    ButtonProps,
    ComponentType,
    SliderProps,
    ToggleProps,
    UIComponent,
)
from appflow.model.project import Node, Project
from appflow.tree.engine import ComponentTree, iter_components

logger = structlog.get_logger(__name__)

SubmitCallback = Callable[[Dict[str, Any]], None]
LinkCallback = Callable[[str], None]


class OutcomeKind(str, Enum):
    NAVIGATED = "navigated"
    BACK = "back"
    SUBMITTED = "submitted"
    INVALID = "invalid"
    LINK_OPENED = "link_opened"
    NOOP = "noop"


@dataclass(frozen=True)
class Outcome:
    """What executing an action did to the session."""
    kind: OutcomeKind
    node_id: Optional[str] = None
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def changed(self) -> bool:
        return self.kind != OutcomeKind.NOOP


class PreviewSession:
    """Runtime state of one preview run."""

    def __init__(
        self,
        project: Project,
        on_submit: Optional[SubmitCallback] = None,
        on_open_link: Optional[LinkCallback] = None,
        settings: Optional[Settings] = None,
    ):
        self.project = project
        self.on_submit = on_submit
        self.on_open_link = on_open_link
        self.settings = settings or get_settings()

        self.current_id: Optional[str] = None
        self.history: List[str] = []
        self.values: Dict[str, Any] = {}
        self.errors: Dict[str, str] = {}

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def current(self) -> Optional[Node]:
        if self.current_id is None:
            return None
        return self.project.get_node(self.current_id)

    def start(self) -> Outcome:
        """Reset the session onto the project's first node."""
        self.history = []
        self.errors = {}
        self.values = self._initial_values()

        entry = self.project.entry_node
        if entry is None:
            self.current_id = None
            return Outcome(OutcomeKind.NOOP)

        self.current_id = entry.id
        self.history = [entry.id]
        logger.debug("preview_started", node_id=entry.id)

        if entry.is_gateway and Features(self.settings).follow_gateways:
            # Nothing to go back to from a gateway entry; keep only where it leads.
            self.history = []
            outcome = self._enter(entry, hops=0)
            if not self.history:
                self.history = [entry.id]
            return outcome
        return Outcome(OutcomeKind.NAVIGATED, node_id=entry.id)

    def _initial_values(self) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        for node in self.project.screens:
            for component in iter_components(node.component_tree):
                props = component.props
                if isinstance(props, ToggleProps) and props.default_checked is not None:
                    values[component.id] = props.default_checked
                elif isinstance(props, SliderProps) and props.value is not None:
                    values[component.id] = props.value
        return values

    def _find_component(self, component_id: str) -> Optional[UIComponent]:
        for node in self.project.screens:
            for component in iter_components(node.component_tree):
                if component.id == component_id:
                    return component
        return None

    def set_value(self, field_id: str, value: Any) -> Optional[str]:
        """Store an input value; returns the field's validation error, if any."""
        self.values[field_id] = value

        component = self._find_component(field_id)
        rules = getattr(component.props, "validation", None) if component else None
        if rules is None:
            return None

        error = validate_input(value, rules)
        if error:
            self.errors[field_id] = error
        else:
            self.errors.pop(field_id, None)
        return error

    # ------------------------------------------------------------------
    # Interaction
    # ------------------------------------------------------------------

    def press(self, component_id: str) -> Outcome:
        """Press a button on the current screen."""
        node = self.current
        if node is None:
            return Outcome(OutcomeKind.NOOP)

        component = ComponentTree(node.component_tree).get(component_id)
        if component is None or component.type != ComponentType.BUTTON:
            logger.debug("preview_press_ignored", component_id=component_id, node_id=node.id)
            return Outcome(OutcomeKind.NOOP, node_id=self.current_id)

        props = component.props
        if not isinstance(props, ButtonProps) or props.disabled:
            return Outcome(OutcomeKind.NOOP, node_id=self.current_id)

        action = resolve(props.rules(), self.values)
        if action is None:
            return Outcome(OutcomeKind.NOOP, node_id=self.current_id)
        return self.execute(action)

    def execute(self, action: Action) -> Outcome:
        if action.type == ActionType.NAVIGATE:
            return self._navigate(action.target_id, hops=0)
        elif action.type == ActionType.BACK:
            return self._back()
        elif action.type == ActionType.SUBMIT:
            return self._submit()
        elif action.type == ActionType.LINK:
            return self._open_link(action.url)
        return Outcome(OutcomeKind.NOOP, node_id=self.current_id)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _navigate(self, target_id: Optional[str], hops: int) -> Outcome:
        target = self.project.get_node(target_id) if target_id else None
        if target is None:
            logger.debug("preview_navigate_ignored", target_id=target_id)
            return Outcome(OutcomeKind.NOOP, node_id=self.current_id)
        return self._enter(target, hops)

    def _enter(self, target: Node, hops: int) -> Outcome:
        if target.is_gateway and Features(self.settings).follow_gateways:
            if hops >= self.settings.max_gateway_hops:
                logger.warning("preview_gateway_hops_exceeded", gateway_id=target.id, hops=hops)
                return Outcome(OutcomeKind.NOOP, node_id=self.current_id)

            action = resolve(target.rules, self.values)
            if action is None:
                logger.debug("preview_gateway_unresolved", gateway_id=target.id)
                return Outcome(OutcomeKind.NOOP, node_id=self.current_id)
            if action.type == ActionType.NAVIGATE:
                return self._navigate(action.target_id, hops + 1)
            return self.execute(action)

        self.history.append(target.id)
        self.current_id = target.id
        self.errors = {}
        logger.debug("preview_navigated", node_id=target.id, depth=len(self.history))
        return Outcome(OutcomeKind.NAVIGATED, node_id=target.id)

    def _back(self) -> Outcome:
        if len(self.history) <= 1:
            return Outcome(OutcomeKind.NOOP, node_id=self.current_id)
        self.history.pop()
        self.current_id = self.history[-1]
        return Outcome(OutcomeKind.BACK, node_id=self.current_id)

    def validate_current(self) -> Dict[str, str]:
        """Validate every input on the current screen."""
        errors: Dict[str, str] = {}
        node = self.current
        if node is None:
            return errors
        for component in iter_components(node.component_tree):
            rules = getattr(component.props, "validation", None)
            if not component.is_input or rules is None:
                continue
            error = validate_input(self.values.get(component.id), rules)
            if error:
                errors[component.id] = error
        return errors

    def _submit(self) -> Outcome:
        errors = self.validate_current()
        if errors:
            self.errors = errors
            logger.debug("preview_submit_invalid", node_id=self.current_id, errors=len(errors))
            return Outcome(OutcomeKind.INVALID, node_id=self.current_id, errors=dict(errors))

        self.errors = {}
        if self.on_submit is not None:
            self.on_submit(dict(self.values))
        logger.info("preview_submitted", node_id=self.current_id)
        return Outcome(OutcomeKind.SUBMITTED, node_id=self.current_id)

    def _open_link(self, url: Optional[str]) -> Outcome:
        if not url:
            return Outcome(OutcomeKind.NOOP, node_id=self.current_id)
        if self.on_open_link is not None:
            self.on_open_link(url)
        return Outcome(OutcomeKind.LINK_OPENED, node_id=self.current_id)
