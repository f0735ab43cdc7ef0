"""Conditions, actions and the ordered rules that pair them."""

from enum import Enum
from typing import Any, List, Optional, Union

from pydantic import Field, model_validator

from appflow.model.base import FlowModel


class Operator(str, Enum):
    """Comparison applied by a condition."""
    EQUALS = "equals"
    NOT_EQUALS = "not_equals"
    CONTAINS = "contains"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    IS_TRUE = "is_true"
    IS_FALSE = "is_false"


class ActionType(str, Enum):
    """What a button or gateway does when triggered."""
    NAVIGATE = "navigate"
    BACK = "back"
    SUBMIT = "submit"
    LINK = "link"
    NONE = "none"


ConditionValue = Union[bool, int, float, str]


class Condition(FlowModel):
    """``field_id <operator> value``; an empty ``field_id`` always holds."""
    field_id: str = ""
    operator: Operator = Operator.EQUALS
    value: ConditionValue = ""


class Action(FlowModel):
    type: ActionType = ActionType.NONE
    target_id: Optional[str] = None
    url: Optional[str] = None

    @classmethod
    def navigate(cls, target_id: str) -> "Action":
        return cls(type=ActionType.NAVIGATE, target_id=target_id)

    @classmethod
    def back(cls) -> "Action":
        return cls(type=ActionType.BACK)

    @classmethod
    def none(cls) -> "Action":
        return cls(type=ActionType.NONE)

    def targets(self, node_id: str) -> bool:
        return self.target_id is not None and self.target_id == node_id


class GatewayRule(FlowModel):
    """One branch of an if/elif chain: all conditions hold => run action."""
    conditions: List[Condition] = Field(default_factory=list)
    action: Action = Field(default_factory=Action)

    @model_validator(mode="before")
    @classmethod
    def _accept_inline_action(cls, data: Any) -> Any:
        # Older documents stored each rule as an action with its own conditions.
        if isinstance(data, dict) and "action" not in data and "type" in data:
            action = dict(data)
            conditions = action.pop("conditions", None) or []
            return {"conditions": conditions, "action": action}
        return data

    @property
    def is_default(self) -> bool:
        return not self.conditions
