"""
UI component definitions.

A screen's component tree is a list of root :class:`UIComponent` values.
Only containers (``Group``) carry ``children``; ``None`` means the component
cannot hold children, ``[]`` means it holds none yet.

``props`` is typed per component type (``ButtonProps`` for buttons,
``InputProps`` for inputs, ...). Every props and style record accepts unknown
keys, which are kept and written back unchanged.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Type, Union

from pydantic import ConfigDict, Field, SerializeAsAny, model_validator

from appflow.model.actions import Action, GatewayRule
from appflow.model.base import FlowModel


class ComponentType(str, Enum):
    BUTTON = "Button"
    INPUT = "Input"
    TEXT_AREA = "TextArea"
    TEXT = "Text"
    IMAGE = "Image"
    CARD = "Card"
    HEADER = "Header"
    LIST = "List"
    MAP = "Map"
    GROUP = "Group"
    DROPDOWN = "Dropdown"
    CHECKBOX = "Checkbox"
    SWITCH = "Switch"
    SLIDER = "Slider"
    AVATAR = "Avatar"
    BADGE = "Badge"
    DIVIDER = "Divider"
    FILE = "File"


CONTAINER_TYPES = frozenset({ComponentType.GROUP})

# Types whose value is collected from the user in preview.
INPUT_TYPES = frozenset({
    ComponentType.INPUT,
    ComponentType.TEXT_AREA,
    ComponentType.DROPDOWN,
    ComponentType.CHECKBOX,
    ComponentType.SWITCH,
    ComponentType.SLIDER,
})

Dimension = Union[int, float, str]


class ComponentStyle(FlowModel):
    """Layout and appearance attributes."""

    model_config = ConfigDict(extra="allow")

    padding: Optional[float] = None
    padding_top: Optional[float] = None
    padding_bottom: Optional[float] = None
    padding_left: Optional[float] = None
    padding_right: Optional[float] = None
    margin: Optional[float] = None
    margin_top: Optional[float] = None
    margin_bottom: Optional[float] = None
    margin_left: Optional[float] = None
    margin_right: Optional[float] = None
    background_color: Optional[str] = None
    border_radius: Optional[float] = None
    border_width: Optional[float] = None
    border_top_width: Optional[float] = None
    border_color: Optional[str] = None
    font_size: Optional[float] = None
    font_weight: Optional[str] = None
    color: Optional[str] = None
    width: Optional[Dimension] = None
    height: Optional[Dimension] = None
    justify_content: Optional[str] = None
    align_items: Optional[str] = None
    flex_direction: Optional[str] = None
    flex_wrap: Optional[str] = None
    gap: Optional[float] = None
    box_shadow: Optional[str] = None
    flex: Optional[Dimension] = None


class Validation(FlowModel):
    """Input constraints checked by the preview before submitting."""
    required: bool = False
    min_length: Optional[int] = None
    pattern: Optional[str] = None
    error_message: Optional[str] = None


class ComponentProps(FlowModel):
    """Props shared by every component type."""

    model_config = ConfigDict(extra="allow")

    translation_key: Optional[str] = None
    asset_id: Optional[str] = None
    src: Optional[str] = None


class ButtonProps(ComponentProps):
    variant: Optional[str] = None
    action: Optional[Action] = None
    actions: Optional[List[GatewayRule]] = None
    loading: Optional[bool] = None
    disabled: Optional[bool] = None
    icon: Optional[str] = None

    def rules(self) -> List[GatewayRule]:
        """Rules evaluated on press; a single action is one default rule."""
        if self.actions is not None:
            return list(self.actions)
        if self.action is not None:
            return [GatewayRule(action=self.action)]
        return []

    def iter_actions(self) -> List[Action]:
        found = [self.action] if self.action is not None else []
        found.extend(rule.action for rule in self.actions or [])
        return found

    def targets(self, node_id: str) -> bool:
        return any(action.targets(node_id) for action in self.iter_actions())


class InputProps(ComponentProps):
    input_type: Optional[str] = None
    placeholder: Optional[str] = None
    validation: Optional[Validation] = None


class TextProps(ComponentProps):
    size: Optional[str] = None
    align: Optional[str] = None


class ImageProps(ComponentProps):
    object_fit: Optional[str] = None


class FileProps(ComponentProps):
    file_id: Optional[str] = None
    file_name: Optional[str] = None


class CardProps(ComponentProps):
    elevation: Optional[str] = None
    show_image: Optional[bool] = None


class ToggleProps(ComponentProps):
    default_checked: Optional[bool] = None


class SliderProps(ComponentProps):
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    value: Optional[float] = None


class DropdownProps(ComponentProps):
    options: Optional[List[str]] = None
    validation: Optional[Validation] = None


class GroupProps(ComponentProps):
    collapsible: Optional[bool] = None
    collapsed: Optional[bool] = None


PROPS_BY_TYPE: Dict[ComponentType, Type[ComponentProps]] = {
    ComponentType.BUTTON: ButtonProps,
    ComponentType.INPUT: InputProps,
    ComponentType.TEXT_AREA: InputProps,
    ComponentType.TEXT: TextProps,
    ComponentType.HEADER: TextProps,
    ComponentType.BADGE: TextProps,
    ComponentType.IMAGE: ImageProps,
    ComponentType.AVATAR: ImageProps,
    ComponentType.FILE: FileProps,
    ComponentType.CARD: CardProps,
    ComponentType.CHECKBOX: ToggleProps,
    ComponentType.SWITCH: ToggleProps,
    ComponentType.SLIDER: SliderProps,
    ComponentType.DROPDOWN: DropdownProps,
    ComponentType.GROUP: GroupProps,
}


def props_class_for(component_type: Any) -> Type[ComponentProps]:
    try:
        component_type = ComponentType(component_type)
    except ValueError:
        # Unknown types fail validation on the ``type`` field itself.
        return ComponentProps
    return PROPS_BY_TYPE.get(component_type, ComponentProps)


class UIComponent(FlowModel):
    id: str
    type: ComponentType
    label: str = ""
    props: SerializeAsAny[ComponentProps] = Field(default_factory=ComponentProps)
    style: ComponentStyle = Field(default_factory=ComponentStyle)
    children: Optional[List["UIComponent"]] = None

    @model_validator(mode="before")
    @classmethod
    def _typed_props(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        props_cls = props_class_for(data.get("type"))
        props = data.get("props")
        if props is None:
            return {**data, "props": props_cls()}
        if isinstance(props, dict):
            return {**data, "props": props_cls.model_validate(props)}
        if isinstance(props, ComponentProps) and not isinstance(props, props_cls):
            return {**data, "props": props_cls.model_validate(props.to_dict())}
        return data

    @model_validator(mode="after")
    def _children_only_on_containers(self) -> "UIComponent":
        if self.is_container:
            if self.children is None:
                self.children = []
        elif self.children:
            raise ValueError(f"{self.type.value} components cannot contain children")
        else:
            self.children = None
        return self

    @property
    def is_container(self) -> bool:
        return self.type in CONTAINER_TYPES

    @property
    def is_input(self) -> bool:
        return self.type in INPUT_TYPES


UIComponent.model_rebuild()
