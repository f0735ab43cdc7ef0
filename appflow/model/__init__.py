"""Entity definitions shared by the tree engine, graph and runtime."""

from appflow.model.actions import (
    Action,
    ActionType,
    Condition,
    GatewayRule,
    Operator,
)
from appflow.model.components import (
    CONTAINER_TYPES,
    INPUT_TYPES,
    ButtonProps,
    CardProps,
    ComponentProps,
    ComponentStyle,
    ComponentType,
    DropdownProps,
    FileProps,
    GroupProps,
    ImageProps,
    InputProps,
    SliderProps,
    TextProps,
    ToggleProps,
    UIComponent,
    Validation,
    props_class_for,
)
from appflow.model.project import (
    AppColors,
    AppFont,
    Asset,
    AssetKind,
    Node,
    NodeKind,
    Platform,
    Position,
    Project,
    ProjectResources,
    Translation,
)

__all__ = [
    # Actions
    "Action",
    "ActionType",
    "Condition",
    "GatewayRule",
    "Operator",

    # Components
    "CONTAINER_TYPES",
    "INPUT_TYPES",
    "ButtonProps",
    "CardProps",
    "ComponentProps",
    "ComponentStyle",
    "ComponentType",
    "DropdownProps",
    "FileProps",
    "GroupProps",
    "ImageProps",
    "InputProps",
    "SliderProps",
    "TextProps",
    "ToggleProps",
    "UIComponent",
    "Validation",
    "props_class_for",

    # Project
    "AppColors",
    "AppFont",
    "Asset",
    "AssetKind",
    "Node",
    "NodeKind",
    "Platform",
    "Position",
    "Project",
    "ProjectResources",
    "Translation",
]
