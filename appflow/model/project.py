"""Project and navigation-node definitions."""

from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from pydantic import Field, model_validator

from appflow.ids import new_project_id, now_ms
from appflow.model.actions import GatewayRule
from appflow.model.base import FlowModel
from appflow.model.components import UIComponent


class NodeKind(str, Enum):
    SCREEN = "screen"
    GATEWAY = "gateway"


class Platform(str, Enum):
    WEB = "web"
    MOBILE = "mobile"


class Position(FlowModel):
    """Canvas coordinates; stored verbatim, never interpreted."""
    x: float = 0.0
    y: float = 0.0


class Node(FlowModel):
    """A screen or a gateway in the navigation graph."""
    id: str
    kind: NodeKind = NodeKind.SCREEN
    name: str = ""
    position: Position = Field(default_factory=Position)
    component_tree: List[UIComponent] = Field(default_factory=list)
    rules: List[GatewayRule] = Field(default_factory=list)
    outgoing_connections: List[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _accept_legacy_shape(cls, data: Any) -> Any:
        # Earlier builder versions: type/components/connections/logic and flat x/y.
        if not isinstance(data, dict):
            return data
        data = dict(data)
        legacy_keys = {
            "type": ("kind",),
            "components": ("componentTree", "component_tree"),
            "connections": ("outgoingConnections", "outgoing_connections"),
            "logic": ("rules",),
        }
        for legacy, current in legacy_keys.items():
            if legacy in data and not any(key in data for key in current):
                data[current[0]] = data.pop(legacy)
        if "position" not in data and ("x" in data or "y" in data):
            data["position"] = {"x": data.pop("x", 0), "y": data.pop("y", 0)}
        return data

    @model_validator(mode="after")
    def _clean_connections(self) -> "Node":
        seen: List[str] = []
        for target_id in self.outgoing_connections:
            if target_id != self.id and target_id not in seen:
                seen.append(target_id)
        self.outgoing_connections = seen
        return self

    @property
    def is_gateway(self) -> bool:
        return self.kind == NodeKind.GATEWAY

    @property
    def is_screen(self) -> bool:
        return self.kind == NodeKind.SCREEN


class AppColors(FlowModel):
    primary: str = "#06b6d4"
    secondary: str = "#d946ef"
    background: str = "#0f172a"
    text: str = "#f8fafc"


class AppFont(FlowModel):
    name: str = "Inter"
    family: str = "sans-serif"


class Translation(FlowModel):
    key: str
    values: Dict[str, str] = Field(default_factory=dict)


class AssetKind(str, Enum):
    IMAGE = "image"
    FILE = "file"


class Asset(FlowModel):
    id: str
    name: str = ""
    url: str
    type: AssetKind = AssetKind.IMAGE


class ProjectResources(FlowModel):
    languages: List[str] = Field(default_factory=lambda: ["en"])
    default_language: str = "en"
    translations: List[Translation] = Field(default_factory=list)
    assets: List[Asset] = Field(default_factory=list)


class Project(FlowModel):
    id: str = Field(default_factory=new_project_id)
    name: str = ""
    description: str = ""
    platform: Platform = Platform.WEB
    template: str = "blank"
    colors: AppColors = Field(default_factory=AppColors)
    font: AppFont = Field(default_factory=AppFont)
    screens: List[Node] = Field(default_factory=list)
    resources: ProjectResources = Field(default_factory=ProjectResources)
    last_modified: int = Field(default_factory=now_ms)

    def get_node(self, node_id: str) -> Optional[Node]:
        """Get node by ID."""
        return next((node for node in self.screens if node.id == node_id), None)

    def node_ids(self) -> List[str]:
        return [node.id for node in self.screens]

    def iter_nodes(self, kind: Optional[NodeKind] = None) -> Iterator[Node]:
        for node in self.screens:
            if kind is None or node.kind == kind:
                yield node

    @property
    def entry_node(self) -> Optional[Node]:
        """The node a preview starts on."""
        return self.screens[0] if self.screens else None

    def touch(self) -> None:
        self.last_modified = now_ms()
