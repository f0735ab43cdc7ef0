"""
Tests for the project model, document IO and resource resolution.
"""

import json

import pytest
from pydantic import ValidationError

from appflow.errors import ProjectFormatError
from appflow.io import dump_project, load_project, read_project_file, write_project_file
from appflow.model import (
    ActionType,
    ButtonProps,
    ComponentProps,
    ComponentType,
    InputProps,
    NodeKind,
    Project,
    UIComponent,
)
from appflow.resources import resolve_file, resolve_src, resolve_text


LEGACY_DOCUMENT = {
    "id": "p1",
    "name": "Legacy",
    "platform": "mobile",
    "screens": [
        {
            "id": "s1",
            "type": "screen",
            "name": "Start",
            "x": 100,
            "y": 100,
            "components": [
                {
                    "id": "b1",
                    "type": "Button",
                    "label": "Go",
                    "props": {
                        "actions": [
                            {
                                "type": "navigate",
                                "targetId": "g1",
                                "conditions": [{"fieldId": "i1", "operator": "equals", "value": "x"}],
                            }
                        ]
                    },
                    "style": {},
                },
                {"id": "i1", "type": "Input", "label": "Code", "props": {"placeholder": "Code"}, "style": {}},
            ],
            "connections": ["g1", "g1", "s1"],
        },
        {
            "id": "g1",
            "type": "gateway",
            "name": "Gate",
            "x": 100,
            "y": 450,
            "components": [],
            "connections": [],
            "logic": [{"type": "back", "conditions": []}],
        },
    ],
}


# ============================================================================
# MODEL
# ============================================================================

class TestModel:

    def test_props_are_typed_by_component_type(self):
        button = UIComponent.model_validate({"id": "b", "type": "Button", "props": {"variant": "primary"}})
        assert isinstance(button.props, ButtonProps)
        text = UIComponent.model_validate({"id": "t", "type": "Map"})
        assert type(text.props) is ComponentProps

    def test_unknown_props_survive_round_trip(self):
        data = {
            "id": "i",
            "type": "Input",
            "label": "Email",
            "props": {"placeholder": "you@example.com", "autoFocus": True},
            "style": {"padding": 4, "letterSpacing": 2},
        }
        component = UIComponent.model_validate(data)
        assert isinstance(component.props, InputProps)
        dumped = component.to_dict()
        assert dumped["props"]["autoFocus"] is True
        assert dumped["style"]["letterSpacing"] == 2
        assert UIComponent.model_validate(dumped) == component

    def test_children_only_on_groups(self):
        with pytest.raises(ValidationError):
            UIComponent.model_validate({
                "id": "b", "type": "Button",
                "children": [{"id": "t", "type": "Text"}],
            })
        button = UIComponent.model_validate({"id": "b", "type": "Button", "children": []})
        assert button.children is None
        group = UIComponent.model_validate({"id": "g", "type": "Group"})
        assert group.children == []

    def test_button_single_action_is_one_default_rule(self):
        props = ButtonProps.model_validate({"action": {"type": "navigate", "targetId": "s2"}})
        rules = props.rules()
        assert len(rules) == 1
        assert rules[0].is_default
        assert props.targets("s2")
        assert not props.targets("s3")

    def test_self_edges_and_duplicates_are_dropped(self):
        project = Project.model_validate(LEGACY_DOCUMENT)
        assert project.get_node("s1").outgoing_connections == ["g1"]

    def test_snake_case_input_is_accepted(self):
        project = Project.model_validate({
            "screens": [{"id": "a", "kind": "screen", "component_tree": [], "outgoing_connections": []}],
        })
        assert project.entry_node.id == "a"


# ============================================================================
# LEGACY IMPORT
# ============================================================================

class TestLegacyImport:

    def test_legacy_shape(self):
        project = load_project(json.dumps(LEGACY_DOCUMENT))
        start = project.get_node("s1")
        gate = project.get_node("g1")

        assert start.kind == NodeKind.SCREEN
        assert (start.position.x, start.position.y) == (100.0, 100.0)
        assert [c.id for c in start.component_tree] == ["b1", "i1"]
        assert gate.is_gateway
        assert gate.rules[0].action.type == ActionType.BACK

        rule = start.component_tree[0].props.actions[0]
        assert rule.action.target_id == "g1"
        assert rule.conditions[0].field_id == "i1"

    def test_written_back_in_current_shape(self):
        text = dump_project(load_project(json.dumps(LEGACY_DOCUMENT)))
        data = json.loads(text)
        node = data["screens"][0]
        assert "componentTree" in node
        assert "outgoingConnections" in node
        assert node["position"] == {"x": 100.0, "y": 100.0}
        assert "components" not in node
        assert data["screens"][1]["rules"][0] == {"conditions": [], "action": {"type": "back"}}


# ============================================================================
# IO
# ============================================================================

class TestProjectFiles:

    def test_json_and_yaml_files(self, tmp_path):
        project = load_project(json.dumps(LEGACY_DOCUMENT))
        for name in ("app.json", "app.yaml", "app.yml"):
            path = write_project_file(project, tmp_path / name)
            loaded = read_project_file(path)
            assert loaded.to_dict() == project.to_dict()

    def test_unknown_suffix(self, tmp_path):
        with pytest.raises(ProjectFormatError):
            write_project_file(Project(), tmp_path / "app.txt")

    def test_unparsable_document(self):
        with pytest.raises(ProjectFormatError):
            load_project("{not json")
        with pytest.raises(ProjectFormatError):
            load_project("- a\n- b\n", fmt="yaml")

    def test_invalid_document(self):
        with pytest.raises(ProjectFormatError) as exc:
            load_project(json.dumps({"screens": [{"kind": "screen"}]}))
        assert isinstance(exc.value.__cause__, ValidationError)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ProjectFormatError):
            read_project_file(tmp_path / "missing.json")


# ============================================================================
# RESOURCES
# ============================================================================

@pytest.fixture
def resources_project():
    return Project.model_validate({
        "resources": {
            "languages": ["en", "fr"],
            "defaultLanguage": "en",
            "translations": [
                {"key": "greeting", "values": {"en": "Hello", "fr": "Bonjour"}},
                {"key": "only_fr", "values": {"fr": "Salut"}},
                {"key": "empty", "values": {}},
            ],
            "assets": [
                {"id": "logo", "name": "logo.png", "url": "https://cdn.example.com/logo.png", "type": "image"},
                {"id": "terms", "name": "terms.pdf", "url": "https://cdn.example.com/terms.pdf", "type": "file"},
            ],
        },
    })


class TestResources:

    def text(self, key):
        return UIComponent.model_validate({"id": "t", "type": "Text", "label": "Label", "props": {"translationKey": key}})

    def test_translation_for_language(self, resources_project):
        res = resources_project.resources
        assert resolve_text(self.text("greeting"), res, "fr") == "Bonjour"
        assert resolve_text(self.text("greeting"), res) == "Hello"

    def test_translation_fallbacks(self, resources_project):
        res = resources_project.resources
        assert resolve_text(self.text("only_fr"), res, "en") == "Salut"
        assert resolve_text(self.text("empty"), res, "en") == "empty"
        assert resolve_text(self.text("unknown"), res, "en") == "Label"
        assert resolve_text(self.text(None), res, "en") == "Label"

    def test_asset_source(self, resources_project):
        res = resources_project.resources
        image = UIComponent.model_validate({"id": "i", "type": "Image", "props": {"assetId": "logo", "src": "x.png"}})
        assert resolve_src(image, res) == "https://cdn.example.com/logo.png"
        plain = UIComponent.model_validate({"id": "i", "type": "Image", "props": {"src": "x.png"}})
        assert resolve_src(plain, res) == "x.png"

    def test_file_asset(self, resources_project):
        res = resources_project.resources
        download = UIComponent.model_validate({"id": "f", "type": ComponentType.FILE, "props": {"fileId": "terms"}})
        assert resolve_file(download, res).name == "terms.pdf"
        assert resolve_file(self.text("greeting"), res) is None
