"""
Pytest configuration and fixtures for the appflow project.
"""

import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest

from appflow.config import Settings
from appflow.graph.navigation import NavigationGraph
from appflow.model import NodeKind, Project, UIComponent


@pytest.fixture
def settings(tmp_path):
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        projects_file=str(tmp_path / "projects.json"),
        database_url="sqlite:///:memory:",
    )


@pytest.fixture
def project():
    return Project(name="Test App")


@pytest.fixture
def graph(project, settings):
    return NavigationGraph(project, settings=settings)


@pytest.fixture
def two_screens(graph):
    """Graph with screens A and B and no edges."""
    a = graph.add_node(NodeKind.SCREEN, name="A")
    b = graph.add_node(NodeKind.SCREEN, name="B")
    return graph, a, b


@pytest.fixture
def build():
    """Factory for components from a short description."""
    def component(component_id, ctype="Text", label="", children=None, **props):
        data = {"id": component_id, "type": ctype, "label": label or component_id, "props": props}
        if children is not None:
            data["children"] = children
        return UIComponent.model_validate(data)
    return component
