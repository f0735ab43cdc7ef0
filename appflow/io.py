"""
Reading and writing project documents.

Projects are stored as JSON or YAML documents in their camelCase wire form.
Documents written by earlier builder versions (``components``/``connections``,
flat ``x``/``y``, ``logic`` rules with inline conditions) load as well; they
are written back in the current shape.
"""

import json
from pathlib import Path
from typing import Any, Dict, Union

import structlog
import yaml
from pydantic import ValidationError

from appflow.errors import ProjectFormatError
from appflow.model.project import Project

logger = structlog.get_logger(__name__)

FORMATS = ("json", "yaml")
_SUFFIXES = {".json": "json", ".yaml": "yaml", ".yml": "yaml"}


def format_for_path(path: Union[str, Path]) -> str:
    suffix = Path(path).suffix.lower()
    try:
        return _SUFFIXES[suffix]
    except KeyError:
        raise ProjectFormatError(f"Unsupported project file type: {suffix or path}") from None


def project_from_dict(data: Dict[str, Any]) -> Project:
    if not isinstance(data, dict):
        raise ProjectFormatError("Project document must be a mapping")
    try:
        return Project.model_validate(data)
    except ValidationError as e:
        raise ProjectFormatError(f"Invalid project document: {e}") from e


def load_project(text: str, fmt: str = "json") -> Project:
    """Parse a project document."""
    try:
        if fmt == "json":
            data = json.loads(text)
        elif fmt == "yaml":
            data = yaml.safe_load(text)
        else:
            raise ProjectFormatError(f"Unknown format: {fmt}")
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ProjectFormatError(f"Could not parse {fmt} document: {e}") from e
    return project_from_dict(data)


def dump_project(project: Project, fmt: str = "json") -> str:
    data = project.to_dict()
    if fmt == "json":
        return json.dumps(data, indent=2, ensure_ascii=False)
    elif fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    raise ProjectFormatError(f"Unknown format: {fmt}")


def read_project_file(path: Union[str, Path]) -> Project:
    path = Path(path)
    fmt = format_for_path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ProjectFormatError(f"Could not read {path}: {e}") from e
    project = load_project(text, fmt)
    logger.debug("project_loaded", path=str(path), project_id=project.id, nodes=len(project.screens))
    return project


def write_project_file(project: Project, path: Union[str, Path]) -> Path:
    path = Path(path)
    fmt = format_for_path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_project(project, fmt), encoding="utf-8")
    logger.debug("project_written", path=str(path), project_id=project.id)
    return path
