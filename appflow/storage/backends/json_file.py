"""JSON file storage backend."""

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import List

import structlog
from pydantic import ValidationError

from appflow.errors import StorageError
from appflow.model.project import Project
from appflow.storage.interface import ProjectStore

logger = structlog.get_logger(__name__)


class JSONFileStore(ProjectStore):
    """All projects in one JSON document (a list of project objects)."""

    def __init__(self, path: str):
        self.path = Path(path)

    async def initialize(self) -> None:
        self.path = self.path.resolve()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        logger.debug("json_store_initialized", path=str(self.path))

    async def close(self) -> None:
        pass

    async def load(self) -> List[Project]:
        return await asyncio.to_thread(self._read)

    async def save(self, projects: List[Project]) -> None:
        await asyncio.to_thread(self._write, projects)
        logger.info("projects_saved", backend="file", count=len(projects))

    def _read(self) -> List[Project]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Could not read {self.path}: {e}") from e
        if not isinstance(data, list):
            raise StorageError(f"{self.path} does not hold a project list")
        try:
            return [Project.model_validate(item) for item in data]
        except ValidationError as e:
            raise StorageError(f"Invalid project in {self.path}: {e}") from e

    def _write(self, projects: List[Project]) -> None:
        payload = json.dumps([p.to_dict() for p in projects], indent=2, ensure_ascii=False)
        # Write next to the target then swap, so readers never see half a file.
        fd, tmp_path = tempfile.mkstemp(
            dir=str(self.path.parent), prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StorageError(f"Could not write {self.path}: {e}") from e
