"""SQLite storage backend implementation."""

import json
import os
from pathlib import Path
from typing import List, Optional

import aiosqlite
import structlog
from pydantic import ValidationError

from appflow.errors import StorageError
from appflow.model.project import Project
from appflow.storage.interface import ProjectStore

logger = structlog.get_logger(__name__)

MEMORY = ":memory:"


class SQLiteStore(ProjectStore):
    """One row per project, documents stored as JSON text."""

    def __init__(self, database_url: str):
        self.database_url = database_url
        self.db_path = self._parse_database_url(database_url)
        self._connection: Optional[aiosqlite.Connection] = None

    def _parse_database_url(self, database_url: str) -> str:
        """Parse database URL to get file path."""
        if database_url.startswith("sqlite+aiosqlite:///"):
            return database_url.replace("sqlite+aiosqlite:///", "")
        elif database_url.startswith("sqlite:///"):
            return database_url.replace("sqlite:///", "")
        elif database_url.startswith("sqlite://"):
            return database_url.replace("sqlite://", "") or MEMORY
        return database_url

    async def initialize(self) -> None:
        """Initialize the storage backend."""
        if self.db_path != MEMORY:
            self.db_path = os.path.abspath(self.db_path)
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        try:
            self._connection = await aiosqlite.connect(self.db_path)
            await self._create_tables()
        except aiosqlite.Error as e:
            logger.error("sqlite_init_failed", database_url=self.database_url, error=str(e))
            raise StorageError(f"Failed to initialize SQLite database: {e}") from e

        logger.debug("sqlite_store_initialized", path=self.db_path)

    async def _create_tables(self) -> None:
        await self._connection.executescript("""
            CREATE TABLE IF NOT EXISTS projects (
                project_id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                position INTEGER NOT NULL,
                document TEXT NOT NULL,
                last_modified INTEGER NOT NULL,
                updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
            );

            CREATE INDEX IF NOT EXISTS idx_projects_position
                ON projects(position);
        """)
        await self._connection.commit()

    async def close(self) -> None:
        """Close the storage backend."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    def _require_connection(self) -> aiosqlite.Connection:
        if not self._connection:
            raise RuntimeError("Storage backend not initialized")
        return self._connection

    async def load(self) -> List[Project]:
        connection = self._require_connection()
        cursor = await connection.execute(
            "SELECT project_id, document FROM projects ORDER BY position ASC"
        )
        rows = await cursor.fetchall()

        projects = []
        for project_id, document in rows:
            try:
                projects.append(Project.model_validate(json.loads(document)))
            except (json.JSONDecodeError, ValidationError) as e:
                raise StorageError(f"Stored project {project_id} is invalid: {e}") from e
        return projects

    async def get(self, project_id: str) -> Optional[Project]:
        connection = self._require_connection()
        cursor = await connection.execute(
            "SELECT document FROM projects WHERE project_id = ?", (project_id,)
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        try:
            return Project.model_validate(json.loads(row[0]))
        except (json.JSONDecodeError, ValidationError) as e:
            raise StorageError(f"Stored project {project_id} is invalid: {e}") from e

    async def save(self, projects: List[Project]) -> None:
        connection = self._require_connection()
        rows = [
            (p.id, p.name, position, json.dumps(p.to_dict(), ensure_ascii=False), p.last_modified)
            for position, p in enumerate(projects)
        ]
        try:
            await connection.execute("DELETE FROM projects")
            await connection.executemany(
                """
                INSERT INTO projects (project_id, name, position, document, last_modified)
                VALUES (?, ?, ?, ?, ?)
                """,
                rows,
            )
            await connection.commit()
        except aiosqlite.Error as e:
            await connection.rollback()
            raise StorageError(f"Failed to save projects: {e}") from e

        logger.info("projects_saved", backend="sqlite", count=len(projects))

    async def delete(self, project_id: str) -> bool:
        connection = self._require_connection()
        cursor = await connection.execute(
            "DELETE FROM projects WHERE project_id = ?", (project_id,)
        )
        await connection.commit()
        return cursor.rowcount > 0
