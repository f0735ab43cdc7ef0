"""Storage backend interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from appflow.model.project import Project


class ProjectStore(ABC):
    """Abstract base class for project stores."""

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the storage backend."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close the storage backend."""
        pass

    @abstractmethod
    async def load(self) -> List[Project]:
        """Load every stored project."""
        pass

    @abstractmethod
    async def save(self, projects: List[Project]) -> None:
        """Replace the stored set with ``projects``."""
        pass

    async def get(self, project_id: str) -> Optional[Project]:
        """Load a single project."""
        for project in await self.load():
            if project.id == project_id:
                return project
        return None

    async def upsert(self, project: Project) -> None:
        """Insert or replace one project, keeping the others."""
        projects = [p for p in await self.load() if p.id != project.id]
        projects.append(project)
        await self.save(projects)

    async def delete(self, project_id: str) -> bool:
        """Delete a project; returns whether it existed."""
        projects = await self.load()
        remaining = [p for p in projects if p.id != project_id]
        if len(remaining) == len(projects):
            return False
        await self.save(remaining)
        return True

    async def __aenter__(self) -> "ProjectStore":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
