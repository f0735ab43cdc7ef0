"""Project persistence."""

from typing import Optional

from appflow.config import Features, Settings, get_settings
from appflow.storage.backends import JSONFileStore, SQLiteStore
from appflow.storage.interface import ProjectStore


def create_store(settings: Optional[Settings] = None) -> ProjectStore:
    """Build the store selected by ``storage_backend``."""
    settings = settings or get_settings()
    if Features(settings).sqlite_storage:
        return SQLiteStore(settings.database_url)
    return JSONFileStore(settings.projects_file)


__all__ = ["JSONFileStore", "ProjectStore", "SQLiteStore", "create_store"]
