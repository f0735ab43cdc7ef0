from appflow.storage.backends.json_file import JSONFileStore
from appflow.storage.backends.sqlite import SQLiteStore

__all__ = ["JSONFileStore", "SQLiteStore"]
