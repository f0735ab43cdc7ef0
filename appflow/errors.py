"""Exceptions raised by appflow APIs that fail explicitly."""


class AppFlowError(Exception):
    """Base class for appflow errors."""
    pass


class ProjectFormatError(AppFlowError):
    """Raised when a project document cannot be parsed or validated."""
    pass


class UnknownNodeError(AppFlowError, KeyError):
    """Raised by strict node lookups when the id is not in the project."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Node {node_id} not found")

    def __str__(self) -> str:
        return f"Node {self.node_id} not found"


class StorageError(AppFlowError):
    """Raised when a storage backend fails to load or save projects."""
    pass
