"""Identifier and timestamp helpers."""

import time
import uuid


def new_project_id() -> str:
    return str(uuid.uuid4())


def new_node_id(kind: str) -> str:
    """Fresh node id such as ``screen-1f3a9c0d2b4e``."""
    return f"{kind}-{uuid.uuid4().hex[:12]}"


def new_component_id(prefix: str = "cmp") -> str:
    return f"{prefix}_{uuid.uuid4().hex[:8]}"


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)
