"""Operation results for editing calls that may be silent no-ops."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class NoopReason(str, Enum):
    """Why an editing operation left the model unchanged."""
    NOT_FOUND = "not_found"
    INVALID_PLACEMENT = "invalid_placement"
    DUPLICATE_ID = "duplicate_id"
    CYCLE = "cycle"
    SELF_LOOP = "self_loop"
    DUPLICATE_EDGE = "duplicate_edge"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class OpResult:
    """Outcome of an editing operation.

    Truthy when the operation was applied. ``value`` carries whatever the
    operation produced (the inserted component, the wiring report, ...).
    """
    applied: bool
    reason: Optional[NoopReason] = None
    value: Any = None

    @classmethod
    def ok(cls, value: Any = None) -> "OpResult":
        return cls(applied=True, value=value)

    @classmethod
    def noop(cls, reason: NoopReason) -> "OpResult":
        return cls(applied=False, reason=reason)

    def __bool__(self) -> bool:
        return self.applied
