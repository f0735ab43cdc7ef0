"""Preview runtime."""

from appflow.runtime.preview import Outcome, OutcomeKind, PreviewSession

__all__ = ["Outcome", "OutcomeKind", "PreviewSession"]
