"""Input validation run by the preview before a submit."""

import re
from typing import Any, Optional

import structlog

from appflow.model.components import Validation

logger = structlog.get_logger(__name__)

REQUIRED_MESSAGE = "This field is required"
INVALID_FORMAT_MESSAGE = "Invalid format"


def _matches(pattern: str, value: str) -> bool:
    try:
        return re.search(pattern, value) is not None
    except re.error as e:
        # An unusable pattern cannot reject anything.
        logger.warning("validation_pattern_invalid", pattern=pattern, error=str(e))
        return True


def validate_input(value: Any, rules: Optional[Validation]) -> Optional[str]:
    """Return the error message for ``value``, or ``None`` when it is valid.

    Only text values are checked; toggles and sliders always pass. A missing
    value counts as empty text.
    """
    if rules is None:
        return None
    if value is None:
        value = ""
    if not isinstance(value, str):
        return None

    if rules.required and not value:
        return rules.error_message or REQUIRED_MESSAGE
    if rules.min_length and len(value) < rules.min_length:
        return rules.error_message or f"Min {rules.min_length} chars required"
    if rules.pattern and not _matches(rules.pattern, value):
        return rules.error_message or INVALID_FORMAT_MESSAGE
    return None
