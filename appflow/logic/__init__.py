"""Conditions, rule resolution and input validation."""

from appflow.logic.conditions import evaluate, evaluate_all, to_bool, to_number, to_text
from appflow.logic.resolver import resolve, resolve_rule
from appflow.logic.validation import validate_input

__all__ = [
    "evaluate",
    "evaluate_all",
    "resolve",
    "resolve_rule",
    "to_bool",
    "to_number",
    "to_text",
    "validate_input",
]
