"""
Condition evaluation against the values collected in a preview session.

Values arrive loosely typed (text fields give strings, switches give bools,
sliders give numbers), so every comparison first coerces both sides to a
common form: text for equality and substring tests, numbers for ordering,
booleans for the ``is_true``/``is_false`` checks.
"""

import math
from typing import Any, Iterable, Mapping

from appflow.model.actions import Condition, Operator

_FALSE_STRINGS = frozenset({"", "0", "false", "no", "off"})


def to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def to_number(value: Any) -> float:
    """Numeric form of ``value``; ``nan`` when it does not parse."""
    if value is None:
        return math.nan
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    if not text:
        return 0.0
    try:
        return float(text)
    except ValueError:
        return math.nan


def to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    if isinstance(value, float) and math.isnan(value):
        return False
    return bool(value)


def evaluate(condition: Condition, values: Mapping[str, Any]) -> bool:
    """Evaluate a single condition."""
    if not condition.field_id:
        return True

    actual = values.get(condition.field_id)
    expected = condition.value
    operator = condition.operator

    if operator == Operator.EQUALS:
        return to_text(actual) == to_text(expected)
    elif operator == Operator.NOT_EQUALS:
        return to_text(actual) != to_text(expected)
    elif operator == Operator.CONTAINS:
        return to_text(expected) in to_text(actual)
    elif operator == Operator.GREATER_THAN:
        # Comparisons involving nan are always false.
        return to_number(actual) > to_number(expected)
    elif operator == Operator.LESS_THAN:
        return to_number(actual) < to_number(expected)
    elif operator == Operator.IS_TRUE:
        return to_bool(actual)
    elif operator == Operator.IS_FALSE:
        return not to_bool(actual)
    return False


def evaluate_all(conditions: Iterable[Condition], values: Mapping[str, Any]) -> bool:
    """True when every condition holds; an empty list always holds."""
    return all(evaluate(condition, values) for condition in conditions)
