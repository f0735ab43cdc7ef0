"""First-match resolution over ordered rule lists."""

from typing import Any, Iterable, Mapping, Optional

import structlog

from appflow.logic.conditions import evaluate_all
from appflow.model.actions import Action, GatewayRule

logger = structlog.get_logger(__name__)


def resolve_rule(rules: Iterable[GatewayRule], values: Mapping[str, Any]) -> Optional[GatewayRule]:
    """Return the first rule whose conditions all hold.

    Rules are tried in authored order, so a default rule (no conditions)
    placed early shadows everything after it.
    """
    for position, rule in enumerate(rules):
        if evaluate_all(rule.conditions, values):
            logger.debug("rule_matched", position=position, default=rule.is_default)
            return rule
    return None


def resolve(rules: Iterable[GatewayRule], values: Mapping[str, Any]) -> Optional[Action]:
    rule = resolve_rule(rules, values)
    return rule.action if rule is not None else None
