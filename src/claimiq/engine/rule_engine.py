"""
ClaimIQ Rule Engine

Evaluates rule triggers against a claim context.

Key features:
- Typed trigger AST (Always / AllOf / AnyOf / Predicate / Never)
- Dot-notation path resolution into the context
- Fail-closed evaluation: missing paths, unknown operators and incomparable
  values all evaluate to False, never raise
- Ordered action fan-out with an optional dedupe toggle
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Union

from ..models import (
    MISSING,
    AllOf,
    Always,
    AnyOf,
    ClaimContext,
    ConditionOperator,
    Never,
    Predicate,
    RuleDefinition,
    Trigger,
    parse_trigger,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Comparison
# =============================================================================

def stringify(value: Any) -> str:
    """Render a context value the way rule authors write it ("true", "1,2")."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join(stringify(v) for v in value)
    return str(value)


def compare_values(actual: Any, operator: ConditionOperator, expected: Any) -> bool:
    """
    Compare a resolved context value against a rule literal.

    Returns False for unknown operators and incompatible types.
    """
    if actual is MISSING:
        return False

    try:
        if operator == ConditionOperator.EQ:
            return actual == expected
        elif operator == ConditionOperator.NE:
            return actual != expected
        elif operator == ConditionOperator.GT:
            return actual > expected
        elif operator == ConditionOperator.GTE:
            return actual >= expected
        elif operator == ConditionOperator.LT:
            return actual < expected
        elif operator == ConditionOperator.LTE:
            return actual <= expected
        elif operator == ConditionOperator.CONTAINS:
            return stringify(expected) in stringify(actual)
        elif operator == ConditionOperator.IN:
            if isinstance(expected, (list, tuple, set, frozenset)):
                return actual in expected
            return False
        else:
            return False
    except TypeError:
        # None > 4, "abc" < 3 ...
        return False


# =============================================================================
# Trigger Evaluation
# =============================================================================

ContextLike = Union[ClaimContext, Mapping[str, Any]]


def _as_context(context: ContextLike) -> ClaimContext:
    if isinstance(context, ClaimContext):
        return context
    values = dict(context)
    return ClaimContext(
        claim_id=str(values.get("claim_id", "")),
        org_id=str(values.get("org_id", "")),
        values=values,
    )


def evaluate_trigger(trigger: Union[Trigger, dict, None], context: ContextLike) -> bool:
    """
    Evaluate a trigger (raw or parsed) against a context.

    AllOf is true iff every child is true (vacuously true when empty);
    AnyOf is true iff at least one child is true.
    """
    node = parse_trigger(trigger)
    ctx = _as_context(context)
    return _evaluate(node, ctx)


def _evaluate(node: Trigger, context: ClaimContext) -> bool:
    if isinstance(node, Always):
        return True
    if isinstance(node, Never):
        return False
    if isinstance(node, AllOf):
        return all(_evaluate(child, context) for child in node.conditions)
    if isinstance(node, AnyOf):
        return any(_evaluate(child, context) for child in node.conditions)
    if isinstance(node, Predicate):
        return compare_values(context.resolve(node.path), node.op, node.value)
    return False


# =============================================================================
# Rule Engine
# =============================================================================

@dataclass
class RuleEngine:
    """
    Holds a rule set and evaluates it against claim contexts.

    Usage:
        engine = RuleEngine(rules=RulePackLoader().load(path))
        triggered = engine.evaluate_rules_for_claim(context)
        actions = engine.execute_rule_actions(triggered)
    """
    rules: list[RuleDefinition] = field(default_factory=list)
    dedupe_actions: bool = False

    def __post_init__(self) -> None:
        self.rules = [
            r if isinstance(r, RuleDefinition) else RuleDefinition.from_dict(r)
            for r in self.rules
        ]

    def add_rule(self, rule: Union[RuleDefinition, dict]) -> RuleDefinition:
        if not isinstance(rule, RuleDefinition):
            rule = RuleDefinition.from_dict(rule)
        self.rules.append(rule)
        return rule

    def get_rule(self, rule_id: str) -> Optional[RuleDefinition]:
        for rule in self.rules:
            if rule.id == rule_id:
                return rule
        return None

    def evaluate_rules_for_claim(self, context: ContextLike) -> list[RuleDefinition]:
        """Enabled rules whose trigger is true, in rule-set order."""
        ctx = _as_context(context)
        triggered = [
            rule for rule in self.rules
            if rule.enabled and _evaluate(rule.trigger, ctx)
        ]
        logger.debug(
            "Claim %s: %d of %d rules triggered",
            ctx.claim_id, len(triggered), len(self.rules),
        )
        return triggered

    def execute_rule_actions(
        self,
        rules: Iterable[RuleDefinition],
        dedupe: Optional[bool] = None,
    ) -> list[str]:
        """
        Flatten each rule's action type and extra actions into one list.

        Repeats across rules are kept unless dedupe (or the engine's
        dedupe_actions setting) is on, in which case first occurrence wins.
        """
        dedupe = self.dedupe_actions if dedupe is None else dedupe
        action_types: list[str] = []
        for rule in rules:
            if rule.action.type:
                action_types.append(rule.action.type)
            action_types.extend(rule.action.actions)

        if not dedupe:
            return action_types
        unique: list[str] = []
        for action_type in action_types:
            if action_type not in unique:
                unique.append(action_type)
        return unique
