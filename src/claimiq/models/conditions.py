"""
ClaimIQ Trigger Conditions

Rule triggers are authored as JSON/YAML trees and parsed once into a typed AST:

    {"always": true}                         -> Always
    {"all": [cond, ...]}                     -> AllOf(conditions)
    {"any": [cond, ...]}                     -> AnyOf(conditions)
    {"path": "roof.slope", "op": ">", "value": 4}  -> Predicate(path, op, value)

Anything else parses to Never, which evaluates false. Parsing never raises,
so a rule that cannot be understood simply does not trigger.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

from .enums import ConditionOperator


@dataclass(frozen=True)
class Always:
    """Trigger that fires for every claim."""

    def to_dict(self) -> dict[str, Any]:
        return {"always": True}


@dataclass(frozen=True)
class Never:
    """Trigger that never fires. Produced for malformed input."""
    reason: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"never": True, "reason": self.reason}


@dataclass(frozen=True)
class Predicate:
    """Leaf comparison of a context value against a literal."""
    path: str
    op: ConditionOperator
    value: Any
    raw_op: str = ""

    def to_dict(self) -> dict[str, Any]:
        op = self.raw_op or self.op.value
        return {"path": self.path, "op": op, "value": self.value}


@dataclass(frozen=True)
class AllOf:
    """Logical AND over child triggers."""
    conditions: tuple["Trigger", ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {"all": [c.to_dict() for c in self.conditions]}


@dataclass(frozen=True)
class AnyOf:
    """Logical OR over child triggers."""
    conditions: tuple["Trigger", ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {"any": [c.to_dict() for c in self.conditions]}


Trigger = Union[Always, Never, Predicate, AllOf, AnyOf]


def parse_trigger(raw: Any) -> Trigger:
    """
    Parse a raw trigger tree into the typed AST.

    Args:
        raw: Dict from JSON/YAML (or an already parsed Trigger)

    Returns:
        Trigger node; Never for anything malformed
    """
    if isinstance(raw, (Always, Never, Predicate, AllOf, AnyOf)):
        return raw
    if not isinstance(raw, dict) or not raw:
        return Never(reason="trigger must be a non-empty object")

    if "always" in raw:
        return Always() if raw["always"] is True else Never(reason="always is not true")

    if "all" in raw:
        children = raw["all"]
        if not isinstance(children, list):
            return Never(reason="'all' must be a list")
        return AllOf(tuple(parse_trigger(c) for c in children))

    if "any" in raw:
        children = raw["any"]
        if not isinstance(children, list):
            return Never(reason="'any' must be a list")
        return AnyOf(tuple(parse_trigger(c) for c in children))

    missing = [k for k in ("path", "op", "value") if k not in raw]
    if missing:
        return Never(reason=f"condition missing {', '.join(missing)}")
    if not isinstance(raw["path"], str) or not raw["path"]:
        return Never(reason="path must be a non-empty string")

    raw_op = str(raw["op"])
    return Predicate(
        path=raw["path"],
        op=ConditionOperator.parse(raw_op),
        value=raw["value"],
        raw_op=raw_op,
    )


def iter_problems(trigger: Trigger) -> list[str]:
    """List reasons a trigger can never be satisfied as authored."""
    problems: list[str] = []
    if isinstance(trigger, Never):
        problems.append(trigger.reason or "malformed trigger")
    elif isinstance(trigger, Predicate) and trigger.op == ConditionOperator.UNKNOWN:
        problems.append(f"unknown operator '{trigger.raw_op}' on {trigger.path}")
    elif isinstance(trigger, (AllOf, AnyOf)):
        for child in trigger.conditions:
            problems.extend(iter_problems(child))
    return problems
