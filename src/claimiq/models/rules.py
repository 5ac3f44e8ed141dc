"""
ClaimIQ Rule Definitions

A rule pairs a trigger (see conditions.py) with an action descriptor.

Actions are parsed into a closed set of kinds:
- Recommend: "recommend" / "approve"
- Deny: "deny"
- Flag: "flag"
- FlagRisk: "flag_risk"
- RequireDocument: "require_document" (document kind in payload)
- AddLineItem: "add_line_item" (line item in payload)
- OtherAction: any other type string, kept verbatim

The authored type string and the full payload are preserved on every action.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Optional

from .conditions import Trigger, parse_trigger
from .enums import RuleActionType


# =============================================================================
# Actions
# =============================================================================

@dataclass(frozen=True)
class RuleAction:
    """
    Effect descriptor attached to a rule.

    type is the authored type string (None when the descriptor had none);
    actions are extra action-type strings fanned out by the rule.
    """
    type: Optional[str] = None
    actions: tuple[str, ...] = ()
    payload: dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    kind = RuleActionType.OTHER

    @property
    def normalized_type(self) -> str:
        return (self.type or "").strip().lower()

    @property
    def message(self) -> Optional[str]:
        value = self.payload.get("message") or self.payload.get("description")
        return str(value) if value else None

    def to_dict(self) -> dict[str, Any]:
        result = dict(self.payload)
        if self.type is not None:
            result["type"] = self.type
        if self.actions:
            result["actions"] = list(self.actions)
        return result


@dataclass(frozen=True)
class Recommend(RuleAction):
    kind = RuleActionType.RECOMMEND


@dataclass(frozen=True)
class Deny(RuleAction):
    kind = RuleActionType.DENY


@dataclass(frozen=True)
class Flag(RuleAction):
    kind = RuleActionType.FLAG


@dataclass(frozen=True)
class FlagRisk(RuleAction):
    kind = RuleActionType.FLAG_RISK


@dataclass(frozen=True)
class RequireDocument(RuleAction):
    document: str = ""
    kind = RuleActionType.REQUIRE_DOCUMENT


@dataclass(frozen=True)
class AddLineItem(RuleAction):
    item: str = ""
    kind = RuleActionType.ADD_LINE_ITEM


@dataclass(frozen=True)
class OtherAction(RuleAction):
    kind = RuleActionType.OTHER


_ACTION_CLASSES: dict[str, type[RuleAction]] = {
    "recommend": Recommend,
    "approve": Recommend,
    "deny": Deny,
    "flag": Flag,
    "flag_risk": FlagRisk,
    "require_document": RequireDocument,
    "add_line_item": AddLineItem,
}

# Action types that move the approval heuristic
POSITIVE_ACTION_TYPES = frozenset({"recommend", "approve"})
NEGATIVE_ACTION_TYPES = frozenset({"deny", "flag"})


def _first_str(payload: dict[str, Any], *keys: str) -> str:
    params = payload.get("params") if isinstance(payload.get("params"), dict) else {}
    for key in keys:
        for source in (payload, params):
            value = source.get(key)
            if isinstance(value, str) and value:
                return value
            if isinstance(value, list) and value:
                return ", ".join(str(v) for v in value)
    return ""


def parse_action(raw: Any) -> RuleAction:
    """
    Parse a raw action descriptor.

    Non-dict input yields an empty OtherAction with no type.
    """
    if isinstance(raw, RuleAction):
        return raw
    if not isinstance(raw, dict):
        return OtherAction()

    payload = {k: v for k, v in raw.items() if k not in ("type", "actions")}
    action_type = raw.get("type")
    action_type = str(action_type) if action_type is not None else None
    extra = raw.get("actions")
    actions = tuple(str(a) for a in extra) if isinstance(extra, list) else ()

    cls = _ACTION_CLASSES.get((action_type or "").strip().lower(), OtherAction)
    if cls is RequireDocument:
        document = _first_str(payload, "document", "kind", "required")
        return RequireDocument(type=action_type, actions=actions, payload=payload, document=document)
    if cls is AddLineItem:
        item = _first_str(payload, "item", "lineItem", "line_item")
        return AddLineItem(type=action_type, actions=actions, payload=payload, item=item)
    return cls(type=action_type, actions=actions, payload=payload)


# =============================================================================
# Rule
# =============================================================================

def slugify(text: str) -> str:
    """Lowercase, hyphen-separated identifier from free text."""
    text = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1-\2", text)
    text = re.sub(r"([a-z0-9])([A-Z])", r"\1-\2", text)
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


@dataclass
class RuleDefinition:
    """A named trigger -> action rule."""
    id: str
    name: str
    trigger: Trigger
    action: RuleAction
    description: str = ""
    enabled: bool = True

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "RuleDefinition":
        name = str(raw.get("name") or raw.get("id") or "unnamed-rule")
        return cls(
            id=str(raw.get("id") or slugify(name)),
            name=name,
            description=str(raw.get("description") or ""),
            trigger=parse_trigger(raw.get("trigger")),
            action=parse_action(raw.get("action")),
            enabled=bool(raw.get("enabled", True)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "trigger": self.trigger.to_dict(),
            "action": self.action.to_dict(),
            "enabled": self.enabled,
        }
