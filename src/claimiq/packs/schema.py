"""
ClaimIQ Pack Schemas

Pydantic models for validating rule pack and carrier strategy pack YAML.

Schema versioning:
- schema_version field tracks breaking changes
- Loaders check version compatibility in strict mode
"""
from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ..models import DEFAULT_CARRIER_KEY, carrier_key, slugify


# =============================================================================
# Schema Version
# =============================================================================

SCHEMA_VERSION = "1.0.0"

RiskLevelValue = Literal["low", "medium", "high"]


# =============================================================================
# Rule Pack
# =============================================================================

class RuleActionSchema(BaseModel):
    """Action descriptor; unknown keys are kept as payload."""
    model_config = {"extra": "allow"}

    type: Optional[str] = Field(None, description="Action type string")
    actions: list[str] = Field(default_factory=list, description="Extra action types")


class RuleSchema(BaseModel):
    """One trigger -> action rule."""
    id: Optional[str] = Field(None, description="Stable rule id (slug of name when absent)")
    name: str = Field(..., min_length=1)
    description: str = ""
    trigger: Any = Field(..., description="Trigger DSL tree")
    action: RuleActionSchema
    enabled: bool = True

    @field_validator("trigger")
    @classmethod
    def trigger_is_mapping(cls, v: Any) -> Any:
        if not isinstance(v, dict):
            raise ValueError("trigger must be a mapping")
        return v

    @property
    def rule_id(self) -> str:
        return self.id or slugify(self.name)


class RulePackSchema(BaseModel):
    """A versioned set of rules."""
    schema_version: str = SCHEMA_VERSION
    name: str = Field(..., min_length=1)
    description: str = ""
    rules: list[RuleSchema] = Field(default_factory=list)

    @model_validator(mode="after")
    def unique_rule_ids(self) -> "RulePackSchema":
        seen: set[str] = set()
        for rule in self.rules:
            if rule.rule_id in seen:
                raise ValueError(f"duplicate rule id '{rule.rule_id}'")
            seen.add(rule.rule_id)
        return self


# =============================================================================
# Carrier Pack
# =============================================================================

class CarrierSchema(BaseModel):
    """Negotiation profile for one carrier."""
    name: str = Field(..., min_length=1)
    summary: str = Field(..., min_length=1)
    tactics: list[str] = Field(default_factory=list)
    risk_level: RiskLevelValue = "medium"
    common_pushbacks: list[str] = Field(default_factory=list)
    responses: dict[str, str] = Field(default_factory=dict)
    requirements: dict[str, Any] = Field(default_factory=dict)
    success_rate: Optional[float] = Field(None, ge=0.0, le=1.0)


class CarrierPackSchema(BaseModel):
    """Carrier profiles; exactly one must be named "default"."""
    schema_version: str = SCHEMA_VERSION
    carriers: list[CarrierSchema] = Field(..., min_length=1)

    @model_validator(mode="after")
    def default_and_unique(self) -> "CarrierPackSchema":
        keys = [carrier_key(c.name) for c in self.carriers]
        duplicates = sorted({k for k in keys if keys.count(k) > 1})
        if duplicates:
            raise ValueError(f"duplicate carriers: {duplicates}")
        if DEFAULT_CARRIER_KEY not in keys:
            raise ValueError("carrier pack must define a 'default' carrier")
        return self


def check_schema_version(data: dict[str, Any]) -> bool:
    """Major version of the pack must match SCHEMA_VERSION."""
    pack_version = str(data.get("schema_version", SCHEMA_VERSION))
    return pack_version.split(".")[0] == SCHEMA_VERSION.split(".")[0]
