"""
ClaimIQ Pack Loader

Loads rule packs and carrier strategy packs from YAML (or JSON) files,
validates them with the pack schemas, and converts them to domain models.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import ValidationError

from ..exceptions import CarrierPackError, RulePackLoadError, RulePackValidationError
from ..models import CarrierProfile, RiskLevel, RuleDefinition, iter_problems
from .schema import (
    SCHEMA_VERSION,
    CarrierPackSchema,
    RulePackSchema,
    RuleSchema,
    check_schema_version,
)

logger = logging.getLogger(__name__)


def _load_file(path: Path) -> Any:
    """Load data from a YAML or JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        if path.suffix.lower() == ".json":
            return json.load(f)
        return yaml.safe_load(f)


def _convert_rule(schema: RuleSchema) -> RuleDefinition:
    return RuleDefinition.from_dict({
        "id": schema.rule_id,
        "name": schema.name,
        "description": schema.description,
        "trigger": schema.trigger,
        "action": schema.action.model_dump(exclude_none=True),
        "enabled": schema.enabled,
    })


# =============================================================================
# Rule Packs
# =============================================================================

class RulePackLoader:
    """
    Loads rule packs.

    In strict mode a pack is rejected when any trigger cannot be satisfied
    as authored (malformed condition, unknown operator); otherwise such rules
    load and simply never fire.

    Usage:
        loader = RulePackLoader()
        rules = loader.load("path/to/rules.yaml")
    """

    def __init__(self, strict: bool = False):
        self.strict = strict

    def load(self, path: Union[str, Path]) -> list[RuleDefinition]:
        """
        Raises:
            RulePackLoadError: If the file cannot be read or parsed
            RulePackValidationError: If schema or trigger validation fails
        """
        path = Path(path)
        try:
            data = _load_file(path)
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise RulePackLoadError(
                message=f"Failed to load rule pack: {e}",
                details={"path": str(path), "error": str(e)},
            )
        return self.load_data(data, source=str(path))

    def load_string(self, content: str) -> list[RuleDefinition]:
        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise RulePackLoadError(message=f"Failed to parse rule pack: {e}")
        return self.load_data(data)

    def load_data(self, data: Any, source: str = "<data>") -> list[RuleDefinition]:
        if not isinstance(data, dict):
            raise RulePackValidationError(
                message="Rule pack must be a mapping",
                details={"path": source},
            )
        if self.strict and not check_schema_version(data):
            raise RulePackValidationError(
                message=(
                    f"Schema version mismatch: pack has {data.get('schema_version')}, "
                    f"expected {SCHEMA_VERSION}"
                ),
                details={"path": source},
            )

        try:
            schema = RulePackSchema.model_validate(data)
        except ValidationError as e:
            raise RulePackValidationError(
                message=f"Rule pack validation failed: {e.error_count()} errors",
                details={"errors": e.errors(include_url=False), "path": source},
            )

        rules = [_convert_rule(rule_schema) for rule_schema in schema.rules]

        problems = {rule.id: iter_problems(rule.trigger) for rule in rules}
        problems = {rule_id: p for rule_id, p in problems.items() if p}
        if problems and self.strict:
            raise RulePackValidationError(
                message=f"{len(problems)} rule trigger(s) can never fire",
                details={"errors": problems, "path": source},
            )
        for rule_id, rule_problems in problems.items():
            logger.warning("Rule %s will never fire: %s", rule_id, "; ".join(rule_problems))

        logger.info("Loaded rule pack %s: %d rules", schema.name, len(rules))
        return rules


# =============================================================================
# Carrier Packs
# =============================================================================

class CarrierPackLoader:
    """
    Loads carrier strategy packs.

    Usage:
        profiles = CarrierPackLoader().load("path/to/carriers.yaml")
    """

    def load(self, path: Union[str, Path]) -> list[CarrierProfile]:
        """
        Raises:
            CarrierPackError: If the file cannot be read or fails validation
        """
        path = Path(path)
        try:
            data = _load_file(path)
        except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
            raise CarrierPackError(
                message=f"Failed to load carrier pack: {e}",
                details={"path": str(path), "error": str(e)},
            )
        return self.load_data(data, source=str(path))

    def load_data(self, data: Any, source: str = "<data>") -> list[CarrierProfile]:
        try:
            schema = CarrierPackSchema.model_validate(data)
        except ValidationError as e:
            raise CarrierPackError(
                message=f"Carrier pack validation failed: {e.error_count()} errors",
                details={"errors": e.errors(include_url=False), "path": source},
            )

        profiles = [
            CarrierProfile(
                name=c.name,
                summary=c.summary,
                tactics=list(c.tactics),
                risk_level=RiskLevel(c.risk_level),
                common_pushbacks=list(c.common_pushbacks),
                responses=dict(c.responses),
                requirements=dict(c.requirements),
                success_rate=c.success_rate,
            )
            for c in schema.carriers
        ]
        logger.info("Loaded carrier pack: %d profiles", len(profiles))
        return profiles
