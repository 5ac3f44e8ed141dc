"""
ClaimIQ Packs

YAML rule packs and carrier strategy packs, plus the bundled defaults.
"""
from __future__ import annotations

from .loader import CarrierPackLoader, RulePackLoader
from .schema import (
    SCHEMA_VERSION,
    CarrierPackSchema,
    CarrierSchema,
    RulePackSchema,
    RuleSchema,
)

__all__ = [
    "SCHEMA_VERSION",
    "CarrierPackLoader",
    "CarrierPackSchema",
    "CarrierSchema",
    "RulePackLoader",
    "RulePackSchema",
    "RuleSchema",
]
