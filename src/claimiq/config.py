"""
ClaimIQ Configuration

Settings are read from environment variables with the CIQ_ prefix.

    CIQ_LOG_LEVEL              Logging level for the "claimiq" logger (INFO)
    CIQ_RULE_PACK              Path to a rule pack YAML (bundled default)
    CIQ_CARRIER_PACK           Path to a carrier strategy YAML (bundled default)
    CIQ_EMBEDDING_DIM          Dimension of the hashing text embedder (64)
    CIQ_SIMILAR_LIMIT          Similar claims returned by orchestration (5)
    CIQ_STEP_TIMEOUT_SECONDS   Per-lookup time box, 0 disables (0)
    CIQ_RATE_LIMIT             Requests allowed per principal per window (60)
    CIQ_RATE_WINDOW_SECONDS    Rate limit window length (60)
    CIQ_API_TOKENS             "token:principal:org,..." bearer tokens
    CIQ_ADMIN_PRINCIPALS       Principals allowed to register agents ("")
    CIQ_DEDUPE_RULE_ACTIONS    Collapse repeated rule action types (false)
    CIQ_LOAD_DEMO              Seed the in-memory stores with demo claims (true)
    CIQ_DOCS_ENABLED           Serve OpenAPI docs (true)
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

PACKS_DIR = Path(__file__).parent / "packs" / "data"
DEFAULT_RULE_PACK = PACKS_DIR / "roofing_rules.yaml"
DEFAULT_CARRIER_PACK = PACKS_DIR / "carrier_strategies.yaml"


def _as_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def parse_api_tokens(raw: str) -> dict[str, tuple[str, str]]:
    """
    Parse "token:principal:org" triples separated by commas.

    Entries that do not have exactly three parts are skipped.
    """
    tokens: dict[str, tuple[str, str]] = {}
    for entry in raw.split(","):
        parts = [p.strip() for p in entry.split(":")]
        if len(parts) != 3 or not all(parts):
            continue
        token, principal, org = parts
        tokens[token] = (principal, org)
    return tokens


def parse_principals(raw: str) -> frozenset[str]:
    return frozenset(p.strip() for p in raw.split(",") if p.strip())


@dataclass
class Settings:
    """Runtime settings for the core and the HTTP service."""
    log_level: str = "INFO"
    rule_pack: Path = DEFAULT_RULE_PACK
    carrier_pack: Path = DEFAULT_CARRIER_PACK
    embedding_dim: int = 64
    similar_limit: int = 5
    step_timeout_seconds: Optional[float] = None
    rate_limit: int = 60
    rate_window_seconds: float = 60.0
    api_tokens: dict[str, tuple[str, str]] = field(default_factory=dict)
    admin_principals: frozenset[str] = frozenset()
    dedupe_rule_actions: bool = False
    load_demo: bool = True
    docs_enabled: bool = True

    def __post_init__(self) -> None:
        if self.rate_window_seconds <= 0:
            raise ValueError(
                f"rate_window_seconds must be positive, got {self.rate_window_seconds}"
            )
        self.admin_principals = frozenset(self.admin_principals)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        timeout = float(env.get("CIQ_STEP_TIMEOUT_SECONDS", "0"))
        return cls(
            log_level=env.get("CIQ_LOG_LEVEL", "INFO"),
            rule_pack=Path(env.get("CIQ_RULE_PACK", str(DEFAULT_RULE_PACK))),
            carrier_pack=Path(env.get("CIQ_CARRIER_PACK", str(DEFAULT_CARRIER_PACK))),
            embedding_dim=int(env.get("CIQ_EMBEDDING_DIM", "64")),
            similar_limit=int(env.get("CIQ_SIMILAR_LIMIT", "5")),
            step_timeout_seconds=timeout if timeout > 0 else None,
            rate_limit=int(env.get("CIQ_RATE_LIMIT", "60")),
            rate_window_seconds=float(env.get("CIQ_RATE_WINDOW_SECONDS", "60")),
            api_tokens=parse_api_tokens(env.get("CIQ_API_TOKENS", "")),
            admin_principals=parse_principals(env.get("CIQ_ADMIN_PRINCIPALS", "")),
            dedupe_rule_actions=_as_bool(env.get("CIQ_DEDUPE_RULE_ACTIONS", "false")),
            load_demo=_as_bool(env.get("CIQ_LOAD_DEMO", "true")),
            docs_enabled=_as_bool(env.get("CIQ_DOCS_ENABLED", "true")),
        )
