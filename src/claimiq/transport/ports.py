"""
ClaimIQ Transport Ports

Interfaces consumed by the HTTP layer wrapping the core. The core itself
never authenticates or rate limits.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class Principal:
    """An authenticated caller."""
    id: str
    org_id: str


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    remaining: int
    retry_after: float = 0.0


class Authorizer(Protocol):
    def verify(self, token: Optional[str]) -> Principal:
        """
        Raises:
            AuthorizationError: Token missing or not recognized
        """
        ...


class RateLimiter(Protocol):
    def check(self, key: str, limit: int, window: float) -> RateLimitDecision:
        ...
