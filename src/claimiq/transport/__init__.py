"""
ClaimIQ Transport

Authorization and rate limiting ports for the HTTP layer.
"""
from __future__ import annotations

from .auth import StaticTokenAuthorizer, parse_bearer
from .ports import Authorizer, Principal, RateLimitDecision, RateLimiter
from .rate_limit import TokenBucketRateLimiter

__all__ = [
    "Authorizer",
    "Principal",
    "RateLimitDecision",
    "RateLimiter",
    "StaticTokenAuthorizer",
    "TokenBucketRateLimiter",
    "parse_bearer",
]
