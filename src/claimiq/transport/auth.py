"""
ClaimIQ Static Token Authorizer

Bearer tokens configured up front (CIQ_API_TOKENS), each bound to a
principal and an org.
"""
from __future__ import annotations

import hmac
from typing import Mapping, Optional

from ..exceptions import AuthorizationError
from .ports import Principal


class StaticTokenAuthorizer:
    """
    Verify bearer tokens against a fixed token table.

    Usage:
        authorizer = StaticTokenAuthorizer({"s3cret": ("alice", "ORG-1")})
        principal = authorizer.verify("s3cret")
    """

    def __init__(self, tokens: Mapping[str, tuple[str, str]]):
        self._tokens = dict(tokens)

    def verify(self, token: Optional[str]) -> Principal:
        if not token:
            raise AuthorizationError(message="Missing bearer token")
        for known, (principal_id, org_id) in self._tokens.items():
            if hmac.compare_digest(known.encode("utf-8"), token.encode("utf-8")):
                return Principal(id=principal_id, org_id=org_id)
        raise AuthorizationError(message="Invalid bearer token")


def parse_bearer(header: Optional[str]) -> Optional[str]:
    """Token from an "Authorization: Bearer <token>" header value."""
    if not header:
        return None
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()
