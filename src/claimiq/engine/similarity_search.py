"""
ClaimIQ Similarity Search

Ranks historical claims by cosine similarity of their embedding vectors.

Key features:
- Deterministic feature-hashing text embedder (no ML model required)
- Pluggable embedding store; NullEmbeddingStore for unconfigured deployments
- Query claim excluded from its own results
- Ties broken by claim id for determinism
- Store failures degrade to an empty result
"""
from __future__ import annotations

import hashlib
import logging
import math
import re
import threading
from typing import Any, Optional, Protocol, Sequence

from ..models import SimilarClaim, SimilarClaimDetail

logger = logging.getLogger(__name__)

EPSILON = 1e-10

_TOKEN_RE = re.compile(r"[a-z0-9]+")


# =============================================================================
# Vector Math
# =============================================================================

def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    dot(a, b) / (|a| * |b| + epsilon)

    Raises:
        ValueError: Vectors have different lengths
    """
    if len(a) != len(b):
        raise ValueError(f"Vector length mismatch: {len(a)} != {len(b)}")
    dot = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(y * y for y in b))
    return dot / (norm_a * norm_b + EPSILON)


def rank_similar(scored: Sequence[SimilarClaim], limit: int) -> list[SimilarClaim]:
    """Highest score first, claim id ascending on ties."""
    ordered = sorted(scored, key=lambda s: (-s.score, s.claim_id))
    return ordered[:max(limit, 0)]


# =============================================================================
# Embedders
# =============================================================================

class TextEmbedder(Protocol):
    def embed(self, text: str) -> list[float]:
        ...


class HashingEmbedder:
    """
    Feature-hashed bag-of-words embedder.

    Each lowercase alphanumeric token increments one of `dimension` buckets
    chosen by SHA-256; the result is L2-normalized. Empty text embeds to the
    zero vector.
    """

    def __init__(self, dimension: int = 64):
        if dimension <= 0:
            raise ValueError("dimension must be positive")
        self.dimension = dimension

    def _bucket(self, token: str) -> int:
        digest = hashlib.sha256(token.encode("utf-8")).hexdigest()
        return int(digest, 16) % self.dimension

    def embed(self, text: str) -> list[float]:
        vector = [0.0] * self.dimension
        for token in _TOKEN_RE.findall(text.lower()):
            vector[self._bucket(token)] += 1.0
        norm = math.sqrt(sum(v * v for v in vector))
        if norm == 0:
            return vector
        return [v / norm for v in vector]


# =============================================================================
# Embedding Stores
# =============================================================================

class InMemoryEmbeddingStore:
    """Claim id -> vector map with brute-force top-k search."""

    def __init__(self, vectors: Optional[dict[str, Sequence[float]]] = None):
        self._vectors: dict[str, list[float]] = {}
        self._lock = threading.Lock()
        for claim_id, vector in (vectors or {}).items():
            self.put(claim_id, vector)

    def put(self, claim_id: str, vector: Sequence[float]) -> None:
        with self._lock:
            self._vectors[claim_id] = list(vector)

    def vector_for(self, claim_id: str) -> Optional[list[float]]:
        with self._lock:
            vector = self._vectors.get(claim_id)
        return list(vector) if vector is not None else None

    def top_k(
        self,
        vector: Sequence[float],
        k: int,
        exclude: Optional[set[str]] = None,
    ) -> list[SimilarClaim]:
        exclude = exclude or set()
        with self._lock:
            candidates = list(self._vectors.items())

        scored: list[SimilarClaim] = []
        for claim_id, candidate in candidates:
            if claim_id in exclude:
                continue
            if len(candidate) != len(vector):
                logger.warning(
                    "Skipping embedding for %s: dimension %d != %d",
                    claim_id, len(candidate), len(vector),
                )
                continue
            scored.append(SimilarClaim(claim_id, cosine_similarity(vector, candidate)))
        return rank_similar(scored, k)


class NullEmbeddingStore:
    """Embedding store for deployments with no vectors configured."""

    def vector_for(self, claim_id: str) -> Optional[list[float]]:
        return None

    def top_k(
        self,
        vector: Sequence[float],
        k: int,
        exclude: Optional[set[str]] = None,
    ) -> list[SimilarClaim]:
        return []


# =============================================================================
# Search
# =============================================================================

class SimilaritySearch:
    """
    Similar-claim lookup over an embedding store.

    When the store has no vector for the query claim, the claim's text is
    embedded on the fly (if a claim store and embedder are available).

    Usage:
        search = SimilaritySearch(store, embedder=HashingEmbedder(64), claims=claims)
        search.find_similar_claims("CLM-1", limit=5)
    """

    def __init__(
        self,
        store: Any = None,
        embedder: Optional[TextEmbedder] = None,
        claims: Any = None,
        history: Any = None,
    ):
        self.store = store if store is not None else NullEmbeddingStore()
        self.embedder = embedder
        self.claims = claims
        self.history = history

    def _query_vector(self, claim_id: str) -> Optional[list[float]]:
        vector = self.store.vector_for(claim_id)
        if vector is not None:
            return vector
        if self.embedder is None or self.claims is None:
            return None
        claim = self.claims.find_claim(claim_id)
        if claim is None:
            return None
        return self.embedder.embed(claim.embedding_text())

    def _in_org(self, claim_id: str, org_id: str) -> bool:
        claim = self.claims.find_claim(claim_id) if self.claims is not None else None
        return claim is not None and claim.org_id == org_id

    def _top_k_in_org(
        self,
        vector: Sequence[float],
        limit: int,
        claim_id: str,
        org_id: str,
    ) -> list[SimilarClaim]:
        # Widen the window until enough same-org matches or the store runs dry
        fetch = limit
        while True:
            ranked = self.store.top_k(vector, fetch, exclude={claim_id})
            matches = [m for m in ranked if self._in_org(m.claim_id, org_id)]
            if len(matches) >= limit or len(ranked) < fetch:
                return rank_similar(matches, limit)
            fetch *= 2

    def find_similar_claims(
        self,
        claim_id: str,
        limit: int = 5,
        org_id: Optional[str] = None,
    ) -> list[SimilarClaim]:
        """
        Top `limit` claims most similar to claim_id.

        With org_id, only claims owned by that org are returned; claims the
        claim store cannot resolve are dropped.
        """
        if limit <= 0:
            return []
        try:
            vector = self._query_vector(claim_id)
            if vector is None:
                return []
            if org_id is not None:
                return self._top_k_in_org(vector, limit, claim_id, org_id)
            return rank_similar(self.store.top_k(vector, limit, exclude={claim_id}), limit)
        except Exception as e:
            logger.warning("Similarity lookup failed for claim %s: %s", claim_id, e)
            return []

    def find_similar_claims_by_text(self, text: str, limit: int = 5) -> list[SimilarClaim]:
        if limit <= 0 or self.embedder is None:
            return []
        try:
            vector = self.embedder.embed(text)
            return rank_similar(self.store.top_k(vector, limit), limit)
        except Exception as e:
            logger.warning("Text similarity lookup failed: %s", e)
            return []

    def get_similar_claims_with_details(
        self,
        claim_id: str,
        limit: int = 5,
        org_id: Optional[str] = None,
    ) -> list[SimilarClaimDetail]:
        """Ranked similar claims joined with title, carrier and state."""
        details: list[SimilarClaimDetail] = []
        for match in self.find_similar_claims(claim_id, limit, org_id=org_id):
            claim = self.claims.find_claim(match.claim_id) if self.claims else None
            latest = self.history.latest(match.claim_id) if self.history else None
            details.append(SimilarClaimDetail(
                claim_id=match.claim_id,
                score=match.score,
                title=claim.title if claim else "",
                carrier=claim.carrier if claim else None,
                state=latest.current_state if latest else None,
            ))
        return details
