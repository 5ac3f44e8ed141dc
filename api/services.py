"""Service wiring: packs, stores and engine components shared by the routes."""

import logging
from dataclasses import dataclass
from typing import Optional

from claimiq.config import Settings
from claimiq.engine import (
    ActionPlanner,
    AgentRegistry,
    ClaimStateMachine,
    HashingEmbedder,
    InMemoryEmbeddingStore,
    NegotiationSelector,
    Orchestrator,
    RuleEngine,
    SimilaritySearch,
    UtilityEngine,
)
from claimiq.models import ClaimRecord, ClaimState, StateHistoryEntry
from claimiq.packs import CarrierPackLoader, RulePackLoader
from claimiq.stores import (
    DefaultClaimContextBuilder,
    InMemoryActionLog,
    InMemoryClaimStore,
    InMemoryStateHistoryStore,
)
from claimiq.transport import StaticTokenAuthorizer, TokenBucketRateLimiter

from api.demo_cases import DEMO_CLAIMS, DEMO_ORG_ID

logger = logging.getLogger("claimiq.api")

DEMO_TOKEN = "demo-token"


@dataclass
class Services:
    """Everything a request handler needs."""
    settings: Settings
    claims: InMemoryClaimStore
    history: InMemoryStateHistoryStore
    state_machine: ClaimStateMachine
    rule_engine: RuleEngine
    registry: AgentRegistry
    similarity: SimilaritySearch
    negotiation: NegotiationSelector
    action_log: InMemoryActionLog
    orchestrator: Orchestrator
    authorizer: StaticTokenAuthorizer
    rate_limiter: TokenBucketRateLimiter


def seed_demo_claims(
    claims: InMemoryClaimStore,
    history: InMemoryStateHistoryStore,
    embeddings: InMemoryEmbeddingStore,
    embedder: HashingEmbedder,
) -> int:
    """Load DEMO_CLAIMS with their lifecycle history and embeddings."""
    for case in DEMO_CLAIMS:
        claim = claims.add(ClaimRecord(
            id=case["id"],
            org_id=DEMO_ORG_ID,
            carrier=case["carrier"],
            estimated_value=case["estimated_value"],
            title=case["title"],
            damage_type=case["damage_type"],
            denial_reason=case.get("denial_reason"),
            attributes=dict(case["attributes"]),
        ))
        previous: Optional[ClaimState] = None
        for state in case["states"]:
            entry = StateHistoryEntry(
                claim_id=claim.id,
                org_id=claim.org_id,
                current_state=ClaimState(state),
                previous_state=previous,
                notes="demo seed",
            )
            history.append(entry, expected_previous=previous)
            previous = entry.current_state
        embeddings.put(claim.id, embedder.embed(claim.embedding_text()))
    return len(DEMO_CLAIMS)


def build_services(settings: Settings) -> Services:
    """
    Load packs and wire the engine.

    Raises:
        RulePackLoadError / RulePackValidationError / CarrierPackError
    """
    rules = RulePackLoader().load(settings.rule_pack)
    profiles = CarrierPackLoader().load(settings.carrier_pack)

    claims = InMemoryClaimStore()
    history = InMemoryStateHistoryStore()
    embedder = HashingEmbedder(settings.embedding_dim)
    embeddings = InMemoryEmbeddingStore()

    api_tokens = dict(settings.api_tokens)
    if settings.load_demo:
        seeded = seed_demo_claims(claims, history, embeddings, embedder)
        logger.info("Seeded %d demo claims", seeded)
        if not api_tokens:
            logger.warning("CIQ_API_TOKENS not set; accepting demo token only")
            api_tokens = {DEMO_TOKEN: ("demo", DEMO_ORG_ID)}

    state_machine = ClaimStateMachine(history)
    rule_engine = RuleEngine(rules, dedupe_actions=settings.dedupe_rule_actions)
    registry = AgentRegistry()
    similarity = SimilaritySearch(embeddings, embedder=embedder, claims=claims, history=history)
    negotiation = NegotiationSelector(profiles)
    action_log = InMemoryActionLog()

    orchestrator = Orchestrator(
        claims=claims,
        state_machine=state_machine,
        context_builder=DefaultClaimContextBuilder(claims, history),
        rule_engine=rule_engine,
        planner=ActionPlanner(),
        similarity=similarity,
        negotiation=negotiation,
        registry=registry,
        utility=UtilityEngine(registry),
        action_log=action_log,
        similar_limit=settings.similar_limit,
        step_timeout=settings.step_timeout_seconds,
    )

    return Services(
        settings=settings,
        claims=claims,
        history=history,
        state_machine=state_machine,
        rule_engine=rule_engine,
        registry=registry,
        similarity=similarity,
        negotiation=negotiation,
        action_log=action_log,
        orchestrator=orchestrator,
        authorizer=StaticTokenAuthorizer(api_tokens),
        rate_limiter=TokenBucketRateLimiter(),
    )
