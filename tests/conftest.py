"""
Pytest configuration and fixtures for ClaimIQ tests.

Provides helper factories and common fixtures for the engine and API tests.
"""
import pytest

from claimiq.config import Settings
from claimiq.engine import (
    ActionPlanner,
    AgentRegistry,
    ClaimStateMachine,
    InMemoryEmbeddingStore,
    NegotiationSelector,
    Orchestrator,
    RuleEngine,
    SimilaritySearch,
)
from claimiq.models import (
    ClaimRecord,
    ClaimState,
    RuleDefinition,
    StateHistoryEntry,
)
from claimiq.stores import (
    DefaultClaimContextBuilder,
    InMemoryActionLog,
    InMemoryClaimStore,
    InMemoryStateHistoryStore,
)


# =============================================================================
# Factory Helpers
# =============================================================================

def make_claim(
    claim_id: str = "CLM-001",
    org_id: str = "ORG-1",
    carrier=None,
    estimated_value=None,
    damage_type=None,
    denial_reason=None,
    title: str = "Test claim",
    **attributes,
) -> ClaimRecord:
    """Create a ClaimRecord; extra keyword arguments become attributes."""
    return ClaimRecord(
        id=claim_id,
        org_id=org_id,
        carrier=carrier,
        estimated_value=estimated_value,
        title=title,
        damage_type=damage_type,
        denial_reason=denial_reason,
        attributes=attributes,
    )


def make_rule(
    name: str = "TestRule",
    trigger=None,
    action_type="recommend",
    rule_id=None,
    enabled: bool = True,
    **payload,
) -> RuleDefinition:
    """Create a rule; defaults to an always-true recommend rule."""
    action = dict(payload)
    if action_type is not None:
        action["type"] = action_type
    return RuleDefinition.from_dict({
        "id": rule_id,
        "name": name,
        "trigger": trigger if trigger is not None else {"always": True},
        "action": action,
        "enabled": enabled,
    })


def make_condition(path: str, op: str, value) -> dict:
    return {"path": path, "op": op, "value": value}


def seed_history(
    history: InMemoryStateHistoryStore,
    claim_id: str,
    states: list,
    org_id: str = "ORG-1",
) -> None:
    """Append a valid chain of states for a claim."""
    previous = None
    for state in states:
        state = ClaimState(state)
        history.append(
            StateHistoryEntry(
                claim_id=claim_id,
                org_id=org_id,
                current_state=state,
                previous_state=previous,
            ),
            expected_previous=previous,
        )
        previous = state


class FakeSimilarity:
    """Similarity search returning canned results."""

    def __init__(self, results=None, error=None):
        self.results = results or []
        self.error = error
        self.org_ids = []

    def find_similar_claims(self, claim_id, limit=5, org_id=None):
        self.org_ids.append(org_id)
        if self.error:
            raise self.error
        return list(self.results)[:limit]


def make_orchestrator(
    claims=(),
    rules=(),
    history=None,
    similarity=None,
    negotiation=None,
    action_log=None,
    **kwargs,
) -> Orchestrator:
    """Orchestrator over in-memory stores."""
    claim_store = InMemoryClaimStore(list(claims))
    history = history or InMemoryStateHistoryStore()
    return Orchestrator(
        claims=claim_store,
        state_machine=ClaimStateMachine(history),
        context_builder=DefaultClaimContextBuilder(claim_store, history),
        rule_engine=RuleEngine(list(rules)),
        planner=ActionPlanner(),
        similarity=similarity or SimilaritySearch(InMemoryEmbeddingStore()),
        negotiation=negotiation or NegotiationSelector(),
        registry=AgentRegistry(),
        action_log=action_log if action_log is not None else InMemoryActionLog(),
        **kwargs,
    )


def make_settings(**overrides) -> Settings:
    """Settings for tests: demo data on, one known token per org, alice is admin."""
    values = {
        "api_tokens": {
            "token-a": ("alice", "ORG-DEMO"),
            "token-b": ("bob", "ORG-OTHER"),
        },
        "admin_principals": {"alice"},
        "load_demo": True,
        "rate_limit": 1000,
    }
    values.update(overrides)
    return Settings(**values)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def history():
    return InMemoryStateHistoryStore()


@pytest.fixture
def state_machine(history):
    return ClaimStateMachine(history)


@pytest.fixture
def action_log():
    return InMemoryActionLog()
