"""
Tests for the HTTP API.

Each test gets a fresh app over freshly seeded demo services.
"""
import pytest
from fastapi.testclient import TestClient

from api.main import create_app, status_for
from api.services import DEMO_TOKEN, build_services
from claimiq.exceptions import ClaimIQError, ClaimNotFound, RulePackLoadError

from tests.conftest import make_settings

ALICE = {"Authorization": "Bearer token-a"}
BOB = {"Authorization": "Bearer token-b"}


def make_client(**overrides):
    settings = make_settings(**overrides)
    return TestClient(create_app(services=build_services(settings)))


@pytest.fixture
def client():
    with make_client() as c:
        yield c


# =============================================================================
# Health & Middleware
# =============================================================================

class TestHealth:
    """Tests for /health."""

    def test_health_without_auth(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["healthy"] is True
        assert data["rules_loaded"] == 30
        assert data["carriers_loaded"] == 10
        assert data["agents"] == 8

    def test_request_id_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"

    def test_request_id_generated(self, client):
        assert len(client.get("/health").headers["X-Request-ID"]) == 8

    def test_docs_disabled(self):
        with make_client(docs_enabled=False) as c:
            assert c.get("/docs").status_code == 404


# =============================================================================
# Auth & Rate Limiting
# =============================================================================

class TestAuth:
    """Tests for bearer authentication and org scoping."""

    def test_missing_token(self, client):
        response = client.get("/claims/CLM-1001/state")
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        body = response.json()
        assert body["code"] == "CIQ_UNAUTHORIZED"
        assert body["request_id"]

    def test_invalid_token(self, client):
        response = client.get("/claims/CLM-1001/state", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    def test_wrong_scheme(self, client):
        response = client.get("/claims/CLM-1001/state", headers={"Authorization": "Basic token-a"})
        assert response.status_code == 401

    def test_other_org_forbidden(self, client):
        response = client.post("/claims/CLM-1001/orchestrate", headers=BOB)
        assert response.status_code == 403
        assert response.json()["code"] == "CIQ_FORBIDDEN"

    def test_unknown_claim(self, client):
        response = client.get("/claims/CLM-404/state", headers=ALICE)
        assert response.status_code == 404
        assert response.json()["code"] == "CIQ_CLAIM_NOT_FOUND"

    def test_demo_token_when_none_configured(self):
        with make_client(api_tokens={}) as c:
            headers = {"Authorization": f"Bearer {DEMO_TOKEN}"}
            assert c.get("/claims/CLM-1001/state", headers=headers).status_code == 200


class TestRateLimit:
    """Tests for per-principal rate limiting."""

    def test_limit_exceeded(self):
        with make_client(rate_limit=2) as c:
            assert c.get("/agents", headers=ALICE).status_code == 200
            assert c.get("/agents", headers=ALICE).status_code == 200
            response = c.get("/agents", headers=ALICE)

        assert response.status_code == 429
        assert response.json()["code"] == "CIQ_RATE_LIMITED"
        assert int(response.headers["Retry-After"]) >= 1

    def test_limit_is_per_principal(self):
        with make_client(rate_limit=1) as c:
            assert c.get("/agents", headers=ALICE).status_code == 200
            assert c.get("/agents", headers=BOB).status_code == 200
            assert c.get("/agents", headers=ALICE).status_code == 429

    def test_health_not_limited(self):
        with make_client(rate_limit=1) as c:
            for _ in range(3):
                assert c.get("/health").status_code == 200


# =============================================================================
# Orchestration
# =============================================================================

class TestOrchestrate:
    """Tests for POST /claims/{id}/orchestrate."""

    def test_full_intelligence(self, client):
        response = client.post("/claims/CLM-1003/orchestrate", headers=ALICE)
        assert response.status_code == 200
        data = response.json()

        assert data["claim_id"] == "CLM-1003"
        assert data["current_state"] == "NEGOTIATING"
        assert data["allowed_next_states"] == ["APPROVED", "SUBMITTED"]
        assert len(data["negotiation_suggestions"]) == 4
        assert data["negotiation_suggestions"][0]["summary"].startswith("State Farm strategy:")
        assert 0.0 <= data["intelligence"]["approval_likelihood"] <= 1.0

        order = ["critical", "high", "medium", "low"]
        ranks = [order.index(a["priority"]) for a in data["next_actions"]]
        assert ranks == sorted(ranks)
        assert "CLM-1003" not in [c["claim_id"] for c in data["similar_claims"]]

    def test_next_actions_only(self, client):
        response = client.post(
            "/claims/CLM-1003/orchestrate",
            json={"request_type": "next_actions"},
            headers=ALICE,
        )
        assert response.status_code == 200
        assert "negotiation_suggestions" not in response.json()

    def test_new_lead(self, client):
        data = client.post("/claims/CLM-1006/orchestrate", headers=ALICE).json()
        assert data["current_state"] is None
        assert data["allowed_next_states"] == ["INTAKE"]
        # No lifecycle template for INTAKE; only always-on rules contribute
        assert all(":rule-" in a["id"] for a in data["next_actions"])
        assert "negotiation_suggestions" not in data

    def test_invalid_request_type(self, client):
        response = client.post(
            "/claims/CLM-1003/orchestrate",
            json={"request_type": "summarize"},
            headers=ALICE,
        )
        assert response.status_code == 422

    def test_action_logged(self, client):
        client.post("/claims/CLM-1001/orchestrate", headers=ALICE)
        log = client.app.state.services.action_log
        assert len(log.entries("CLM-1001")) == 1

    def test_should_act(self, client):
        active = client.get("/claims/CLM-1001/should-act", headers=ALICE).json()
        finished = client.get("/claims/CLM-1005/should-act", headers=ALICE).json()
        assert active["should_act"] is True
        assert finished == {"claim_id": "CLM-1005", "current_state": "COMPLETE", "should_act": False}


# =============================================================================
# Lifecycle
# =============================================================================

class TestLifecycle:
    """Tests for state, transitions and history endpoints."""

    def test_state(self, client):
        data = client.get("/claims/CLM-1004/state", headers=ALICE).json()
        assert data == {
            "claim_id": "CLM-1004",
            "current_state": "SUBMITTED",
            "allowed_next_states": ["NEGOTIATING", "APPROVED"],
        }

    def test_transition(self, client):
        response = client.post(
            "/claims/CLM-1006/transitions",
            json={"new_state": "INTAKE", "notes": "Signed contingency"},
            headers=ALICE,
        )
        assert response.status_code == 201
        entry = response.json()
        assert entry["current_state"] == "INTAKE"
        assert entry["previous_state"] is None
        assert entry["org_id"] == "ORG-DEMO"
        assert entry["notes"] == "Signed contingency"

        state = client.get("/claims/CLM-1006/state", headers=ALICE).json()
        assert state["current_state"] == "INTAKE"

    def test_invalid_transition(self, client):
        response = client.post(
            "/claims/CLM-1001/transitions",
            json={"new_state": "PAID"},
            headers=ALICE,
        )
        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "CIQ_INVALID_TRANSITION"
        assert body["details"]["allowed"] == ["ESTIMATE_DRAFTED"]

    def test_unknown_state_value(self, client):
        response = client.post(
            "/claims/CLM-1001/transitions",
            json={"new_state": "ARCHIVED"},
            headers=ALICE,
        )
        assert response.status_code == 422

    def test_transition_other_org(self, client):
        response = client.post(
            "/claims/CLM-1006/transitions",
            json={"new_state": "INTAKE"},
            headers=BOB,
        )
        assert response.status_code == 403

    def test_history(self, client):
        data = client.get("/claims/CLM-1003/history", headers=ALICE).json()
        states = [e["current_state"] for e in data["entries"]]
        assert states == ["INTAKE", "INSPECTED", "ESTIMATE_DRAFTED", "SUBMITTED", "NEGOTIATING"]

    def test_similar(self, client):
        response = client.get("/claims/CLM-1001/similar?limit=2", headers=ALICE)
        assert response.status_code == 200
        similar = response.json()["similar_claims"]
        assert len(similar) <= 2
        assert all(s["claim_id"] != "CLM-1001" for s in similar)

    def test_similar_limit_validated(self, client):
        response = client.get("/claims/CLM-1001/similar?limit=0", headers=ALICE)
        assert response.status_code == 422


# =============================================================================
# Negotiation
# =============================================================================

class TestNegotiation:
    """Tests for POST /negotiation/suggestions."""

    def test_by_carrier(self, client):
        response = client.post("/negotiation/suggestions", json={"carrier": "State Farm"}, headers=ALICE)
        assert response.status_code == 200
        assert len(response.json()["suggestions"]) == 2

    def test_denial_and_value(self, client):
        response = client.post(
            "/negotiation/suggestions",
            json={"carrier": "State Farm", "denial_reason": "price dispute", "estimate_value": 60000},
            headers=ALICE,
        )
        assert len(response.json()["suggestions"]) == 4

    def test_defaults_from_claim(self, client):
        response = client.post("/negotiation/suggestions", json={"claim_id": "CLM-1003"}, headers=ALICE)
        data = response.json()
        assert data["carrier"] == "State Farm"
        assert len(data["suggestions"]) == 4

    def test_claim_other_org(self, client):
        response = client.post("/negotiation/suggestions", json={"claim_id": "CLM-1003"}, headers=BOB)
        assert response.status_code == 403

    def test_negative_value_rejected(self, client):
        response = client.post(
            "/negotiation/suggestions",
            json={"carrier": "USAA", "estimate_value": -1},
            headers=ALICE,
        )
        assert response.status_code == 422


# =============================================================================
# Agents
# =============================================================================

class TestAgents:
    """Tests for /agents."""

    def test_list(self, client):
        agents = client.get("/agents", headers=ALICE).json()
        assert len(agents) == 8
        assert agents[0]["name"] == "EstimateAgent"

    def test_get(self, client):
        agent = client.get("/agents/planner", headers=ALICE).json()
        assert agent["name"] == "PlannerAgent"
        assert agent["utility_model"]["optimization_target"] == "cycle_time"

    def test_get_missing(self, client):
        response = client.get("/agents/nope", headers=ALICE)
        assert response.status_code == 404
        assert response.json()["code"] == "CIQ_AGENT_NOT_FOUND"

    def test_create_and_duplicate(self, client):
        payload = {
            "name": "Hail Specialist",
            "description": "Hail-only claims",
            "goal": "Maximize hail approvals",
            "utility_model": {"weights": {"approval": 0.6, "payout": 0.4}},
        }
        created = client.post("/agents", json=payload, headers=ALICE)
        assert created.status_code == 201
        assert created.json()["id"].startswith("hail-specialist-")

        duplicate = client.post("/agents", json=payload, headers=ALICE)
        assert duplicate.status_code == 409
        assert duplicate.json()["code"] == "CIQ_AGENT_EXISTS"

        assert len(client.get("/agents", headers=ALICE).json()) == 9

    def test_create_requires_admin(self, client):
        payload = {"name": "Rogue Agent", "description": "x", "goal": "y"}
        response = client.post("/agents", json=payload, headers=BOB)
        assert response.status_code == 403
        assert response.json()["code"] == "CIQ_ADMIN_REQUIRED"
        assert len(client.get("/agents", headers=BOB).json()) == 8

    def test_create_without_admins_configured(self):
        with make_client(admin_principals=frozenset()) as c:
            payload = {"name": "Hail Specialist", "description": "x", "goal": "y"}
            assert c.post("/agents", json=payload, headers=ALICE).status_code == 403


# =============================================================================
# Error Mapping
# =============================================================================

class TestStatusFor:
    """Tests for exception to status code mapping."""

    def test_mapped(self):
        assert status_for(ClaimNotFound(message="x")) == 404

    def test_unmapped_is_500(self):
        assert status_for(RulePackLoadError(message="x")) == 500
        assert status_for(ClaimIQError(message="x")) == 500
