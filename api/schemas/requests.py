"""Request schemas for the API."""

from typing import Optional

from pydantic import BaseModel, Field

from claimiq.models import ClaimState, RequestType


class OrchestrateRequest(BaseModel):
    """Request to orchestrate a claim."""
    request_type: RequestType = Field(
        default=RequestType.FULL_INTELLIGENCE,
        description="full_intelligence|next_actions|negotiate|explain",
    )


class TransitionRequest(BaseModel):
    """Request to move a claim to a new lifecycle state."""
    new_state: ClaimState = Field(..., description="Target state, e.g. 'INSPECTED'")
    notes: Optional[str] = Field(None, max_length=2000)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"new_state": "INSPECTED", "notes": "Inspection completed by crew lead"},
            ]
        }
    }


class NegotiationRequest(BaseModel):
    """
    Request for negotiation suggestions.

    When claim_id is given, carrier, denial reason and estimate default to
    the claim's values.
    """
    carrier: Optional[str] = None
    claim_id: Optional[str] = None
    denial_reason: Optional[str] = None
    estimate_value: Optional[float] = Field(None, ge=0)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"carrier": "State Farm", "denial_reason": "price dispute", "estimate_value": 60000},
            ]
        }
    }


class UtilityModelInput(BaseModel):
    weights: dict[str, float] = Field(default_factory=dict)
    thresholds: dict[str, float] = Field(default_factory=dict)
    optimization_target: str = ""


class CreateAgentRequest(BaseModel):
    """Request to register a new agent."""
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    goal: str = Field(..., min_length=1)
    utility_model: UtilityModelInput = Field(default_factory=UtilityModelInput)
