"""
ClaimIQ Explanation Builder

Renders the rationale behind a recommended action as plain text.
"""
from __future__ import annotations

from typing import Optional, Sequence

from ..models import ExplanationPayload, RuleDefinition, SimilarClaim, clamp01

TOP_MATCH_THRESHOLD = 0.8

GENERIC_REASONING = (
    "This recommendation follows the standard claim workflow; "
    "no specific rules or similar cases were found for this claim."
)

ACTION_LABELS: dict[str, str] = {
    "schedule_inspection": "Schedule an inspection",
    "generate_estimate": "Generate an estimate",
    "submit_claim": "Submit the claim to the carrier",
    "generate_letter": "Prepare a supplement or appeal letter",
    "negotiate": "Negotiate with the carrier",
    "analyze_risk": "Review claim risk",
    "close_claim": "Close the claim",
}


def action_label(action_type: str) -> str:
    return ACTION_LABELS.get(action_type, action_type)


def default_explanation() -> ExplanationPayload:
    """Payload used when there is nothing to explain."""
    return ExplanationPayload(reasoning=GENERIC_REASONING)


def build_explanation(
    claim_id: str,
    rules: Sequence[RuleDefinition],
    similar_cases: Sequence[SimilarClaim],
    action_type: str,
    confidence: Optional[float] = None,
) -> ExplanationPayload:
    """
    Explain why action_type is recommended for a claim.

    Sentences, in order: action label, triggered rules, similar cases (with
    a call-out of the top match above 0.8), confidence. Without rules,
    similar cases or a confidence the reasoning is the generic sentence.
    """
    sentences: list[str] = []

    if rules:
        names = ", ".join(rule.name for rule in rules)
        sentences.append(f"{len(rules)} rule(s) triggered: {names}.")

    if similar_cases:
        sentence = f"{len(similar_cases)} similar claim(s) found."
        top = max(similar_cases, key=lambda c: c.score)
        if top.score > TOP_MATCH_THRESHOLD:
            sentence += f" Closest match {top.claim_id} is {round(top.score * 100)}% similar."
        sentences.append(sentence)

    confidence_score = clamp01(confidence) if confidence is not None else None
    if confidence_score is not None:
        sentences.append(f"Confidence: {round(confidence_score * 100)}%.")

    if not sentences:
        reasoning = GENERIC_REASONING
    else:
        reasoning = " ".join([f"Recommended action: {action_label(action_type)}."] + sentences)

    return ExplanationPayload(
        reasoning=reasoning,
        rules_used=[rule.id for rule in rules],
        similar_cases=list(similar_cases),
        confidence_score=confidence_score,
    )
