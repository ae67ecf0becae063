"""
Local decision scoring across the four organization methodologies.

Weights
-------
  Marie Kondo         25%   joy_factor, category_completion
  Toyota 5S           30%   sort, set_in_order, shine, standardize, sustain
  Lean Six Sigma      25%   100 - each waste metric (less waste is better)
  Eastern philosophy  20%   energy flow, mindfulness, simplicity, seasons

`local_payload()` produces the same camelCase document the remote advisor
returns, so a locally computed recommendation goes through the exact same
`decision_resolver.resolve()` validation as a remote one.
"""
from __future__ import annotations

from dataclasses import fields
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Mapping, Optional

from harmony.services.decision_resolver import (
    DecisionCriteriaBreakdown,
    DecisionRecord,
    Recommendation,
    breakdown_to_dict,
    criteria_from_mapping,
    resolve,
)


METHODOLOGY_WEIGHTS: dict[str, Decimal] = {
    "marie_kondo": Decimal("0.25"),
    "toyota_5s": Decimal("0.30"),
    "lean_six_sigma": Decimal("0.25"),
    "eastern_philosophy": Decimal("0.20"),
}

KEEP_THRESHOLD = 65
DONATE_THRESHOLD = 40

_MIN_CONFIDENCE = 50
_MAX_CONFIDENCE = 95


def _mean(values: list[int]) -> Decimal:
    return Decimal(sum(values)) / Decimal(len(values))


def methodology_scores(criteria: DecisionCriteriaBreakdown) -> dict[str, Decimal]:
    """Per-methodology mean on a 0–100 scale."""
    mk = criteria.marie_kondo
    lean = criteria.lean_six_sigma
    return {
        # gratitude is a ritual flag, not a score
        "marie_kondo": _mean([mk.joy_factor, mk.category_completion]),
        "toyota_5s": _mean(
            [getattr(criteria.toyota_5s, f.name) for f in fields(criteria.toyota_5s)]
        ),
        "lean_six_sigma": _mean([100 - getattr(lean, f.name) for f in fields(lean)]),
        "eastern_philosophy": _mean(
            [
                getattr(criteria.eastern_philosophy, f.name)
                for f in fields(criteria.eastern_philosophy)
            ]
        ),
    }


def weighted_score(criteria: DecisionCriteriaBreakdown) -> int:
    scores = methodology_scores(criteria)
    total = sum(scores[name] * weight for name, weight in METHODOLOGY_WEIGHTS.items())
    return int(total.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def recommend(score: int) -> Recommendation:
    if score >= KEEP_THRESHOLD:
        return Recommendation.keep
    if score >= DONATE_THRESHOLD:
        return Recommendation.donate
    return Recommendation.discard


def confidence_for(score: int) -> int:
    """Further from the nearest threshold means a clearer call."""
    distance = min(abs(score - KEEP_THRESHOLD), abs(score - DONATE_THRESHOLD))
    return min(_MAX_CONFIDENCE, _MIN_CONFIDENCE + 2 * distance)


def _reasoning(scores: dict[str, Decimal]) -> list[str]:
    labels = {
        "marie_kondo": "Marie Kondo",
        "toyota_5s": "Toyota 5S",
        "lean_six_sigma": "Lean Six Sigma",
        "eastern_philosophy": "Eastern philosophy",
    }
    ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
    best, worst = ranked[0], ranked[-1]
    return [
        f"Strongest signal: {labels[best[0]]} ({best[1]:.0f}/100)",
        f"Weakest signal: {labels[worst[0]]} ({worst[1]:.0f}/100)",
    ]


def local_payload(criteria: DecisionCriteriaBreakdown) -> dict[str, Any]:
    """Advisor-shaped document computed without the remote advisor."""
    scores = methodology_scores(criteria)
    overall = weighted_score(criteria)
    return {
        "overallScore": overall,
        "recommendation": recommend(overall).value,
        "confidence": confidence_for(overall),
        "reasoning": _reasoning(scores),
        "criteriaBreakdown": breakdown_to_dict(criteria),
    }


def local_record(
    criteria: Mapping[str, Any],
    fallback_hint: Optional[Mapping[str, Any]] = None,
) -> DecisionRecord:
    """Score a criteria document locally and run it through the resolver."""
    breakdown = criteria_from_mapping(criteria)
    return resolve(local_payload(breakdown), fallback_hint)
