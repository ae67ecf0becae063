"""
Decision recommendation resolver — advisor payload → DecisionRecord.

Contract
--------
`resolve()` never raises. A structurally valid payload becomes a
DecisionRecord; anything else (absent, non-JSON, wrong shape, unknown
recommendation, any error while parsing) degrades to the canonical
fallback record:

    overall_score  = 50
    recommendation = needs_review
    confidence     = 30
    reasoning      = ["Unable to analyze at this time", "Please review manually"]
    criteria       = every score 50, gratitude_acknowledged False

A fallback has the same shape as a real record; only the confidence tells
them apart, so callers need no special branch for "advisor failed".

Payload rules
-------------
- `recommendation` is required: keep | donate | discard | needs_review.
- `overallScore` / `confidence` default to 50 when missing.
- Numeric fields must be numbers (or numeric strings, not booleans) and are
  rounded and clamped into [0, 100].
- Missing criteria fields take the fallback hint's value, else 50 / False.
- Missing or empty `reasoning` becomes ["Analysis unavailable"].
- The advisor tends to wrap its JSON in Markdown ```json fences; those are
  stripped before decoding.

The network call and prompt construction belong to the caller's advisor;
`request_recommendation()` only invokes it once and resolves the result.
"""
from __future__ import annotations

import enum
import json
import logging
import math
import re
from dataclasses import dataclass, field, fields
from decimal import Decimal, ROUND_HALF_UP
from typing import Annotated, Any, Callable, Mapping, Optional

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StrictBool,
    StrictStr,
    ValidationError,
)

from harmony.core.errors import (
    AdvisorUnavailable,
    InvalidInputError,
    MalformedAdvisorResponse,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Domain types
# ---------------------------------------------------------------------------

class Recommendation(str, enum.Enum):
    keep = "keep"
    donate = "donate"
    discard = "discard"
    needs_review = "needs_review"


DEFAULT_CRITERION = 50

FALLBACK_OVERALL_SCORE = 50
FALLBACK_CONFIDENCE = 30
FALLBACK_REASONING = ("Unable to analyze at this time", "Please review manually")
MISSING_REASONING = ("Analysis unavailable",)


@dataclass(frozen=True)
class MarieKondoCriteria:
    joy_factor: int = DEFAULT_CRITERION
    category_completion: int = DEFAULT_CRITERION
    gratitude_acknowledged: bool = False


@dataclass(frozen=True)
class Toyota5SCriteria:
    sort: int = DEFAULT_CRITERION
    set_in_order: int = DEFAULT_CRITERION
    shine: int = DEFAULT_CRITERION
    standardize: int = DEFAULT_CRITERION
    sustain: int = DEFAULT_CRITERION


@dataclass(frozen=True)
class LeanSixSigmaCriteria:
    transportation_waste: int = DEFAULT_CRITERION
    inventory_waste: int = DEFAULT_CRITERION
    motion_waste: int = DEFAULT_CRITERION
    waiting_waste: int = DEFAULT_CRITERION
    over_processing_waste: int = DEFAULT_CRITERION
    over_production_waste: int = DEFAULT_CRITERION
    defects: int = DEFAULT_CRITERION


@dataclass(frozen=True)
class EasternPhilosophyCriteria:
    energy_flow_contribution: int = DEFAULT_CRITERION
    mindfulness_enhancement: int = DEFAULT_CRITERION
    simplicity_alignment: int = DEFAULT_CRITERION
    seasonal_harmony: int = DEFAULT_CRITERION


@dataclass(frozen=True)
class DecisionCriteriaBreakdown:
    marie_kondo: MarieKondoCriteria = field(default_factory=MarieKondoCriteria)
    toyota_5s: Toyota5SCriteria = field(default_factory=Toyota5SCriteria)
    lean_six_sigma: LeanSixSigmaCriteria = field(default_factory=LeanSixSigmaCriteria)
    eastern_philosophy: EasternPhilosophyCriteria = field(
        default_factory=EasternPhilosophyCriteria
    )


@dataclass(frozen=True)
class DecisionRecord:
    overall_score: int
    recommendation: Recommendation
    confidence: int
    reasoning: tuple[str, ...]
    criteria_breakdown: DecisionCriteriaBreakdown

    def to_dict(self) -> dict[str, Any]:
        """Advisor-shaped (camelCase) document."""
        return {
            "overallScore": self.overall_score,
            "recommendation": self.recommendation.value,
            "confidence": self.confidence,
            "reasoning": list(self.reasoning),
            "criteriaBreakdown": breakdown_to_dict(self.criteria_breakdown),
        }


# (attribute name, wire name, dataclass) for the four methodology groups
_GROUPS: tuple[tuple[str, str, type], ...] = (
    ("marie_kondo", "marieKondo", MarieKondoCriteria),
    ("toyota_5s", "toyota5S", Toyota5SCriteria),
    ("lean_six_sigma", "leanSixSigma", LeanSixSigmaCriteria),
    ("eastern_philosophy", "easternPhilosophy", EasternPhilosophyCriteria),
)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def breakdown_to_dict(breakdown: DecisionCriteriaBreakdown) -> dict[str, dict[str, Any]]:
    out: dict[str, dict[str, Any]] = {}
    for attr, wire, group_cls in _GROUPS:
        group = getattr(breakdown, attr)
        out[wire] = {_camel(f.name): getattr(group, f.name) for f in fields(group_cls)}
    return out


# ---------------------------------------------------------------------------
# Advisor payload validation (pydantic)
# ---------------------------------------------------------------------------

def _to_score(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("booleans are not scores")
    if not isinstance(value, (str, int, float)):
        raise ValueError(f"expected a number, got {type(value).__name__}")
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except OverflowError as exc:
        raise ValueError("score is too large") from exc
    if not math.isfinite(number):
        raise ValueError("score must be finite")
    rounded = int(Decimal(str(number)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return max(0, min(100, rounded))


Score = Annotated[int, BeforeValidator(_to_score)]


class _AdvisorModel(BaseModel):
    model_config = ConfigDict(alias_generator=_camel, populate_by_name=True, extra="ignore")


class _MarieKondoIn(_AdvisorModel):
    joy_factor: Optional[Score] = None
    category_completion: Optional[Score] = None
    gratitude_acknowledged: Optional[StrictBool] = None


class _Toyota5SIn(_AdvisorModel):
    sort: Optional[Score] = None
    set_in_order: Optional[Score] = None
    shine: Optional[Score] = None
    standardize: Optional[Score] = None
    sustain: Optional[Score] = None


class _LeanSixSigmaIn(_AdvisorModel):
    transportation_waste: Optional[Score] = None
    inventory_waste: Optional[Score] = None
    motion_waste: Optional[Score] = None
    waiting_waste: Optional[Score] = None
    over_processing_waste: Optional[Score] = None
    over_production_waste: Optional[Score] = None
    defects: Optional[Score] = None


class _EasternPhilosophyIn(_AdvisorModel):
    energy_flow_contribution: Optional[Score] = None
    mindfulness_enhancement: Optional[Score] = None
    simplicity_alignment: Optional[Score] = None
    seasonal_harmony: Optional[Score] = None


class _CriteriaIn(_AdvisorModel):
    marie_kondo: Optional[_MarieKondoIn] = None
    toyota_5s: Optional[_Toyota5SIn] = Field(default=None, alias="toyota5S")
    lean_six_sigma: Optional[_LeanSixSigmaIn] = None
    eastern_philosophy: Optional[_EasternPhilosophyIn] = None


class _PayloadIn(_AdvisorModel):
    overall_score: Optional[Score] = None
    recommendation: Recommendation
    confidence: Optional[Score] = None
    reasoning: Optional[list[StrictStr]] = None
    criteria_breakdown: Optional[_CriteriaIn] = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_FENCE_RE = re.compile(r"```(?:json)?\s*|\s*```")


def _decode(raw: Any) -> Mapping[str, Any]:
    """bytes / str (JSON, optionally fenced) / mapping → mapping."""
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    if isinstance(raw, str):
        text = _FENCE_RE.sub("", raw).strip()
        try:
            raw = json.loads(text)
        except ValueError as exc:
            raise MalformedAdvisorResponse("Advisor response is not JSON.") from exc
    if not isinstance(raw, Mapping):
        raise MalformedAdvisorResponse(
            "Advisor response is not a JSON object.",
            details={"type": type(raw).__name__},
        )
    return raw


def _merge_breakdown(*layers: Optional[_CriteriaIn]) -> DecisionCriteriaBreakdown:
    """First non-None value per field wins; dataclass defaults fill the rest."""
    groups: dict[str, Any] = {}
    for attr, _wire, group_cls in _GROUPS:
        values: dict[str, Any] = {}
        for f in fields(group_cls):
            for layer in layers:
                group = getattr(layer, attr) if layer is not None else None
                value = getattr(group, f.name) if group is not None else None
                if value is not None:
                    values[f.name] = value
                    break
        groups[attr] = group_cls(**values)
    return DecisionCriteriaBreakdown(**groups)


def _parse_hint(fallback_hint: Optional[Mapping[str, Any]]) -> Optional[_CriteriaIn]:
    if fallback_hint is None:
        return None
    try:
        return _CriteriaIn.model_validate(fallback_hint)
    except Exception as exc:
        logger.warning("Ignoring unusable fallback hint: %s", exc)
        return None


# ---------------------------------------------------------------------------
# Public
# ---------------------------------------------------------------------------

def criteria_from_mapping(criteria: Mapping[str, Any]) -> DecisionCriteriaBreakdown:
    """Caller-supplied criteria document → breakdown. Missing fields are 50 / False."""
    try:
        parsed = _CriteriaIn.model_validate(criteria)
    except ValidationError as exc:
        raise InvalidInputError("criteria", None, str(exc.errors()[0]["msg"])) from exc
    return _merge_breakdown(parsed)


def fallback_record(
    fallback_hint: Optional[Mapping[str, Any]] = None,
) -> DecisionRecord:
    """The canonical degraded record, criteria overlaid with the hint if any."""
    return DecisionRecord(
        overall_score=FALLBACK_OVERALL_SCORE,
        recommendation=Recommendation.needs_review,
        confidence=FALLBACK_CONFIDENCE,
        reasoning=FALLBACK_REASONING,
        criteria_breakdown=_merge_breakdown(_parse_hint(fallback_hint)),
    )


def resolve(
    raw_payload: Any = None,
    fallback_hint: Optional[Mapping[str, Any]] = None,
) -> DecisionRecord:
    """Validate and normalize an advisor payload. Never raises."""
    try:
        if raw_payload is None:
            raise AdvisorUnavailable("No advisor payload was provided.")
        parsed = _PayloadIn.model_validate(_decode(raw_payload))
    except Exception as exc:
        logger.warning("Advisor payload rejected, using fallback record: %s", exc)
        return fallback_record(fallback_hint)

    return DecisionRecord(
        overall_score=(
            parsed.overall_score
            if parsed.overall_score is not None
            else DEFAULT_CRITERION
        ),
        recommendation=parsed.recommendation,
        confidence=(
            parsed.confidence if parsed.confidence is not None else DEFAULT_CRITERION
        ),
        reasoning=tuple(parsed.reasoning) if parsed.reasoning else MISSING_REASONING,
        criteria_breakdown=_merge_breakdown(
            parsed.criteria_breakdown, _parse_hint(fallback_hint)
        ),
    )


def request_recommendation(
    advisor: Callable[[], Any],
    fallback_hint: Optional[Mapping[str, Any]] = None,
) -> DecisionRecord:
    """
    Call the advisor once and resolve its output.
    One in-flight call per pending decision is the caller's job; no retry.
    """
    try:
        raw = advisor()
    except Exception as exc:
        logger.warning("Advisor unavailable, using fallback record: %s", exc)
        return fallback_record(fallback_hint)
    return resolve(raw, fallback_hint)
