"""
Decision schemas.

POST /decisions/resolve                          ResolveRequest → DecisionResponse
POST /decisions/score                            ScoreRequest   → DecisionResponse
POST /rooms/{room_id}/categories/{name}/decision ResolveRequest → ActionResponse

The decision payload itself is deliberately untyped (`Any`): whatever the
advisor produced is handed to the resolver, which owns validation and the
fallback.
"""
from typing import Any, Optional

from pydantic import BaseModel, Field

from harmony.services.decision_resolver import DecisionRecord


class ResolveRequest(BaseModel):
    payload: Any = Field(
        default=None,
        description="Advisor output: JSON object or JSON string. Invalid input yields the fallback.",
    )
    fallback_hint: Optional[dict[str, Any]] = Field(
        default=None,
        description="Partial criteriaBreakdown used for fields the payload omits.",
    )


class ScoreRequest(BaseModel):
    criteria: dict[str, Any] = Field(
        default_factory=dict,
        description="criteriaBreakdown document; missing fields count as 50.",
    )


class DecisionResponse(BaseModel):
    overallScore: int
    recommendation: str
    confidence: int
    reasoning: list[str]
    criteriaBreakdown: dict[str, dict[str, Any]]

    @classmethod
    def from_record(cls, record: DecisionRecord) -> "DecisionResponse":
        return cls(**record.to_dict())
