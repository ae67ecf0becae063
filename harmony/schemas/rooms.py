"""
Room schemas.

PUT  /rooms/{room_id}              RoomUpsertRequest   → RoomSummaryResponse
GET  /rooms/{room_id}                                  → RoomSummaryResponse
POST /rooms/{room_id}/progress     ProgressRequest     → ActionResponse
POST /rooms/{room_id}/categories   CategoryRequest     → RoomSummaryResponse
DELETE /rooms/{room_id}                                → 204
DELETE /rooms/{room_id}/categories/{name}              → RoomSummaryResponse
GET  /dashboard                                        → DashboardResponse
"""
from datetime import date
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field

from harmony.schemas.motivation import ChallengeResponse, LevelResponse
from harmony.services.engine import ItemCategory, KeepDecision, RoomSummary, UsageFrequency
from harmony.services.room_score import RoomMetrics

Metric = Annotated[int, Field(ge=1, le=10)]


class RoomMetricsIn(BaseModel):
    """All five sliders travel together; there is no partial update."""
    clutter_level: Metric
    functionality_score: Metric
    joy_factor: Metric
    energy_flow: Metric
    accessibility_score: Metric

    def to_domain(self) -> RoomMetrics:
        return RoomMetrics(**self.model_dump())


class RoomUpsertRequest(BaseModel):
    room_name: Annotated[str, Field(min_length=1, max_length=200)]
    metrics: RoomMetricsIn


class ProgressRequest(BaseModel):
    metrics: RoomMetricsIn
    hours: float = Field(
        default=1,
        ge=0,
        le=24,
        allow_inf_nan=False,
        description="Hours spent, at most 24. Earns 3 points per hour, minimum 5.",
    )
    day: Optional[date] = Field(
        default=None,
        description="Snapshot day. Defaults to today (UTC).",
        examples=["2026-10-19"],
    )


class CategoryRequest(BaseModel):
    name: Annotated[str, Field(min_length=1, max_length=200)]
    item_count: int = Field(default=1, ge=0)
    joy_rating: int = Field(default=5, ge=1, le=10)
    frequency: UsageFrequency = UsageFrequency.monthly
    keep_decision: KeepDecision = KeepDecision.undecided

    def to_domain(self) -> ItemCategory:
        return ItemCategory(**self.model_dump())


class RoomMetricsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    clutter_level: int
    functionality_score: int
    joy_factor: int
    energy_flow: int
    accessibility_score: int


class RoomSummaryResponse(BaseModel):
    room_id: str
    room_name: str
    metrics: RoomMetricsOut
    composite_score: int = Field(description="0–10 composite of the five metrics.")
    is_completed: bool
    decided_categories: int
    total_categories: int
    completion_rate: float

    @classmethod
    def from_summary(cls, s: RoomSummary) -> "RoomSummaryResponse":
        return cls(
            room_id=s.room_id,
            room_name=s.room_name,
            metrics=RoomMetricsOut.model_validate(s.metrics),
            composite_score=s.composite_score,
            is_completed=s.is_completed,
            decided_categories=s.decided_categories,
            total_categories=s.total_categories,
            completion_rate=s.completion_rate,
        )


class EffortResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_items_processed: int
    total_hours_spent: float
    average_decision_speed: float = Field(description="Items decided per hour spent.")


class DashboardResponse(BaseModel):
    overall_score: int
    room_count: int
    completed_rooms: int
    current_daily_streak: int
    level: LevelResponse
    today_average: Optional[float] = Field(
        default=None,
        description="Average composite score of today's snapshot; null when none exists.",
    )
    rooms: list[RoomSummaryResponse]
    effort: EffortResponse
    active_challenges: list[ChallengeResponse]
