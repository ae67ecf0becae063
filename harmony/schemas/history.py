"""
Score history schemas.

GET  /history              → HistoryResponse
GET  /history/trend        → TrendResponse
POST /history/snapshots    SnapshotRequest → HistoryResponse
"""
from datetime import date
from typing import Annotated, Optional

from pydantic import BaseModel, Field

CompositeScore = Annotated[int, Field(ge=0, le=10)]


class SnapshotRequest(BaseModel):
    day: Optional[date] = Field(
        default=None,
        description="Snapshot day. Defaults to today (UTC).",
        examples=["2026-10-19"],
    )
    scores: Optional[dict[str, CompositeScore]] = Field(
        default=None,
        description="room_id → composite score. Omit to snapshot every room's current score.",
    )


class HistoryEntryResponse(BaseModel):
    day: str
    scores: dict[str, int]
    average_score: float


class HistoryResponse(BaseModel):
    retention_days: int
    entries: list[HistoryEntryResponse] = Field(description="In stored order.")


class TrendPoint(BaseModel):
    day: str
    average_score: float


class TrendResponse(BaseModel):
    points: list[TrendPoint] = Field(description="Oldest first. Days without a snapshot are absent.")
