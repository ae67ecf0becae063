"""
Score history router.

GET  /history              — stored snapshots (90-day window)
GET  /history/trend        — daily average composite score, oldest first
POST /history/snapshots    — write a snapshot for a day (replaces that day)
"""
from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from harmony.core.config import settings
from harmony.db.base import get_db
from harmony.schemas.history import (
    HistoryEntryResponse,
    HistoryResponse,
    SnapshotRequest,
    TrendPoint,
    TrendResponse,
)
from harmony.services import score_history
from harmony.services.engine import EngineContext, current_scores
from harmony.services.state_store import load_context, save_context

router = APIRouter(prefix="/history", tags=["history"])


def _history_response(ctx: EngineContext) -> HistoryResponse:
    return HistoryResponse(
        retention_days=settings.HISTORY_RETENTION_DAYS,
        entries=[
            HistoryEntryResponse(
                day=str(e.day),
                scores=e.scores,
                average_score=score_history.average_score(ctx.history, e.day),
            )
            for e in ctx.history
        ],
    )


@router.get("", response_model=HistoryResponse, summary="Room score history")
def get_history(db: Session = Depends(get_db)):
    ctx = load_context(db, settings.ENGINE_STATE_KEY)
    return _history_response(ctx)


@router.get("/trend", response_model=TrendResponse, summary="Average score trend")
def get_trend(db: Session = Depends(get_db)):
    ctx = load_context(db, settings.ENGINE_STATE_KEY)
    return TrendResponse(
        points=[
            TrendPoint(day=str(day), average_score=avg)
            for day, avg in score_history.trend(ctx.history)
        ]
    )


@router.post(
    "/snapshots",
    response_model=HistoryResponse,
    summary="Record a score snapshot",
)
def post_snapshot(payload: SnapshotRequest, db: Session = Depends(get_db)):
    """
    A second snapshot on the same day replaces that day's scores entirely.
    Entries older than the retention window (relative to the real current
    date) are dropped on every write.
    """
    ctx = load_context(db, settings.ENGINE_STATE_KEY)
    day = payload.day or datetime.now(tz=timezone.utc).date()
    scores = payload.scores if payload.scores is not None else current_scores(ctx)
    score_history.record_snapshot(ctx.history, day, scores)
    save_context(db, settings.ENGINE_STATE_KEY, ctx)
    return _history_response(ctx)
