"""
Rooms router.

PUT  /rooms/{room_id}              — create a room or replace its metrics
GET  /rooms/{room_id}              — room summary with composite score
POST /rooms/{room_id}/progress     — log a progress update (points, streaks, snapshot)
POST /rooms/{room_id}/categories   — add an item category
DELETE /rooms/{room_id}            — remove a room
DELETE /rooms/{room_id}/categories/{name} — remove an item category
GET  /dashboard                    — aggregate over every room
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from harmony.core.config import settings
from harmony.db.base import get_db
from harmony.schemas.common import ErrorResponse
from harmony.schemas.motivation import ActionResponse, ChallengeResponse, LevelResponse
from harmony.schemas.rooms import (
    CategoryRequest,
    DashboardResponse,
    EffortResponse,
    ProgressRequest,
    RoomSummaryResponse,
    RoomUpsertRequest,
)
from harmony.services import engine
from harmony.services.state_store import load_context, save_context

router = APIRouter(tags=["rooms"])


@router.put(
    "/rooms/{room_id}",
    response_model=RoomSummaryResponse,
    summary="Create or reassess a room",
    responses={
        422: {"model": ErrorResponse, "description": "A metric is outside 1–10."},
    },
)
def put_room(room_id: str, payload: RoomUpsertRequest, db: Session = Depends(get_db)):
    """Set all five metrics of a room at once. Does not award points."""
    ctx = load_context(db, settings.ENGINE_STATE_KEY)
    engine.upsert_room(ctx, room_id, payload.room_name, payload.metrics.to_domain())
    save_context(db, settings.ENGINE_STATE_KEY, ctx)
    return RoomSummaryResponse.from_summary(engine.room_summary(ctx, room_id))


@router.get(
    "/rooms/{room_id}",
    response_model=RoomSummaryResponse,
    summary="Room summary",
    responses={
        404: {"model": ErrorResponse, "description": "Unknown room."},
    },
)
def get_room(room_id: str, db: Session = Depends(get_db)):
    ctx = load_context(db, settings.ENGINE_STATE_KEY)
    return RoomSummaryResponse.from_summary(engine.room_summary(ctx, room_id))


@router.post(
    "/rooms/{room_id}/progress",
    response_model=ActionResponse,
    summary="Log a progress update",
    responses={
        404: {"model": ErrorResponse, "description": "Unknown room."},
        422: {"model": ErrorResponse, "description": "Invalid metrics or hours."},
    },
)
def post_progress(room_id: str, payload: ProgressRequest, db: Session = Depends(get_db)):
    """
    Replace the room's metrics and:
    - snapshot every room's composite score for the day,
    - award `max(5, hours * 3)` points,
    - advance the `daily_organization` streak (and `room_completion` when
      the room becomes completed).
    """
    ctx = load_context(db, settings.ENGINE_STATE_KEY)
    result = engine.log_progress(
        ctx, room_id, payload.metrics.to_domain(), payload.hours, day=payload.day
    )
    save_context(db, settings.ENGINE_STATE_KEY, ctx)
    return ActionResponse.from_result(result, ctx.level)


@router.post(
    "/rooms/{room_id}/categories",
    response_model=RoomSummaryResponse,
    summary="Add an item category to a room",
    responses={
        404: {"model": ErrorResponse, "description": "Unknown room."},
        422: {"model": ErrorResponse, "description": "Duplicate or invalid category."},
    },
)
def post_category(room_id: str, payload: CategoryRequest, db: Session = Depends(get_db)):
    ctx = load_context(db, settings.ENGINE_STATE_KEY)
    engine.add_category(ctx, room_id, payload.to_domain())
    save_context(db, settings.ENGINE_STATE_KEY, ctx)
    return RoomSummaryResponse.from_summary(engine.room_summary(ctx, room_id))


@router.delete(
    "/rooms/{room_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a room",
    responses={
        404: {"model": ErrorResponse, "description": "Unknown room."},
    },
)
def delete_room(room_id: str, db: Session = Depends(get_db)):
    """Existing history snapshots keep the room's scores until they age out."""
    ctx = load_context(db, settings.ENGINE_STATE_KEY)
    engine.delete_room(ctx, room_id)
    save_context(db, settings.ENGINE_STATE_KEY, ctx)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/rooms/{room_id}/categories/{name}",
    response_model=RoomSummaryResponse,
    summary="Remove an item category",
    responses={
        404: {"model": ErrorResponse, "description": "Unknown room or category."},
    },
)
def delete_category(room_id: str, name: str, db: Session = Depends(get_db)):
    ctx = load_context(db, settings.ENGINE_STATE_KEY)
    engine.remove_category(ctx, room_id, name)
    save_context(db, settings.ENGINE_STATE_KEY, ctx)
    return RoomSummaryResponse.from_summary(engine.room_summary(ctx, room_id))


@router.get(
    "/dashboard",
    response_model=DashboardResponse,
    summary="Organization dashboard",
)
def get_dashboard(
    day: Optional[date] = Query(
        default=None,
        description="Day for `today_average`. Defaults to today (UTC).",
        examples=["2026-10-19"],
    ),
    db: Session = Depends(get_db),
):
    ctx = load_context(db, settings.ENGINE_STATE_KEY)
    d = engine.dashboard(ctx, today=day)
    return DashboardResponse(
        overall_score=d.overall_score,
        room_count=d.room_count,
        completed_rooms=d.completed_rooms,
        current_daily_streak=d.current_daily_streak,
        level=LevelResponse.model_validate(d.level),
        today_average=d.today_average,
        rooms=[RoomSummaryResponse.from_summary(s) for s in d.rooms],
        effort=EffortResponse.model_validate(d.effort),
        active_challenges=[ChallengeResponse.model_validate(c) for c in d.active_challenges],
    )
