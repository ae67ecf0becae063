"""
Motivation router.

GET  /motivation                                   — level, streaks, achievements, challenges
POST /motivation/points                            — award points
POST /motivation/review                            — complete a mindful review (+25)
POST /motivation/streaks/{activity_type}/record    — count a qualifying day
POST /motivation/streaks/{activity_type}/break     — reset current streak to 0
POST /motivation/achievements                      — unlock an achievement
POST /motivation/challenges                        — start a seasonal challenge
PUT  /motivation/challenges/{challenge_id}/progress — set a challenge's progress
POST /motivation/challenges/{challenge_id}/complete — finish and remove a challenge
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from harmony.core.config import settings
from harmony.db.base import get_db
from harmony.schemas.common import ErrorResponse
from harmony.schemas.motivation import (
    AchievementRequest,
    AchievementResponse,
    ActionResponse,
    AwardPointsRequest,
    ChallengeProgressRequest,
    ChallengeRequest,
    ChallengeResponse,
    LevelResponse,
    MotivationResponse,
    StreakResponse,
)
from harmony.services import engine
from harmony.services.levels import Achievement
from harmony.services.state_store import load_context, save_context
from harmony.services.streaks import ActivityType

router = APIRouter(prefix="/motivation", tags=["motivation"])


@router.get("", response_model=MotivationResponse, summary="Current motivation state")
def get_motivation(db: Session = Depends(get_db)):
    ctx = load_context(db, settings.ENGINE_STATE_KEY)
    return MotivationResponse(
        level=LevelResponse.model_validate(ctx.level),
        streaks=[
            StreakResponse(
                activity_type=s.activity_type.value,
                current_streak=s.current_streak,
                longest_streak=s.longest_streak,
                last_activity_at=s.last_activity_at.isoformat() if s.last_activity_at else None,
            )
            for s in ctx.streaks.values()
        ],
        achievements=[
            AchievementResponse(
                name=a.name,
                description=a.description,
                category=a.category.value,
                point_value=a.point_value,
                unlocked_at=a.unlocked_at.isoformat() if a.unlocked_at else None,
            )
            for a in ctx.achievements
        ],
        challenges=[ChallengeResponse.model_validate(c) for c in ctx.challenges],
    )


@router.post(
    "/points",
    response_model=ActionResponse,
    summary="Award points",
    responses={
        422: {"model": ErrorResponse, "description": "Negative amount (INVALID_INPUT)."},
    },
)
def post_points(payload: AwardPointsRequest, db: Session = Depends(get_db)):
    ctx = load_context(db, settings.ENGINE_STATE_KEY)
    result = engine.award(ctx, payload.amount)
    save_context(db, settings.ENGINE_STATE_KEY, ctx)
    return ActionResponse.from_result(result, ctx.level)


@router.post("/review", response_model=ActionResponse, summary="Complete a mindful review")
def post_review(db: Session = Depends(get_db)):
    ctx = load_context(db, settings.ENGINE_STATE_KEY)
    result = engine.complete_review(ctx)
    save_context(db, settings.ENGINE_STATE_KEY, ctx)
    return ActionResponse.from_result(result, ctx.level)


@router.post(
    "/streaks/{activity_type}/record",
    response_model=ActionResponse,
    summary="Record a qualifying activity",
)
def post_streak_record(activity_type: ActivityType, db: Session = Depends(get_db)):
    ctx = load_context(db, settings.ENGINE_STATE_KEY)
    result = engine.record_streak(ctx, activity_type)
    save_context(db, settings.ENGINE_STATE_KEY, ctx)
    return ActionResponse.from_result(result, ctx.level)


@router.post(
    "/streaks/{activity_type}/break",
    response_model=ActionResponse,
    summary="Break (reset) a streak",
)
def post_streak_break(activity_type: ActivityType, db: Session = Depends(get_db)):
    """The longest streak is kept; only the current count goes back to 0."""
    ctx = load_context(db, settings.ENGINE_STATE_KEY)
    result = engine.break_streak(ctx, activity_type)
    save_context(db, settings.ENGINE_STATE_KEY, ctx)
    return ActionResponse.from_result(result, ctx.level)


@router.post(
    "/achievements",
    response_model=ActionResponse,
    summary="Unlock an achievement",
)
def post_achievement(payload: AchievementRequest, db: Session = Depends(get_db)):
    """Idempotent per achievement name: a repeat unlock awards nothing."""
    ctx = load_context(db, settings.ENGINE_STATE_KEY)
    result = engine.unlock(
        ctx,
        Achievement(
            name=payload.name,
            description=payload.description,
            category=payload.category,
            point_value=payload.point_value,
            criteria=payload.criteria,
        ),
    )
    save_context(db, settings.ENGINE_STATE_KEY, ctx)
    return ActionResponse.from_result(result, ctx.level)


@router.post(
    "/challenges",
    response_model=ChallengeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Start a seasonal challenge",
    responses={
        422: {"model": ErrorResponse, "description": "Duplicate id or end before start (INVALID_INPUT)."},
    },
)
def post_challenge(payload: ChallengeRequest, db: Session = Depends(get_db)):
    ctx = load_context(db, settings.ENGINE_STATE_KEY)
    challenge = engine.add_challenge(ctx, payload.to_domain())
    save_context(db, settings.ENGINE_STATE_KEY, ctx)
    return ChallengeResponse.model_validate(challenge)


@router.put(
    "/challenges/{challenge_id}/progress",
    response_model=ChallengeResponse,
    summary="Set a challenge's progress",
    responses={
        404: {"model": ErrorResponse, "description": "No such active challenge."},
    },
)
def put_challenge_progress(
    challenge_id: str,
    payload: ChallengeProgressRequest,
    db: Session = Depends(get_db),
):
    ctx = load_context(db, settings.ENGINE_STATE_KEY)
    challenge = engine.update_challenge_progress(ctx, challenge_id, payload.progress)
    save_context(db, settings.ENGINE_STATE_KEY, ctx)
    return ChallengeResponse.model_validate(challenge)


@router.post(
    "/challenges/{challenge_id}/complete",
    response_model=ChallengeResponse,
    summary="Complete a seasonal challenge",
    responses={
        404: {"model": ErrorResponse, "description": "No such active challenge."},
    },
)
def post_challenge_complete(challenge_id: str, db: Session = Depends(get_db)):
    """The challenge is removed from the active list and returned as it stood."""
    ctx = load_context(db, settings.ENGINE_STATE_KEY)
    challenge = engine.complete_challenge(ctx, challenge_id)
    save_context(db, settings.ENGINE_STATE_KEY, ctx)
    return ChallengeResponse.model_validate(challenge)
