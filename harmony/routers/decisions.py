"""
Decisions router.

POST /decisions/resolve                            — normalize an advisor payload
POST /decisions/score                              — score criteria locally
POST /rooms/{room_id}/categories/{name}/decision   — accept a recommendation

`/decisions/resolve` always answers 200: malformed advisor output comes back
as the fallback record (confidence 30), never as an error.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from harmony.core.config import settings
from harmony.db.base import get_db
from harmony.schemas.common import ErrorResponse
from harmony.schemas.decisions import DecisionResponse, ResolveRequest, ScoreRequest
from harmony.schemas.motivation import ActionResponse
from harmony.services import engine
from harmony.services.decision_resolver import resolve
from harmony.services.decision_scoring import local_record
from harmony.services.state_store import load_context, save_context

router = APIRouter(tags=["decisions"])


@router.post(
    "/decisions/resolve",
    response_model=DecisionResponse,
    summary="Resolve an advisor payload into a decision record",
)
def post_resolve(payload: ResolveRequest):
    return DecisionResponse.from_record(resolve(payload.payload, payload.fallback_hint))


@router.post(
    "/decisions/score",
    response_model=DecisionResponse,
    summary="Score a decision locally with the four methodology weights",
    responses={
        422: {"model": ErrorResponse, "description": "Criteria document has the wrong shape."},
    },
)
def post_score(payload: ScoreRequest):
    """Marie Kondo 25%, Toyota 5S 30%, Lean Six Sigma 25%, Eastern philosophy 20%."""
    return DecisionResponse.from_record(local_record(payload.criteria))


@router.post(
    "/rooms/{room_id}/categories/{name}/decision",
    response_model=ActionResponse,
    summary="Accept a recommendation for an item category",
    responses={
        404: {"model": ErrorResponse, "description": "Unknown room or category."},
    },
)
def post_accept(
    room_id: str,
    name: str,
    payload: ResolveRequest,
    db: Session = Depends(get_db),
):
    """
    Resolve the payload (fallback on bad input), apply its recommendation to
    the category and advance the `decision_making` streak. A `needs_review`
    recommendation leaves the category undecided.
    """
    record = resolve(payload.payload, payload.fallback_hint)
    ctx = load_context(db, settings.ENGINE_STATE_KEY)
    result = engine.accept_recommendation(ctx, room_id, name, record)
    save_context(db, settings.ENGINE_STATE_KEY, ctx)
    return ActionResponse.from_result(result, ctx.level)
