"""
State store: EngineContext <-> JSON document <-> `engine_state` row.

Public API
----------
to_document(ctx)               -> dict            (JSON-safe)
from_document(doc)             -> EngineContext
load_context(db, key)          -> EngineContext   (fresh context if absent)
save_context(db, key, ctx)     -> EngineStateRecord   (upsert + commit)

Single writer: the engine assumes one session per key, so there is no
locking beyond the unique key.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Mapping

from sqlalchemy.orm import Session

from harmony.models.engine_state import EngineStateRecord
from harmony.schemas.engine_state import (
    AchievementDoc,
    ChallengeDoc,
    EffortDoc,
    EngineStateDocument,
    HistoryEntryDoc,
    ItemCategoryDoc,
    LevelDoc,
    RoomDoc,
    RoomMetricsDoc,
    StreakDoc,
)
from harmony.services import streaks as streak_service
from harmony.services.challenges import SeasonalChallenge
from harmony.services.effort import EffortStats
from harmony.services.engine import EngineContext, ItemCategory, Room, new_context
from harmony.services.levels import Achievement, LevelState
from harmony.services.room_score import RoomMetrics
from harmony.services.score_history import ScoreHistoryEntry
from harmony.services.streaks import StreakRecord

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Document codec
# ---------------------------------------------------------------------------

def to_document(ctx: EngineContext) -> dict[str, Any]:
    doc = EngineStateDocument(
        rooms=[
            RoomDoc(
                room_id=r.room_id,
                room_name=r.room_name,
                metrics=RoomMetricsDoc(**vars(r.metrics)),
                categories=[ItemCategoryDoc(**vars(c)) for c in r.categories],
                last_assessed_at=r.last_assessed_at,
            )
            for r in ctx.rooms.values()
        ],
        streaks=[StreakDoc(**vars(s)) for s in ctx.streaks.values()],
        level=LevelDoc(**vars(ctx.level)),
        achievements=[AchievementDoc(**vars(a)) for a in ctx.achievements],
        history=[HistoryEntryDoc(day=e.day, scores=e.scores) for e in ctx.history],
        challenges=[ChallengeDoc(**vars(c)) for c in ctx.challenges],
        effort=EffortDoc(**vars(ctx.effort)),
    )
    return doc.model_dump(mode="json")


def from_document(raw: Mapping[str, Any]) -> EngineContext:
    doc = EngineStateDocument.model_validate(raw)
    ctx = new_context()

    for r in doc.rooms:
        ctx.rooms[r.room_id] = Room(
            room_id=r.room_id,
            room_name=r.room_name,
            metrics=RoomMetrics(**r.metrics.model_dump()),
            categories=[ItemCategory(**c.model_dump()) for c in r.categories],
            last_assessed_at=r.last_assessed_at,
        )

    # Activity types missing from an older document keep their fresh record.
    for s in doc.streaks:
        ctx.streaks[s.activity_type] = StreakRecord(**s.model_dump())
    ctx.streaks = {t: ctx.streaks[t] for t in streak_service.ActivityType}

    if doc.level is not None:
        ctx.level = LevelState(**doc.level.model_dump())
    ctx.achievements = [Achievement(**a.model_dump()) for a in doc.achievements]
    ctx.history = [ScoreHistoryEntry(day=e.day, scores=dict(e.scores)) for e in doc.history]
    ctx.challenges = [SeasonalChallenge(**c.model_dump()) for c in doc.challenges]
    if doc.effort is not None:
        ctx.effort = EffortStats(**doc.effort.model_dump())
    return ctx


# ---------------------------------------------------------------------------
# Key-value persistence
# ---------------------------------------------------------------------------

def _get_record(db: Session, key: str) -> EngineStateRecord | None:
    return db.query(EngineStateRecord).filter(EngineStateRecord.key == key).first()


def load_context(db: Session, key: str) -> EngineContext:
    record = _get_record(db, key)
    if record is None:
        logger.info("No engine state for key %r, starting fresh", key)
        return new_context()
    return from_document(json.loads(record.document))


def save_context(db: Session, key: str, ctx: EngineContext) -> EngineStateRecord:
    payload = json.dumps(to_document(ctx))
    record = _get_record(db, key)
    if record is None:
        record = EngineStateRecord(key=key, document=payload)
        db.add(record)
    else:
        record.document = payload
    db.commit()
    db.refresh(record)
    return record
