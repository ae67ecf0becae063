"""
Engine context and user actions.

The whole user state lives in one explicit `EngineContext` that callers load
from the state store, pass to an action and save back. There is no
process-wide store; two contexts never share state.

Actions
-------
upsert_room(ctx, room_id, room_name, metrics)         → Room
delete_room(ctx, room_id)                             → Room (removed)
add_category(ctx, room_id, category)                  → Room
remove_category(ctx, room_id, name)                   → Room
log_progress(ctx, room_id, metrics, hours, ...)       → ActionResult
accept_recommendation(ctx, room_id, name, record)     → ActionResult
complete_review(ctx)                                  → ActionResult
award(ctx, amount)                                    → ActionResult
unlock(ctx, achievement)                              → ActionResult
record_streak(ctx, type) / break_streak(ctx, type)    → ActionResult
add_challenge / update_challenge_progress / complete_challenge
                                                      → SeasonalChallenge

Every action validates first; an InvalidInputError leaves ctx untouched.

Read models
-----------
room_summary(ctx, room_id) → RoomSummary
dashboard(ctx, today)      → Dashboard
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Optional

from harmony.core.errors import CategoryNotFoundError, InvalidInputError, RoomNotFoundError
from harmony.services import challenges as challenge_service
from harmony.services import effort, levels, score_history, streaks
from harmony.services.challenges import SeasonalChallenge
from harmony.services.decision_resolver import DecisionRecord, Recommendation
from harmony.services.effort import EffortStats
from harmony.services.levels import Achievement, LevelState, LevelUpResult
from harmony.services.room_score import (
    RoomMetrics,
    composite_score,
    is_room_completed,
    overall_organization_score,
    validate_metrics,
)
from harmony.services.score_history import ScoreHistoryEntry
from harmony.services.streaks import ActivityType, StreakRecord, StreakUpdate


# ---------------------------------------------------------------------------
# State types
# ---------------------------------------------------------------------------

class KeepDecision(str, enum.Enum):
    keep = "keep"
    donate = "donate"
    discard = "discard"
    undecided = "undecided"


class UsageFrequency(str, enum.Enum):
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"
    yearly = "yearly"
    never = "never"


@dataclass
class ItemCategory:
    name: str
    item_count: int = 1
    keep_decision: KeepDecision = KeepDecision.undecided
    joy_rating: int = 5
    frequency: UsageFrequency = UsageFrequency.monthly


@dataclass
class Room:
    room_id: str
    room_name: str
    metrics: RoomMetrics
    categories: list[ItemCategory] = field(default_factory=list)
    last_assessed_at: Optional[datetime] = None


@dataclass
class EngineContext:
    rooms: dict[str, Room] = field(default_factory=dict)
    streaks: dict[ActivityType, StreakRecord] = field(default_factory=streaks.initial_streaks)
    level: LevelState = field(default_factory=levels.new_level_state)
    achievements: list[Achievement] = field(default_factory=list)
    history: list[ScoreHistoryEntry] = field(default_factory=list)
    challenges: list[SeasonalChallenge] = field(default_factory=list)
    effort: EffortStats = field(default_factory=EffortStats)


@dataclass
class ActionResult:
    """What an action changed, for the caller to surface."""
    level: Optional[LevelUpResult] = None
    points_awarded: int = 0
    streaks: list[StreakUpdate] = field(default_factory=list)
    snapshot_day: Optional[date] = None

    @property
    def leveled_up(self) -> bool:
        return self.level is not None and self.level.leveled_up

    @property
    def streak_broken(self) -> bool:
        return any(s.streak_broken for s in self.streaks)


def new_context() -> EngineContext:
    return EngineContext()


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def _get_room(ctx: EngineContext, room_id: str) -> Room:
    room = ctx.rooms.get(room_id)
    if room is None:
        raise RoomNotFoundError(room_id)
    return room


def current_scores(ctx: EngineContext) -> dict[str, int]:
    return {room_id: composite_score(r.metrics) for room_id, r in ctx.rooms.items()}


# ---------------------------------------------------------------------------
# Rooms
# ---------------------------------------------------------------------------

def upsert_room(
    ctx: EngineContext,
    room_id: str,
    room_name: str,
    metrics: RoomMetrics,
    now: Optional[datetime] = None,
) -> Room:
    if not room_id or not room_id.strip():
        raise InvalidInputError("room_id", room_id, "must not be empty")
    validate_metrics(metrics)
    room = ctx.rooms.get(room_id)
    if room is None:
        room = Room(room_id=room_id, room_name=room_name, metrics=metrics)
        ctx.rooms[room_id] = room
    else:
        room.room_name = room_name
        room.metrics = metrics
    room.last_assessed_at = now or _now()
    return room


def add_category(ctx: EngineContext, room_id: str, category: ItemCategory) -> Room:
    room = _get_room(ctx, room_id)
    if category.item_count < 0:
        raise InvalidInputError("item_count", category.item_count, "cannot be negative")
    if any(c.name == category.name for c in room.categories):
        raise InvalidInputError("name", category.name, "category already exists in this room")
    room.categories.append(category)
    return room


def _get_category(room: Room, name: str) -> ItemCategory:
    category = next((c for c in room.categories if c.name == name), None)
    if category is None:
        raise CategoryNotFoundError(room.room_id, name)
    return category


def remove_category(ctx: EngineContext, room_id: str, name: str) -> Room:
    room = _get_room(ctx, room_id)
    room.categories.remove(_get_category(room, name))
    return room


def delete_room(ctx: EngineContext, room_id: str) -> Room:
    """Past history snapshots keep the room's scores until they age out."""
    _get_room(ctx, room_id)
    return ctx.rooms.pop(room_id)


def log_progress(
    ctx: EngineContext,
    room_id: str,
    metrics: RoomMetrics,
    hours: float,
    day: Optional[date] = None,
    now: Optional[datetime] = None,
) -> ActionResult:
    """
    Replace the room's five metrics, snapshot every room's composite score
    for `day` (default today), award progress points, add the hours to the
    effort totals and advance the streaks.
    Retention is measured from the date of `now`, not from `day`.
    """
    room = _get_room(ctx, room_id)
    validate_metrics(metrics)
    points = levels.progress_points(hours)

    stamp = now or _now()
    day = day or stamp.date()
    was_completed = is_room_completed(room.metrics)

    room.metrics = metrics
    room.last_assessed_at = stamp
    # The day's mapping is replaced wholesale, so it carries every room.
    score_history.record_snapshot(ctx.history, day, current_scores(ctx), today=stamp.date())

    effort.add_hours(ctx.effort, hours)

    result = ActionResult(points_awarded=points, snapshot_day=day)
    result.level = levels.award_points(ctx.level, points)
    result.streaks.append(
        streaks.record_activity(ctx.streaks[ActivityType.daily_organization], stamp)
    )
    if not was_completed and is_room_completed(metrics):
        result.streaks.append(
            streaks.record_activity(ctx.streaks[ActivityType.room_completion], stamp)
        )
    return result


# ---------------------------------------------------------------------------
# Decisions
# ---------------------------------------------------------------------------

def _decision_for(recommendation: Recommendation) -> KeepDecision:
    if recommendation is Recommendation.needs_review:
        return KeepDecision.undecided
    return KeepDecision(recommendation.value)


def accept_recommendation(
    ctx: EngineContext,
    room_id: str,
    category_name: str,
    record: DecisionRecord,
    now: Optional[datetime] = None,
) -> ActionResult:
    """
    A category's items count as processed the first time it gets a
    keep / donate / discard decision.
    """
    category = _get_category(_get_room(ctx, room_id), category_name)

    decision = _decision_for(record.recommendation)
    if category.keep_decision is KeepDecision.undecided and decision is not KeepDecision.undecided:
        effort.add_items(ctx.effort, category.item_count)
    category.keep_decision = decision
    update = streaks.record_activity(ctx.streaks[ActivityType.decision_making], now)
    return ActionResult(streaks=[update])


# ---------------------------------------------------------------------------
# Motivation
# ---------------------------------------------------------------------------

def award(ctx: EngineContext, amount: int) -> ActionResult:
    return ActionResult(level=levels.award_points(ctx.level, amount), points_awarded=amount)


def complete_review(ctx: EngineContext, now: Optional[datetime] = None) -> ActionResult:
    """Finishing a mindful review earns a fixed bonus and counts as a day's work."""
    result = award(ctx, levels.MINDFUL_REVIEW_POINTS)
    result.streaks.append(
        streaks.record_activity(ctx.streaks[ActivityType.daily_organization], now)
    )
    return result


def unlock(
    ctx: EngineContext,
    achievement: Achievement,
    now: Optional[datetime] = None,
) -> ActionResult:
    level_result = levels.unlock_achievement(ctx.level, ctx.achievements, achievement, now)
    if level_result is None:
        return ActionResult()
    return ActionResult(level=level_result, points_awarded=achievement.point_value)


def record_streak(
    ctx: EngineContext,
    activity_type: ActivityType,
    now: Optional[datetime] = None,
) -> ActionResult:
    return ActionResult(streaks=[streaks.record_activity(ctx.streaks[activity_type], now)])


def break_streak(
    ctx: EngineContext,
    activity_type: ActivityType,
    now: Optional[datetime] = None,
) -> ActionResult:
    return ActionResult(streaks=[streaks.break_streak(ctx.streaks[activity_type], now)])


def add_challenge(ctx: EngineContext, challenge: SeasonalChallenge) -> SeasonalChallenge:
    return challenge_service.add_challenge(ctx.challenges, challenge)


def update_challenge_progress(
    ctx: EngineContext, challenge_id: str, progress: int
) -> SeasonalChallenge:
    return challenge_service.update_progress(ctx.challenges, challenge_id, progress)


def complete_challenge(ctx: EngineContext, challenge_id: str) -> SeasonalChallenge:
    return challenge_service.complete_challenge(ctx.challenges, challenge_id)


# ---------------------------------------------------------------------------
# Read models
# ---------------------------------------------------------------------------

@dataclass
class RoomSummary:
    room_id: str
    room_name: str
    metrics: RoomMetrics
    composite_score: int
    is_completed: bool
    decided_categories: int
    total_categories: int

    @property
    def completion_rate(self) -> float:
        if not self.total_categories:
            return 0.0
        return self.decided_categories / self.total_categories


@dataclass
class Dashboard:
    overall_score: int
    room_count: int
    completed_rooms: int
    current_daily_streak: int
    level: LevelState
    rooms: list[RoomSummary]
    today_average: Optional[float]
    effort: EffortStats
    active_challenges: list[SeasonalChallenge]


def room_summary(ctx: EngineContext, room_id: str) -> RoomSummary:
    room = _get_room(ctx, room_id)
    decided = sum(1 for c in room.categories if c.keep_decision is not KeepDecision.undecided)
    return RoomSummary(
        room_id=room.room_id,
        room_name=room.room_name,
        metrics=room.metrics,
        composite_score=composite_score(room.metrics),
        is_completed=is_room_completed(room.metrics),
        decided_categories=decided,
        total_categories=len(room.categories),
    )


def dashboard(ctx: EngineContext, today: Optional[date] = None) -> Dashboard:
    today = today or _now().date()
    summaries = [room_summary(ctx, room_id) for room_id in ctx.rooms]
    return Dashboard(
        overall_score=overall_organization_score(r.metrics for r in ctx.rooms.values()),
        room_count=len(summaries),
        completed_rooms=sum(1 for s in summaries if s.is_completed),
        current_daily_streak=ctx.streaks[ActivityType.daily_organization].current_streak,
        level=ctx.level,
        rooms=summaries,
        today_average=score_history.average_score(ctx.history, today),
        effort=ctx.effort,
        active_challenges=challenge_service.active_challenges(ctx.challenges, today),
    )
