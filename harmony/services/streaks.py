"""
Streak tracker — one consecutive-day counter per activity type.

Transitions
-----------
  record_activity : current += 1, longest = max(longest, current), stamp time
  break_streak    : current = 0, longest untouched, stamp time
  reset_streak    : same transition as break_streak

Invariant: longest_streak >= current_streak >= 0 after every call.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

logger = logging.getLogger(__name__)


class ActivityType(str, enum.Enum):
    daily_organization = "daily_organization"
    room_completion = "room_completion"
    decision_making = "decision_making"


@dataclass
class StreakRecord:
    activity_type: ActivityType
    current_streak: int = 0
    longest_streak: int = 0
    last_activity_at: Optional[datetime] = None


@dataclass
class StreakUpdate:
    """Derived events for the caller to surface."""
    activity_type: ActivityType
    current_streak: int
    longest_streak: int
    streak_broken: bool = False   # a non-zero streak went back to 0
    new_longest: bool = False     # longest_streak grew on this call


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def initial_streaks(now: Optional[datetime] = None) -> dict[ActivityType, StreakRecord]:
    stamp = now or _now()
    return {
        t: StreakRecord(activity_type=t, last_activity_at=stamp)
        for t in ActivityType
    }


def record_activity(streak: StreakRecord, now: Optional[datetime] = None) -> StreakUpdate:
    streak.current_streak += 1
    new_longest = streak.current_streak > streak.longest_streak
    if new_longest:
        streak.longest_streak = streak.current_streak
    streak.last_activity_at = now or _now()
    return StreakUpdate(
        activity_type=streak.activity_type,
        current_streak=streak.current_streak,
        longest_streak=streak.longest_streak,
        new_longest=new_longest,
    )


def break_streak(streak: StreakRecord, now: Optional[datetime] = None) -> StreakUpdate:
    was_running = streak.current_streak > 0
    streak.current_streak = 0
    streak.last_activity_at = now or _now()
    if was_running:
        logger.info(
            "Streak %s broken (longest %d)",
            streak.activity_type.value, streak.longest_streak,
        )
    return StreakUpdate(
        activity_type=streak.activity_type,
        current_streak=0,
        longest_streak=streak.longest_streak,
        streak_broken=was_running,
    )


reset_streak = break_streak
