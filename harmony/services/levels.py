"""
Level progression — monotonic points with geometrically growing thresholds.

    total_points += amount
    while total_points >= points_to_next_level:
        current_level += 1
        total_points -= points_to_next_level
        points_to_next_level = floor(points_to_next_level * growth_factor)

After every call 0 <= total_points < points_to_next_level. Points are never
spent; a negative award is rejected and leaves the state untouched.

Point rules
-----------
progress_points(hours)   max(5, floor(hours * 3)), 0 <= hours <= 24
MINDFUL_REVIEW_POINTS    25
achievements             their own point_value, once per achievement name
"""
from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, ROUND_FLOOR
from typing import Optional

from harmony.core.config import settings
from harmony.core.errors import InvalidInputError

logger = logging.getLogger(__name__)


MIN_PROGRESS_POINTS = 5
POINTS_PER_HOUR = 3
MINDFUL_REVIEW_POINTS = 25
# One progress update covers at most a day of work.
MAX_HOURS_PER_UPDATE = 24


@dataclass
class LevelState:
    current_level: int = 1
    total_points: int = 0
    points_to_next_level: int = 100


@dataclass
class LevelUpResult:
    new_level: int
    leveled_up: bool
    levels_gained: int


class AchievementCategory(str, enum.Enum):
    marie_kondo = "marie_kondo"
    lean = "lean"
    agile = "agile"
    feng_shui = "feng_shui"


@dataclass
class Achievement:
    name: str
    description: str
    category: AchievementCategory
    point_value: int
    criteria: str = ""
    unlocked_at: Optional[datetime] = None


def new_level_state() -> LevelState:
    return LevelState(points_to_next_level=settings.LEVEL_START_THRESHOLD)


def _next_threshold(threshold: int) -> int:
    grown = Decimal(threshold) * Decimal(str(settings.LEVEL_GROWTH_FACTOR))
    # Strictly increasing, so the level-up loop always terminates.
    return max(threshold + 1, int(grown.to_integral_value(rounding=ROUND_FLOOR)))


def _check_points(amount) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidInputError("amount", amount, "points must be an integer")
    if amount < 0:
        raise InvalidInputError("amount", amount, "points cannot be negative")


def award_points(level: LevelState, amount: int) -> LevelUpResult:
    _check_points(amount)
    start_level = level.current_level

    level.total_points += amount
    while level.total_points >= level.points_to_next_level:
        level.current_level += 1
        level.total_points -= level.points_to_next_level
        level.points_to_next_level = _next_threshold(level.points_to_next_level)

    gained = level.current_level - start_level
    if gained:
        logger.info(
            "Level up: %d -> %d (+%d points awarded)",
            start_level, level.current_level, amount,
        )
    return LevelUpResult(
        new_level=level.current_level,
        leveled_up=gained > 0,
        levels_gained=gained,
    )


def progress_points(hours: float) -> int:
    """Points for a progress update: 3 per hour, never fewer than 5."""
    if isinstance(hours, bool) or not isinstance(hours, (int, float)):
        raise InvalidInputError("hours", hours, "must be a number")
    if (isinstance(hours, float) and not math.isfinite(hours)) or hours < 0:
        raise InvalidInputError("hours", hours, "must be a non-negative number")
    if hours > MAX_HOURS_PER_UPDATE:
        raise InvalidInputError("hours", hours, f"cannot exceed {MAX_HOURS_PER_UPDATE}")
    return max(MIN_PROGRESS_POINTS, math.floor(hours * POINTS_PER_HOUR))


def unlock_achievement(
    level: LevelState,
    achievements: list[Achievement],
    achievement: Achievement,
    now: Optional[datetime] = None,
) -> Optional[LevelUpResult]:
    """
    Record an achievement and award its points.
    Returns None when an achievement with that name is already unlocked.
    """
    _check_points(achievement.point_value)
    if any(a.name == achievement.name for a in achievements):
        return None
    achievement.unlocked_at = now or datetime.now(tz=timezone.utc)
    achievements.append(achievement)
    return award_points(level, achievement.point_value)
