"""
Effort analytics: hours spent organizing and items decided.

    average_decision_speed = total_items_processed / total_hours_spent
                             (items per hour, one decimal; 0.0 before any hours)
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from harmony.core.errors import InvalidInputError


@dataclass
class EffortStats:
    total_items_processed: int = 0
    total_hours_spent: float = 0.0

    @property
    def average_decision_speed(self) -> float:
        if self.total_hours_spent <= 0:
            return 0.0
        speed = Decimal(self.total_items_processed) / Decimal(str(self.total_hours_spent))
        return float(speed.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def add_hours(stats: EffortStats, hours: float) -> EffortStats:
    if isinstance(hours, bool) or not isinstance(hours, (int, float)):
        raise InvalidInputError("hours", hours, "must be a number")
    if (isinstance(hours, float) and not math.isfinite(hours)) or hours < 0:
        raise InvalidInputError("hours", hours, "must be a non-negative number")
    try:
        value = float(hours)
    except OverflowError as exc:
        raise InvalidInputError("hours", hours, "is too large") from exc
    stats.total_hours_spent += value
    return stats


def add_items(stats: EffortStats, count: int) -> EffortStats:
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        raise InvalidInputError("count", count, "must be a non-negative integer")
    stats.total_items_processed += count
    return stats
