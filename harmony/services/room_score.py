"""
Room score calculator — the single composite-score formula.

Composite score
---------------
    round(((11 - clutter_level) + functionality_score + joy_factor
           + energy_flow + accessibility_score) / 5)

Clutter is inverted before averaging: a tidier room contributes more.
Every caller (room summary, dashboard, history snapshots) goes through
`composite_score` so the three views can never disagree.

Public API
----------
composite_score(metrics)              -> int    (0–10, pure, no validation)
validate_metrics(metrics)             -> None   (raises InvalidInputError)
overall_organization_score(rooms)     -> int    (dashboard aggregate)
is_room_completed(metrics)            -> bool
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from harmony.core.errors import InvalidInputError


METRIC_MIN = 1
METRIC_MAX = 10

COMPOSITE_MIN = 0
COMPOSITE_MAX = 10

# A room counts as "completed" on the dashboard at this tidiness level.
_COMPLETED_MAX_CLUTTER = 3
_COMPLETED_MIN_FUNCTIONALITY = 8


@dataclass(frozen=True)
class RoomMetrics:
    """Five slider values in [1, 10]. Always replaced as a whole."""
    clutter_level: int
    functionality_score: int
    joy_factor: int
    energy_flow: int
    accessibility_score: int


def _round_half_up(value: Decimal) -> int:
    # Half-up, not Python's banker's rounding: 7.5 -> 8.
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def composite_score(metrics: RoomMetrics) -> int:
    total = (
        (11 - metrics.clutter_level)
        + metrics.functionality_score
        + metrics.joy_factor
        + metrics.energy_flow
        + metrics.accessibility_score
    )
    return _round_half_up(Decimal(total) / Decimal(5))


def validate_metrics(metrics: RoomMetrics) -> None:
    """Reject any field that is not an int in [1, 10]."""
    for f in fields(metrics):
        value = getattr(metrics, f.name)
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidInputError(f.name, value, "must be an integer")
        if not METRIC_MIN <= value <= METRIC_MAX:
            raise InvalidInputError(
                f.name, value, f"must be between {METRIC_MIN} and {METRIC_MAX}"
            )


def overall_organization_score(metrics: Iterable[RoomMetrics]) -> int:
    """Rounded mean of the rooms' composite scores; 0 with no rooms."""
    scores = [composite_score(m) for m in metrics]
    if not scores:
        return 0
    return _round_half_up(Decimal(sum(scores)) / Decimal(len(scores)))


def is_room_completed(metrics: RoomMetrics) -> bool:
    return (
        metrics.clutter_level <= _COMPLETED_MAX_CLUTTER
        and metrics.functionality_score >= _COMPLETED_MIN_FUNCTIONALITY
    )
