"""
Score history — one dated snapshot of composite room scores per day.

Writes
------
record_snapshot(history, day, scores, today)
  - scores are validated first (ints in [0, 10]); a bad one changes nothing
  - same `day` already present → its scores mapping is REPLACED (no merge)
  - otherwise a new entry is appended (no re-sort)
  - then every entry dated before `today - HISTORY_RETENTION_DAYS` is dropped.
    `today` is the wall-clock date at write time, not the snapshot's date.

Reads
-----
average_score(history, day) -> float | None   (None = no data for that day)
trend(history)              -> list[(date, float)]   oldest first
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Mapping, Optional

from harmony.core.config import settings
from harmony.core.errors import InvalidInputError
from harmony.services.room_score import COMPOSITE_MAX, COMPOSITE_MIN


@dataclass
class ScoreHistoryEntry:
    day: date
    scores: dict[str, int] = field(default_factory=dict)


def _today() -> date:
    return datetime.now(tz=timezone.utc).date()


def retention_cutoff(today: Optional[date] = None) -> date:
    return (today or _today()) - timedelta(days=settings.HISTORY_RETENTION_DAYS)


def validate_scores(scores: Mapping[str, int]) -> None:
    """Every value must be a composite score: an int in [0, 10]."""
    for room_id, score in scores.items():
        if not isinstance(room_id, str) or not room_id:
            raise InvalidInputError("scores", room_id, "room ids must be non-empty strings")
        if isinstance(score, bool) or not isinstance(score, int):
            raise InvalidInputError(f"scores.{room_id}", score, "must be an integer")
        if not COMPOSITE_MIN <= score <= COMPOSITE_MAX:
            raise InvalidInputError(
                f"scores.{room_id}", score,
                f"must be between {COMPOSITE_MIN} and {COMPOSITE_MAX}",
            )


def record_snapshot(
    history: list[ScoreHistoryEntry],
    day: date,
    scores: Mapping[str, int],
    today: Optional[date] = None,
) -> list[ScoreHistoryEntry]:
    """
    Write a snapshot in place and apply retention. Returns `history`.
    Raises InvalidInputError, leaving `history` untouched, on a bad score.
    """
    validate_scores(scores)
    snapshot = dict(scores)
    existing = next((e for e in history if e.day == day), None)
    if existing is not None:
        existing.scores = snapshot
    else:
        history.append(ScoreHistoryEntry(day=day, scores=snapshot))

    cutoff = retention_cutoff(today)
    history[:] = [e for e in history if e.day >= cutoff]
    return history


def find_entry(history: list[ScoreHistoryEntry], day: date) -> Optional[ScoreHistoryEntry]:
    return next((e for e in history if e.day == day), None)


def _mean_one_decimal(values) -> float:
    values = list(values)
    if not values:
        return 0.0
    mean = Decimal(sum(values)) / Decimal(len(values))
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def average_score(history: list[ScoreHistoryEntry], day: date) -> Optional[float]:
    """Mean of that day's scores to one decimal; 0.0 if empty, None if absent."""
    entry = find_entry(history, day)
    if entry is None:
        return None
    return _mean_one_decimal(entry.scores.values())


def trend(history: list[ScoreHistoryEntry]) -> list[tuple[date, float]]:
    return [
        (e.day, _mean_one_decimal(e.scores.values()))
        for e in sorted(history, key=lambda e: e.day)
    ]
