"""
Seasonal challenges — time-boxed goals shown next to levels and streaks.

add_challenge(challenges, challenge)            -> SeasonalChallenge
update_progress(challenges, challenge_id, n)    -> SeasonalChallenge   (sets, not adds)
complete_challenge(challenges, challenge_id)    -> SeasonalChallenge   (removed)
active_challenges(challenges, today)            -> list

Completing a challenge removes it; rewards are labels for the caller to show,
they award no points here.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from harmony.core.errors import ChallengeNotFoundError, InvalidInputError

logger = logging.getLogger(__name__)


@dataclass
class SeasonalChallenge:
    challenge_id: str
    name: str
    description: str
    start_date: date
    end_date: date
    target_metric: str
    target_value: int
    current_progress: int = 0
    rewards: list[str] = field(default_factory=list)

    @property
    def is_met(self) -> bool:
        return self.current_progress >= self.target_value

    @property
    def progress_ratio(self) -> float:
        return min(1.0, self.current_progress / self.target_value)


def _check_count(field_name: str, value, minimum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(field_name, value, "must be an integer")
    if value < minimum:
        raise InvalidInputError(field_name, value, f"must be at least {minimum}")


def find_challenge(
    challenges: list[SeasonalChallenge], challenge_id: str
) -> Optional[SeasonalChallenge]:
    return next((c for c in challenges if c.challenge_id == challenge_id), None)


def _get(challenges: list[SeasonalChallenge], challenge_id: str) -> SeasonalChallenge:
    challenge = find_challenge(challenges, challenge_id)
    if challenge is None:
        raise ChallengeNotFoundError(challenge_id)
    return challenge


def add_challenge(
    challenges: list[SeasonalChallenge], challenge: SeasonalChallenge
) -> SeasonalChallenge:
    if not challenge.challenge_id or not challenge.challenge_id.strip():
        raise InvalidInputError("challenge_id", challenge.challenge_id, "must not be empty")
    if find_challenge(challenges, challenge.challenge_id) is not None:
        raise InvalidInputError(
            "challenge_id", challenge.challenge_id, "a challenge with this id is already active"
        )
    if challenge.end_date < challenge.start_date:
        raise InvalidInputError("end_date", str(challenge.end_date), "is before start_date")
    _check_count("target_value", challenge.target_value, 1)
    _check_count("current_progress", challenge.current_progress, 0)
    challenges.append(challenge)
    return challenge


def update_progress(
    challenges: list[SeasonalChallenge], challenge_id: str, progress: int
) -> SeasonalChallenge:
    _check_count("progress", progress, 0)
    challenge = _get(challenges, challenge_id)
    challenge.current_progress = progress
    return challenge


def complete_challenge(
    challenges: list[SeasonalChallenge], challenge_id: str
) -> SeasonalChallenge:
    challenge = _get(challenges, challenge_id)
    challenges.remove(challenge)
    logger.info(
        "Challenge %s completed at %d/%d",
        challenge_id, challenge.current_progress, challenge.target_value,
    )
    return challenge


def active_challenges(
    challenges: list[SeasonalChallenge], today: date
) -> list[SeasonalChallenge]:
    return [c for c in challenges if c.start_date <= today <= c.end_date]
