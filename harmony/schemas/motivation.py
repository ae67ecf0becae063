"""
Motivation schemas — levels, streaks, achievements and action results.

GET  /motivation                              → MotivationResponse
POST /motivation/points                       → ActionResponse
POST /motivation/review                       → ActionResponse
POST /motivation/streaks/{type}/record|break  → ActionResponse
POST /motivation/achievements                 → ActionResponse
POST /motivation/challenges                   → ChallengeResponse
PUT  /motivation/challenges/{id}/progress     → ChallengeResponse
POST /motivation/challenges/{id}/complete     → ChallengeResponse
"""
from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from harmony.services.challenges import SeasonalChallenge
from harmony.services.engine import ActionResult
from harmony.services.levels import AchievementCategory


class LevelResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    current_level: int
    total_points: int = Field(description="Points carried towards the next level.")
    points_to_next_level: int


class StreakResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    activity_type: str
    current_streak: int
    longest_streak: int
    last_activity_at: Optional[str] = None


class StreakUpdateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    activity_type: str
    current_streak: int
    longest_streak: int
    streak_broken: bool
    new_longest: bool


class AchievementResponse(BaseModel):
    name: str
    description: str
    category: str
    point_value: int
    unlocked_at: Optional[str] = None


class ChallengeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    challenge_id: str
    name: str
    description: str
    start_date: date
    end_date: date
    target_metric: str
    target_value: int
    current_progress: int
    rewards: list[str]
    is_met: bool
    progress_ratio: float


class MotivationResponse(BaseModel):
    level: LevelResponse
    streaks: list[StreakResponse]
    achievements: list[AchievementResponse]
    challenges: list[ChallengeResponse]


class ActionResponse(BaseModel):
    """Derived events of a user action plus the resulting level."""
    points_awarded: int = 0
    leveled_up: bool = False
    levels_gained: int = 0
    streak_broken: bool = False
    streaks: list[StreakUpdateResponse] = Field(default_factory=list)
    snapshot_day: Optional[str] = None
    level: LevelResponse

    @classmethod
    def from_result(cls, result: ActionResult, level) -> "ActionResponse":
        return cls(
            points_awarded=result.points_awarded,
            leveled_up=result.leveled_up,
            levels_gained=result.level.levels_gained if result.level else 0,
            streak_broken=result.streak_broken,
            streaks=[
                StreakUpdateResponse(
                    activity_type=s.activity_type.value,
                    current_streak=s.current_streak,
                    longest_streak=s.longest_streak,
                    streak_broken=s.streak_broken,
                    new_longest=s.new_longest,
                )
                for s in result.streaks
            ],
            snapshot_day=str(result.snapshot_day) if result.snapshot_day else None,
            level=LevelResponse.model_validate(level),
        )


class AwardPointsRequest(BaseModel):
    amount: int = Field(description="Points to add. Negative amounts are rejected.")


class AchievementRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: str = ""
    criteria: str = ""
    category: AchievementCategory
    point_value: int = Field(ge=0)


class ChallengeRequest(BaseModel):
    challenge_id: str = Field(min_length=1, max_length=128)
    name: str = Field(min_length=1, max_length=200)
    description: str = ""
    start_date: date
    end_date: date
    target_metric: str = Field(min_length=1, examples=["items_processed"])
    target_value: int = Field(ge=1)
    current_progress: int = Field(default=0, ge=0)
    rewards: list[str] = Field(default_factory=list)

    def to_domain(self) -> SeasonalChallenge:
        return SeasonalChallenge(**self.model_dump())


class ChallengeProgressRequest(BaseModel):
    progress: int = Field(ge=0, description="New absolute progress; replaces the old value.")
