"""
Persisted engine document.

The state store saves `EngineStateDocument.model_dump(mode="json")` and
validates it back on load. Lists keep their order (rooms, achievements,
history), so a save/load round trip restores the context exactly.
"""
from datetime import date, datetime
from typing import Annotated, Optional

from pydantic import BaseModel, Field

from harmony.services.engine import KeepDecision, UsageFrequency
from harmony.services.levels import AchievementCategory
from harmony.services.streaks import ActivityType

DOCUMENT_VERSION = 1


class RoomMetricsDoc(BaseModel):
    clutter_level: int = Field(ge=1, le=10)
    functionality_score: int = Field(ge=1, le=10)
    joy_factor: int = Field(ge=1, le=10)
    energy_flow: int = Field(ge=1, le=10)
    accessibility_score: int = Field(ge=1, le=10)


class ItemCategoryDoc(BaseModel):
    name: str
    item_count: int = Field(ge=0)
    keep_decision: KeepDecision
    joy_rating: int
    frequency: UsageFrequency


class RoomDoc(BaseModel):
    room_id: str
    room_name: str
    metrics: RoomMetricsDoc
    categories: list[ItemCategoryDoc] = Field(default_factory=list)
    last_assessed_at: Optional[datetime] = None


class StreakDoc(BaseModel):
    activity_type: ActivityType
    current_streak: int = Field(ge=0)
    longest_streak: int = Field(ge=0)
    last_activity_at: Optional[datetime] = None


class LevelDoc(BaseModel):
    current_level: int = Field(ge=1)
    total_points: int = Field(ge=0)
    points_to_next_level: int = Field(gt=0)


class AchievementDoc(BaseModel):
    name: str
    description: str
    category: AchievementCategory
    point_value: int = Field(ge=0)
    criteria: str = ""
    unlocked_at: Optional[datetime] = None


class HistoryEntryDoc(BaseModel):
    day: date
    scores: dict[str, Annotated[int, Field(ge=0, le=10)]] = Field(default_factory=dict)


class ChallengeDoc(BaseModel):
    challenge_id: str
    name: str
    description: str = ""
    start_date: date
    end_date: date
    target_metric: str
    target_value: int = Field(ge=1)
    current_progress: int = Field(ge=0)
    rewards: list[str] = Field(default_factory=list)


class EffortDoc(BaseModel):
    total_items_processed: int = Field(ge=0)
    total_hours_spent: float = Field(ge=0)


class EngineStateDocument(BaseModel):
    version: int = DOCUMENT_VERSION
    rooms: list[RoomDoc] = Field(default_factory=list)
    streaks: list[StreakDoc] = Field(default_factory=list)
    level: Optional[LevelDoc] = None
    achievements: list[AchievementDoc] = Field(default_factory=list)
    history: list[HistoryEntryDoc] = Field(default_factory=list)
    challenges: list[ChallengeDoc] = Field(default_factory=list)
    effort: Optional[EffortDoc] = None
