"""HealthData: everything one user has logged, as a single document."""
from typing import List

from pydantic import BaseModel, Field

from healthtrack.models.entries import SleepEntryRead, WaterEntryRead, WeightEntryRead
from healthtrack.models.settings import UserSettingsRead


class HealthData(BaseModel):
    """The four collections for one user, as mirrored by the client-side stores."""

    user_id: int
    weights: List[WeightEntryRead] = Field(default_factory=list)
    water_intake: List[WaterEntryRead] = Field(default_factory=list)
    sleep_entries: List[SleepEntryRead] = Field(default_factory=list)
    settings: UserSettingsRead

    @classmethod
    def empty(cls, user_id: int) -> "HealthData":
        return cls(user_id=user_id, settings=UserSettingsRead(user_id=user_id))
