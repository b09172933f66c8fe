"""
Validated settings for the suggestion grid.

The grid (half-hour starts between 08:00 and 18:00 by default) is a
predictable heuristic, so it is configuration rather than a constant.
"""

from typing import Any, List

from pydantic import BaseModel, Field, field_validator, model_validator

from core.config import (
    MAX_SUGGESTED_TIMES, SUGGESTION_DAY_END, SUGGESTION_DAY_START,
    SUGGESTION_SLOT_GRANULARITY_MINUTES,
)
from core.exceptions import FormatError
from shared_types.time_interval import TimeOfDay


class SuggestionGridSettings(BaseModel):
    """Schema for the alternative-time suggestion grid."""
    day_start: str = Field(default="08:00", description="First candidate start time (HH:MM).")
    day_end: str = Field(default="18:00", description="Candidates must start before this time (HH:MM).")
    slot_granularity_minutes: int = Field(default=30, ge=5, le=240, description="Step between candidate start times.")
    max_suggestions: int = Field(default=3, ge=1, le=20, description="Maximum number of suggested start times returned.")

    @field_validator('day_start', 'day_end')
    @classmethod
    def validate_time_format(cls, v: str) -> str:
        try:
            return str(TimeOfDay.parse(v))
        except FormatError as e:
            raise ValueError(e.message) from e

    @model_validator(mode='after')
    def validate_range(self) -> Any:
        if TimeOfDay.parse(self.day_start) >= TimeOfDay.parse(self.day_end):
            raise ValueError("day_start must be before day_end")
        return self

    def candidate_starts(self) -> List[TimeOfDay]:
        """Grid start times in ascending order, within [day_start, day_end)."""
        start = TimeOfDay.parse(self.day_start)
        end = TimeOfDay.parse(self.day_end)
        return [
            TimeOfDay(minutes)
            for minutes in range(start.minutes, end.minutes, self.slot_granularity_minutes)
        ]


def get_suggestion_settings() -> SuggestionGridSettings:
    """Build suggestion settings from environment configuration."""
    return SuggestionGridSettings(
        day_start=SUGGESTION_DAY_START,
        day_end=SUGGESTION_DAY_END,
        slot_granularity_minutes=SUGGESTION_SLOT_GRANULARITY_MINUTES,
        max_suggestions=MAX_SUGGESTED_TIMES,
    )
