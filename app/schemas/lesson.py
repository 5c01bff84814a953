# app/schemas/lesson.py
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.participant import Roster
from app.schemas.session import LessonScope


class LessonHourSet(BaseModel):
    """
    Ordered set of clock hours judged to have actually been taught.
    """

    model_config = ConfigDict(frozen=True)

    hours: tuple[int, ...] = Field(
        ...,
        description="Strictly increasing clock hours (0-23).",
        examples=[[9, 10, 11, 12, 14, 15, 16, 17]],
    )
    is_default_schedule: bool = Field(
        False,
        description=(
            "True when no hour could be derived from activity and the static "
            "default schedule was used instead."
        ),
    )

    @field_validator("hours")
    @classmethod
    def _strictly_increasing(cls, value: tuple[int, ...]) -> tuple[int, ...]:
        for hour in value:
            if not 0 <= hour <= 23:
                raise ValueError(f"hour {hour} is outside 0-23")
        if any(a >= b for a, b in zip(value, value[1:])):
            raise ValueError("hours must be strictly increasing")
        return value

    def __contains__(self, hour: object) -> bool:
        return hour in self.hours

    def __len__(self) -> int:
        return len(self.hours)


class HourAttendance(BaseModel):
    """
    Presence of one participant for one derived lesson hour.
    """

    model_config = ConfigDict(frozen=True)

    hour: int = Field(..., examples=[10])
    dwell_minutes: float = Field(
        ...,
        description="Minutes of presence accumulated within the clock hour.",
        examples=[42.5],
    )
    is_present: bool = Field(..., examples=[True])


class ParticipantHourlyAttendance(BaseModel):
    """
    Per-hour grid for one participant.
    """

    model_config = ConfigDict(frozen=True)

    participant_id: str
    display_name: str
    hours: tuple[HourAttendance, ...]
    present_hours: int = Field(..., examples=[3])
    lesson_hours: int = Field(..., examples=[4])
    attendance_pct: float = Field(
        ...,
        description="present_hours / lesson_hours * 100, 0.0 when there are no lesson hours.",
        examples=[75.0],
    )


class RosterStats(BaseModel):
    """
    Head counts shown to the operator. The organizer counts as present.
    """

    model_config = ConfigDict(frozen=True)

    total: int = Field(..., examples=[6])
    present: int = Field(..., examples=[5])
    absent: int = Field(..., examples=[1])
    has_absences: bool = Field(..., examples=[True])


class LessonViews(BaseModel):
    """
    Everything derived from one roster snapshot and lesson scope.

    Recomputed from scratch after every roster change, never patched.
    """

    model_config = ConfigDict(frozen=True)

    scope: LessonScope
    roster: Roster
    lesson_hours: LessonHourSet
    hourly: tuple[ParticipantHourlyAttendance, ...] = Field(
        ...,
        description="Hourly grids for the non-organizer participants, in roster order.",
    )
    organizer_hourly: ParticipantHourlyAttendance | None = None
    schedule_text: str = Field(..., examples=["09:00 - 12:00 / 14:00 - 17:00"])
    stats: RosterStats
