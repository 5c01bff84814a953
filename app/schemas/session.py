# app/schemas/session.py
from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def is_aware(moment: datetime) -> bool:
    """True when `moment` carries a usable UTC offset."""
    return moment.tzinfo is not None and moment.utcoffset() is not None


class SessionWindow(str, Enum):
    """
    One of the two fixed daily session periods.
    """

    MORNING = "morning"
    AFTERNOON = "afternoon"


class LessonScope(str, Enum):
    """
    Which windows a lesson covers.
    """

    MORNING = "morning"
    AFTERNOON = "afternoon"
    BOTH = "both"

    @property
    def windows(self) -> tuple[SessionWindow, ...]:
        if self is LessonScope.MORNING:
            return (SessionWindow.MORNING,)
        if self is LessonScope.AFTERNOON:
            return (SessionWindow.AFTERNOON,)
        return (SessionWindow.MORNING, SessionWindow.AFTERNOON)

    def includes(self, window: SessionWindow) -> bool:
        return window in self.windows


class SessionEvent(BaseModel):
    """
    One raw join/leave record, as handed over by the log parsing adapter.

    The window tag is assigned by the caller (which log file the record came
    from); nothing here guesses it from the timestamps.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(
        ...,
        description="Display name used in the videoconference.",
        examples=["Maria Rossi"],
    )
    email: str = Field(
        "",
        description="Participant email, may be empty.",
        examples=["maria.rossi@example.com"],
    )
    window: SessionWindow = Field(
        ...,
        description="Session window the record belongs to.",
        examples=["morning"],
    )
    join_time: datetime = Field(
        ...,
        description="Absolute timestamp at which the participant joined.",
        examples=["2025-07-08T09:02:37"],
    )
    leave_time: datetime = Field(
        ...,
        description="Absolute timestamp at which the participant left.",
        examples=["2025-07-08T12:58:10"],
    )
    is_organizer_hint: bool = Field(
        False,
        description="True when the log marks this record as coming from the meeting organizer.",
    )

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value

    @field_validator("email", mode="before")
    @classmethod
    def _email_default(cls, value: object) -> object:
        return "" if value is None else value

    @model_validator(mode="after")
    def _leave_after_join(self) -> "SessionEvent":
        if is_aware(self.join_time) != is_aware(self.leave_time):
            raise ValueError("join_time and leave_time must both carry a timezone or neither")
        if self.leave_time < self.join_time:
            raise ValueError("leave_time must not be earlier than join_time")
        return self


class SessionInterval(BaseModel):
    """
    One continuous join-to-leave span of a participant within a window.
    """

    model_config = ConfigDict(frozen=True)

    join_time: datetime = Field(..., examples=["2025-07-08T09:05:00"])
    leave_time: datetime = Field(..., examples=["2025-07-08T09:50:00"])

    @model_validator(mode="after")
    def _leave_after_join(self) -> "SessionInterval":
        if is_aware(self.join_time) != is_aware(self.leave_time):
            raise ValueError("join_time and leave_time must both carry a timezone or neither")
        if self.leave_time < self.join_time:
            raise ValueError("leave_time must not be earlier than join_time")
        return self

    @property
    def duration_minutes(self) -> float:
        return (self.leave_time - self.join_time).total_seconds() / 60.0


def sort_intervals(intervals) -> tuple[SessionInterval, ...]:
    """Return the intervals as a tuple ordered by join time."""
    return tuple(sorted(intervals, key=lambda interval: interval.join_time))
