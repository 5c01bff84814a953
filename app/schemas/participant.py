# app/schemas/participant.py
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from app.schemas.session import SessionInterval, SessionWindow, sort_intervals


def new_participant_id() -> str:
    """Stable synthetic identifier, independent of display name and position."""
    return uuid.uuid4().hex


class AliasRecord(BaseModel):
    """
    Frozen audit entry for a display name that was merged into another
    participant. The summary is rendered once at merge time and never
    recomputed.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., examples=["M. Rossi (phone)"])
    connections_summary: str = Field(
        ...,
        description="Human-readable list of the merged identity's session times.",
        examples=["10:05:00-11:00:00"],
    )


class WindowSessions(BaseModel):
    """
    Session intervals of one participant, bucketed per window.

    Both lists are kept sorted by join time. Overlapping intervals are not
    collapsed.
    """

    model_config = ConfigDict(frozen=True)

    morning: tuple[SessionInterval, ...] = ()
    afternoon: tuple[SessionInterval, ...] = ()

    @field_validator("morning", "afternoon")
    @classmethod
    def _sorted(cls, value: tuple[SessionInterval, ...]) -> tuple[SessionInterval, ...]:
        return sort_intervals(value)

    def for_window(self, window: SessionWindow) -> tuple[SessionInterval, ...]:
        return self.morning if window is SessionWindow.MORNING else self.afternoon

    def first_join(self, window: SessionWindow) -> datetime | None:
        intervals = self.for_window(window)
        return intervals[0].join_time if intervals else None

    def last_leave(self, window: SessionWindow) -> datetime | None:
        """
        Latest leave in the window. With overlapping sessions this is not
        necessarily the leave of the last session joined.
        """
        intervals = self.for_window(window)
        return max(i.leave_time for i in intervals) if intervals else None

    @property
    def has_sessions(self) -> bool:
        return bool(self.morning or self.afternoon)

    def combined(self, other: "WindowSessions") -> "WindowSessions":
        return WindowSessions(
            morning=self.morning + other.morning,
            afternoon=self.afternoon + other.afternoon,
        )


class ParticipantTimeline(BaseModel):
    """
    One distinct identity for the duration of one lesson day.

    Instances are immutable: every engine operation returns a new timeline.
    `total_absence_minutes` and `is_present` are set by the presence
    classifier; the first/last fields are always read from `windows`.
    """

    model_config = ConfigDict(frozen=True)

    participant_id: str = Field(
        default_factory=new_participant_id,
        description="Stable synthetic identifier used by every roster operation.",
        examples=["3f2b9c6e0a8d4f4b9a3e5d7c1b2a4e6f"],
    )
    display_name: str = Field(..., examples=["Maria Rossi"])
    email: str = Field("", examples=["maria.rossi@example.com"])
    is_organizer: bool = False
    windows: WindowSessions = Field(default_factory=WindowSessions)
    total_absence_minutes: int = Field(
        0,
        ge=0,
        description="Cumulative gap minutes; 999 means no measurable attendance data.",
    )
    is_present: bool = False
    is_manually_marked_absent: bool = Field(
        False,
        description="Operator override: always absent regardless of sessions.",
    )
    is_manually_marked_present: bool = Field(
        False,
        description="Operator override: present whenever the participant has sessions.",
    )
    aliases: tuple[AliasRecord, ...] = ()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def morning_first_join(self) -> datetime | None:
        return self.windows.first_join(SessionWindow.MORNING)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def morning_last_leave(self) -> datetime | None:
        return self.windows.last_leave(SessionWindow.MORNING)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def afternoon_first_join(self) -> datetime | None:
        return self.windows.first_join(SessionWindow.AFTERNOON)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def afternoon_last_leave(self) -> datetime | None:
        return self.windows.last_leave(SessionWindow.AFTERNOON)

    @property
    def name_key(self) -> str:
        return self.display_name.casefold()


class Roster(BaseModel):
    """
    Immutable snapshot of the lesson's participants.

    `participants` holds the non-organizer entries in operator order; the
    organizer is kept apart because it never takes a document slot.
    """

    model_config = ConfigDict(frozen=True)

    participants: tuple[ParticipantTimeline, ...] = ()
    organizer: ParticipantTimeline | None = None

    @property
    def everyone(self) -> tuple[ParticipantTimeline, ...]:
        if self.organizer is None:
            return self.participants
        return self.participants + (self.organizer,)

    def index_of(self, participant_id: str) -> int | None:
        for idx, participant in enumerate(self.participants):
            if participant.participant_id == participant_id:
                return idx
        return None

    def get(self, participant_id: str) -> ParticipantTimeline | None:
        idx = self.index_of(participant_id)
        return None if idx is None else self.participants[idx]
