# app/schemas/attendance_requests.py
from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, Field

from app.schemas.participant import Roster
from app.schemas.session import LessonScope


# --------------------------------------------------------------------------
# Raw log processing (POST /attendance/process)
# --------------------------------------------------------------------------

class ProcessEventsRequest(BaseModel):
    """
    Raw session records of one lesson day.

    Records are accepted as loose objects so that malformed ones can be
    skipped by the normalizer instead of rejecting the whole request.
    """

    scope: LessonScope = Field(..., examples=["both"])
    events: list[dict[str, Any]] = Field(
        ...,
        description="Records with name, email, window, join_time, leave_time, is_organizer_hint.",
        examples=[
            [
                {
                    "name": "Maria Rossi",
                    "email": "maria.rossi@example.com",
                    "window": "morning",
                    "join_time": "2025-07-08T09:00:00",
                    "leave_time": "2025-07-08T10:00:00",
                    "is_organizer_hint": False,
                }
            ]
        ],
    )


# --------------------------------------------------------------------------
# Roster snapshot operations (POST /attendance/...)
# --------------------------------------------------------------------------

class RosterRequest(BaseModel):
    """
    Current roster snapshot, as previously returned by the service.
    """

    scope: LessonScope = Field(..., examples=["both"])
    roster: Roster


class ParticipantRequest(RosterRequest):
    participant_id: str = Field(..., examples=["3f2b9c6e0a8d4f4b9a3e5d7c1b2a4e6f"])


class MoveParticipantRequest(ParticipantRequest):
    new_position: int = Field(..., ge=0, description="0-based target position.", examples=[0])


class MergeRequest(RosterRequest):
    target_id: str = Field(..., description="Participant that absorbs the other one.")
    source_id: str = Field(..., description="Participant merged away and kept as an alias.")


class AddParticipantRequest(RosterRequest):
    name: str = Field(..., description="Name of the participant to add.", examples=["Luca Bianchi"])


# --------------------------------------------------------------------------
# Attendance sheet / archive (POST /attendance/sheet, POST /lessons)
# --------------------------------------------------------------------------

class SheetRequest(RosterRequest):
    """
    Roster snapshot plus the lesson metadata printed on the document.
    """

    lesson_date: date | None = Field(
        None,
        description="Lesson date. When omitted, it is read from `source_filename`.",
        examples=["2025-07-08"],
    )
    source_filename: str | None = Field(
        None,
        description="Name of the uploaded log file, e.g. 'Mattina_2025_07_08.csv'.",
        examples=["Mattina_2025_07_08.csv"],
    )
    subject: str = Field("", examples=["Sicurezza sul lavoro"])
    course_id: str = Field("", examples=["FAD-2025-017"])
