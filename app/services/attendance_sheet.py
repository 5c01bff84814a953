# app/services/attendance_sheet.py
from __future__ import annotations

from datetime import date
from typing import List

from app.core.config import Settings, get_settings
from app.schemas.attendance_sheet import AttendanceSheet, AttendanceSlot
from app.schemas.lesson import LessonViews
from app.schemas.participant import ParticipantTimeline
from app.schemas.session import LessonScope, SessionWindow
from app.services.intervals import format_clock, format_interval_list
from app.services.lesson_dates import document_filename


def connections_summary(
    participant: ParticipantTimeline,
    scope: LessonScope,
    settings: Settings | None = None,
) -> str:
    """
    Human-readable connection log of a participant and its merged aliases.

    "<name>: <morning sessions> | <afternoon sessions> || <alias>: <sessions>"
    """
    settings = settings or get_settings()
    sections: List[str] = []

    own = [
        format_interval_list(participant.windows.for_window(window))
        for window in scope.windows
        if participant.windows.for_window(window)
    ]
    if own:
        sections.append(f"{participant.display_name}: {' | '.join(own)}")

    for alias in participant.aliases:
        sections.append(f"{alias.name}: {alias.connections_summary}")

    return " || ".join(sections) if sections else settings.NO_CONNECTIONS_TEXT


def build_slot(
    participant: ParticipantTimeline,
    scope: LessonScope,
    settings: Settings | None = None,
) -> AttendanceSlot:
    """
    Document row for one participant.

    Absent participants get the absence marker in every in-scope window
    field; present ones get first-in/last-out per in-scope window.
    """
    settings = settings or get_settings()
    fields = {}

    for window in scope.windows:
        prefix = "morning" if window is SessionWindow.MORNING else "afternoon"
        if not participant.is_present:
            fields[f"{prefix}_in"] = settings.ABSENT_MARKER
            fields[f"{prefix}_out"] = settings.ABSENT_MARKER
            continue

        first_join = participant.windows.first_join(window)
        last_leave = participant.windows.last_leave(window)
        fields[f"{prefix}_in"] = format_clock(first_join) if first_join else ""
        fields[f"{prefix}_out"] = format_clock(last_leave) if last_leave else ""

    return AttendanceSlot(
        name=participant.display_name,
        presence=settings.PRESENT_MARKER if participant.is_present else settings.ABSENT_MARKER,
        connections=connections_summary(participant, scope, settings),
        **fields,
    )


def build_attendance_sheet(
    views: LessonViews,
    lesson_date: date,
    subject: str = "",
    course_id: str = "",
    settings: Settings | None = None,
) -> AttendanceSheet:
    """
    Assemble the data handed to the document renderer.

    Only the first ROSTER_SLOT_CAP non-organizer participants, in roster
    order, get a slot; the engine itself works on any number of them.
    """
    settings = settings or get_settings()
    capped = views.roster.participants[: settings.ROSTER_SLOT_CAP]

    return AttendanceSheet(
        lesson_date=lesson_date,
        subject=subject,
        course_id=course_id,
        lesson_type=views.scope,
        schedule_text=views.schedule_text,
        lesson_hours=views.lesson_hours.hours,
        used_default_schedule=views.lesson_hours.is_default_schedule,
        slots=tuple(build_slot(p, views.scope, settings) for p in capped),
        document_filename=document_filename(lesson_date, course_id),
    )
