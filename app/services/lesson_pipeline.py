# app/services/lesson_pipeline.py
from __future__ import annotations

import logging
from typing import Iterable

from app.core.config import Settings, get_settings
from app.schemas.lesson import LessonViews, RosterStats
from app.schemas.participant import Roster
from app.schemas.session import LessonScope
from app.services.hourly_attendance import HourlyAttendanceEvaluator
from app.services.lesson_hours import LessonHoursDeriver
from app.services.roster_service import RosterService
from app.services.schedule import ScheduleFormatter
from app.services.session_normalizer import RawEvent, SessionNormalizer

logger = logging.getLogger(__name__)


def compute_roster_stats(roster: Roster) -> RosterStats:
    """
    Head counts for the operator dashboard; the organizer counts as present.
    """
    present = sum(1 for p in roster.participants if p.is_present)
    absent = len(roster.participants) - present
    has_organizer = roster.organizer is not None

    return RosterStats(
        total=len(roster.participants) + (1 if has_organizer else 0),
        present=present + (1 if has_organizer else 0),
        absent=absent,
        has_absences=absent > 0,
    )


def build_lesson_views(
    roster: Roster,
    scope: LessonScope,
    settings: Settings | None = None,
) -> LessonViews:
    """
    Derive every view of a lesson from one roster snapshot.

    Steps
    -----
    1) Derive lesson hours from all participants, organizer included.
    2) Build the hourly grid for each participant and for the organizer.
    3) Build the schedule text from the derived hours and observed leaves.
    4) Count present/absent participants.
    """
    settings = settings or get_settings()
    deriver = LessonHoursDeriver(settings)
    evaluator = HourlyAttendanceEvaluator(settings)
    formatter = ScheduleFormatter(settings)

    everyone = roster.everyone
    lesson_hours = deriver.derive(everyone, scope)

    hourly = tuple(evaluator.build_grid(p, lesson_hours) for p in roster.participants)
    organizer_hourly = (
        evaluator.build_grid(roster.organizer, lesson_hours)
        if roster.organizer is not None
        else None
    )

    return LessonViews(
        scope=scope,
        roster=roster,
        lesson_hours=lesson_hours,
        hourly=hourly,
        organizer_hourly=organizer_hourly,
        schedule_text=formatter.schedule_text(lesson_hours, everyone),
        stats=compute_roster_stats(roster),
    )


def process_events(
    raw_events: Iterable[RawEvent],
    scope: LessonScope,
    settings: Settings | None = None,
) -> LessonViews:
    """
    Full pipeline from raw session records to lesson views.

    Raises EmptyRosterError when a window required by `scope` has no
    participants.
    """
    settings = settings or get_settings()
    timelines = SessionNormalizer.normalize_for_scope(raw_events, scope)
    roster = RosterService(settings).from_timelines(timelines)

    logger.info(
        "Processed %d participant(s) for scope '%s' (organizer: %s)",
        len(roster.participants),
        scope.value,
        roster.organizer.display_name if roster.organizer else "none",
    )
    return build_lesson_views(roster, scope, settings)
