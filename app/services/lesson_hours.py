# app/services/lesson_hours.py
from __future__ import annotations

import logging
import warnings
from typing import Iterable, Set

from app.core.config import Settings, get_settings
from app.core.errors import InsufficientDataWarning
from app.schemas.lesson import LessonHourSet
from app.schemas.participant import ParticipantTimeline
from app.schemas.session import LessonScope, SessionWindow
from app.services.intervals import overlap_minutes

logger = logging.getLogger(__name__)


class LessonHoursDeriver:
    """
    Derives which clock hours were actually taught from collective activity.

    For every session of every participant (organizer included) in the
    lesson scope, each clock hour between the session's join and leave hour,
    restricted to the window's configured range, is a candidate. A candidate
    hour is taught once any single session overlaps it by at least
    HOUR_DERIVATION_MINUTES. The break hour is always removed.

    When nothing qualifies, the static default schedule for the scope is
    returned with `is_default_schedule=True` and an InsufficientDataWarning
    is emitted.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    def window_range(self, window: SessionWindow) -> tuple[int, int]:
        """Inclusive `(start_hour, end_hour)` searched for a window."""
        s = self.settings
        if window is SessionWindow.MORNING:
            return s.MORNING_START_HOUR, s.MORNING_END_HOUR
        return s.AFTERNOON_START_HOUR, s.AFTERNOON_END_HOUR

    def default_hours(self, scope: LessonScope) -> tuple[int, ...]:
        hours: Set[int] = set()
        if scope.includes(SessionWindow.MORNING):
            hours.update(self.settings.DEFAULT_MORNING_HOURS)
        if scope.includes(SessionWindow.AFTERNOON):
            hours.update(self.settings.DEFAULT_AFTERNOON_HOURS)
        hours.discard(self.settings.BREAK_HOUR)
        return tuple(sorted(hours))

    def observed_hours(
        self,
        timelines: Iterable[ParticipantTimeline],
        scope: LessonScope,
    ) -> Set[int]:
        """
        Hours with at least one session overlapping them enough, before the
        break-hour filter.
        """
        threshold = self.settings.HOUR_DERIVATION_MINUTES
        hours: Set[int] = set()

        for timeline in timelines:
            for window in scope.windows:
                range_start, range_end = self.window_range(window)
                for interval in timeline.windows.for_window(window):
                    first = max(range_start, interval.join_time.hour)
                    last = min(range_end, interval.leave_time.hour)
                    if interval.leave_time.date() > interval.join_time.date():
                        # Session crosses midnight: only its join day counts.
                        last = range_end
                    for hour in range(first, last + 1):
                        if hour in hours:
                            continue
                        if overlap_minutes(interval, hour) >= threshold:
                            hours.add(hour)

        return hours

    def derive(
        self,
        timelines: Iterable[ParticipantTimeline],
        scope: LessonScope,
    ) -> LessonHourSet:
        """
        Return the LessonHourSet for the given participants and scope.
        """
        hours = self.observed_hours(timelines, scope)
        hours.discard(self.settings.BREAK_HOUR)

        if hours:
            return LessonHourSet(hours=tuple(sorted(hours)), is_default_schedule=False)

        fallback = self.default_hours(scope)
        message = (
            f"No lesson hour could be derived from activity for scope "
            f"'{scope.value}'; using default schedule {list(fallback)}"
        )
        logger.warning(message)
        warnings.warn(message, InsufficientDataWarning, stacklevel=2)
        return LessonHourSet(hours=fallback, is_default_schedule=True)
