# app/services/schedule.py
from __future__ import annotations

from datetime import datetime
from typing import Iterable, List

from app.core.config import Settings, get_settings
from app.schemas.lesson import LessonHourSet
from app.schemas.participant import ParticipantTimeline
from app.schemas.session import SessionWindow
from app.services.intervals import round_to_nearest_hour


class ScheduleFormatter:
    """
    Builds the schedule string printed on the attendance document,
    e.g. "09:00 - 12:00 / 14:00 - 17:00".

    Rules
    -----
    - A window appears only if some derived lesson hour falls in its range.
    - Start = earliest derived lesson hour in the window.
    - End   = latest observed leave in the window (organizer included),
              rounded to the nearest hour, never below the window's first
              hour and pulled back one hour if it lands on the break hour.
    - Without any observed leave the window's configured end hour is used.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    def _range(self, window: SessionWindow) -> tuple[int, int]:
        s = self.settings
        if window is SessionWindow.MORNING:
            return s.MORNING_START_HOUR, s.MORNING_END_HOUR
        return s.AFTERNOON_START_HOUR, s.AFTERNOON_END_HOUR

    def session_end_hour(
        self,
        timelines: Iterable[ParticipantTimeline],
        window: SessionWindow,
    ) -> int:
        floor, configured_end = self._range(window)
        leaves: List[datetime] = [
            leave
            for leave in (t.windows.last_leave(window) for t in timelines)
            if leave is not None
        ]
        if not leaves:
            return configured_end

        end_hour = round_to_nearest_hour(max(leaves))
        if end_hour == self.settings.BREAK_HOUR:
            end_hour -= 1
        return max(end_hour, floor)

    def schedule_text(
        self,
        lesson_hours: LessonHourSet,
        timelines: Iterable[ParticipantTimeline],
    ) -> str:
        timelines = list(timelines)
        parts: List[str] = []

        for window in SessionWindow:
            start_range, end_range = self._range(window)
            hours = [h for h in lesson_hours.hours if start_range <= h <= end_range]
            if not hours:
                continue
            start = min(hours)
            end = self.session_end_hour(timelines, window)
            parts.append(f"{start:02d}:00 - {end:02d}:00")

        return " / ".join(parts)
