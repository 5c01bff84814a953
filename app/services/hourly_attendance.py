# app/services/hourly_attendance.py
from __future__ import annotations

from typing import Sequence

from app.core.config import Settings, get_settings
from app.schemas.lesson import HourAttendance, LessonHourSet, ParticipantHourlyAttendance
from app.schemas.participant import ParticipantTimeline
from app.schemas.session import SessionInterval, SessionWindow
from app.services.intervals import overlap_minutes, union_spans


class HourlyAttendanceEvaluator:
    """
    Decides, hour by hour, whether a participant was there long enough.

    Deriving lesson hours asks "was this hour taught"; this evaluator asks
    "was this person here for enough of it", using HOURLY_DWELL_MINUTES
    (30 by default) against the sessions of the window the hour belongs to.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    def window_for_hour(self, hour: int) -> SessionWindow | None:
        s = self.settings
        if s.MORNING_START_HOUR <= hour <= s.MORNING_END_HOUR:
            return SessionWindow.MORNING
        if s.AFTERNOON_START_HOUR <= hour <= s.AFTERNOON_END_HOUR:
            return SessionWindow.AFTERNOON
        return None

    def intervals_for_hour(
        self, timeline: ParticipantTimeline, hour: int
    ) -> tuple[SessionInterval, ...]:
        window = self.window_for_hour(hour)
        if window is None:
            return ()
        return timeline.windows.for_window(window)

    @staticmethod
    def dwell_minutes(intervals: Sequence[SessionInterval], hour: int) -> float:
        """
        Minutes of presence within the clock hour. Overlapping sessions are
        unioned first so a double connection is not counted twice.
        """
        return sum(overlap_minutes(interval, hour) for interval in union_spans(intervals))

    def evaluate_hour(self, timeline: ParticipantTimeline, hour: int) -> HourAttendance:
        if not timeline.windows.has_sessions:
            return HourAttendance(hour=hour, dwell_minutes=0.0, is_present=False)

        dwell = self.dwell_minutes(self.intervals_for_hour(timeline, hour), hour)
        return HourAttendance(
            hour=hour,
            dwell_minutes=round(dwell, 2),
            is_present=dwell >= self.settings.HOURLY_DWELL_MINUTES,
        )

    def is_present_for_hour(self, timeline: ParticipantTimeline, hour: int) -> bool:
        return self.evaluate_hour(timeline, hour).is_present

    def build_grid(
        self,
        timeline: ParticipantTimeline,
        lesson_hours: LessonHourSet,
    ) -> ParticipantHourlyAttendance:
        """
        Per-hour grid plus the attendance percentage shown to the operator.
        """
        hours = tuple(self.evaluate_hour(timeline, hour) for hour in lesson_hours.hours)
        present_hours = sum(1 for h in hours if h.is_present)
        total = len(hours)

        if total > 0:
            attendance_pct = (present_hours / float(total)) * 100.0
        else:
            attendance_pct = 0.0

        return ParticipantHourlyAttendance(
            participant_id=timeline.participant_id,
            display_name=timeline.display_name,
            hours=hours,
            present_hours=present_hours,
            lesson_hours=total,
            attendance_pct=round(attendance_pct, 2),
        )
