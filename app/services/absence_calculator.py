# app/services/absence_calculator.py
from __future__ import annotations

import logging
from typing import Sequence

from app.core.config import Settings, get_settings
from app.schemas.participant import WindowSessions
from app.schemas.session import SessionInterval, SessionWindow
from app.services.intervals import round_half_up

logger = logging.getLogger(__name__)


class AbsenceCalculator:
    """
    Computes absence minutes from the gaps between consecutive sessions.

    Rules
    -----
    - Only the gap between one session's leave and the next session's join
      counts; window boundaries are not considered.
    - Gaps up to GAP_TOLERANCE_MINUTES (1.5 by default) are reconnection noise
      and ignored entirely.
    - Longer gaps are summed and the total is rounded once, at the end.
    - Overlapping sessions give a negative gap, which counts as zero.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    def gap_absence_minutes(self, intervals: Sequence[SessionInterval]) -> int:
        """
        Absence minutes for one window's time-sorted sessions.

        Zero or one session always gives 0.
        """
        if len(intervals) < 2:
            return 0

        tolerance = self.settings.GAP_TOLERANCE_MINUTES
        total = 0.0

        for current, following in zip(intervals, intervals[1:]):
            gap_minutes = (following.join_time - current.leave_time).total_seconds() / 60.0
            if gap_minutes < 0:
                logger.debug(
                    "Overlapping sessions %s-%s and %s-%s treated as zero gap",
                    current.join_time,
                    current.leave_time,
                    following.join_time,
                    following.leave_time,
                )
                continue
            if gap_minutes > tolerance:
                total += gap_minutes

        return round_half_up(total)

    def total_absence_minutes(self, windows: WindowSessions) -> int:
        """
        Sum of the gap absence of both windows. An empty window adds 0.

        Lesson scope is applied upstream: SessionNormalizer.normalize_for_scope
        empties the windows a lesson does not cover.
        """
        return sum(
            self.gap_absence_minutes(windows.for_window(window)) for window in SessionWindow
        )
