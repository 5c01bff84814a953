# app/services/presence_classifier.py
from __future__ import annotations

from app.core.config import Settings, get_settings
from app.schemas.participant import ParticipantTimeline
from app.services.absence_calculator import AbsenceCalculator


class PresenceClassifier:
    """
    Maps a participant's absence minutes and manual flags to the final
    presence decision.

    Rules (first match wins)
    ------------------------
    1) Manually marked absent            => absent, absence = sentinel
    2) No sessions in either window      => absent, absence = sentinel
    3) Manually marked present           => present, absence = 0
    4) Else                              => present iff absence <= tolerance
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.calculator = AbsenceCalculator(self.settings)

    def decide(
        self,
        total_absence_minutes: int,
        has_sessions: bool,
        manually_absent: bool = False,
        manually_present: bool = False,
    ) -> tuple[int, bool]:
        """
        Return `(total_absence_minutes, is_present)` after applying the rules.
        """
        sentinel = self.settings.ABSENCE_SENTINEL_MINUTES

        if manually_absent:
            return sentinel, False

        if not has_sessions:
            return sentinel, False

        if manually_present:
            return 0, True

        return (
            total_absence_minutes,
            total_absence_minutes <= self.settings.ABSENCE_TOLERANCE_MINUTES,
        )

    def classify(self, timeline: ParticipantTimeline) -> ParticipantTimeline:
        """
        Recompute absence from the timeline's sessions and reclassify it.
        """
        total = self.calculator.total_absence_minutes(timeline.windows)
        total, is_present = self.decide(
            total,
            has_sessions=timeline.windows.has_sessions,
            manually_absent=timeline.is_manually_marked_absent,
            manually_present=timeline.is_manually_marked_present,
        )
        return timeline.model_copy(
            update={"total_absence_minutes": total, "is_present": is_present}
        )

    def toggle(self, timeline: ParticipantTimeline) -> ParticipantTimeline:
        """
        Operator override in the opposite direction of the current decision.

        Toggling to present records absence 0, toggling to absent records the
        sentinel; both set the matching manual flag so later recomputation
        keeps the operator's choice until a merge reclassifies the entry.
        """
        if timeline.is_present:
            return timeline.model_copy(
                update={
                    "is_present": False,
                    "total_absence_minutes": self.settings.ABSENCE_SENTINEL_MINUTES,
                    "is_manually_marked_absent": True,
                    "is_manually_marked_present": False,
                }
            )

        return timeline.model_copy(
            update={
                "is_present": True,
                "total_absence_minutes": 0,
                "is_manually_marked_absent": False,
                "is_manually_marked_present": True,
            }
        )
