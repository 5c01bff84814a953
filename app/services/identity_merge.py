# app/services/identity_merge.py
from __future__ import annotations

import logging

from app.core.config import Settings, get_settings
from app.core.errors import InvalidMergeError
from app.schemas.participant import AliasRecord, ParticipantTimeline
from app.services.intervals import format_interval_list
from app.services.presence_classifier import PresenceClassifier

logger = logging.getLogger(__name__)


class IdentityMergeEngine:
    """
    Combines two timelines believed to belong to the same person.

    The target keeps its id, name and email. The source's sessions are moved
    into the target's window lists (re-sorted, never de-duplicated) and the
    source is recorded as an AliasRecord placed before the aliases it was
    already carrying.

    Manual presence overrides of both sides are cleared and presence is
    recomputed from the merged sessions. A hand-entered participant that
    absorbs its log identity is therefore judged by that attendance.

    Merging is irreversible; correcting a wrong merge means reprocessing the
    raw logs.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.classifier = PresenceClassifier(self.settings)

    def alias_for(self, source: ParticipantTimeline) -> AliasRecord:
        """
        Freeze the source identity's session times into an audit record.
        """
        intervals = source.windows.morning + source.windows.afternoon
        summary = format_interval_list(intervals) if intervals else self.settings.NO_CONNECTIONS_TEXT
        return AliasRecord(name=source.display_name, connections_summary=summary)

    def merge(
        self,
        target: ParticipantTimeline,
        source: ParticipantTimeline,
    ) -> ParticipantTimeline:
        """
        Return a new timeline with `source` absorbed into `target`.

        Raises InvalidMergeError when both sides are the same identity.
        """
        if target.participant_id == source.participant_id:
            raise InvalidMergeError(
                f"Cannot merge participant '{target.display_name}' into itself."
            )

        merged = target.model_copy(
            update={
                "windows": target.windows.combined(source.windows),
                "aliases": target.aliases + (self.alias_for(source),) + source.aliases,
                "is_manually_marked_absent": False,
                "is_manually_marked_present": False,
            }
        )
        merged = self.classifier.classify(merged)

        logger.info(
            "Merged '%s' into '%s' (absence=%d, present=%s)",
            source.display_name,
            target.display_name,
            merged.total_absence_minutes,
            merged.is_present,
        )
        return merged
