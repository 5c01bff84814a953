# app/services/roster_service.py
from __future__ import annotations

import logging
from typing import Iterable, Mapping

from app.core.config import Settings, get_settings
from app.core.errors import (
    InvalidMergeError,
    InvalidRosterOperationError,
    ParticipantNotFoundError,
)
from app.schemas.participant import ParticipantTimeline, Roster
from app.services.identity_merge import IdentityMergeEngine
from app.services.presence_classifier import PresenceClassifier

logger = logging.getLogger(__name__)


class RosterService:
    """
    Copy-on-write operations over a Roster snapshot.

    Every operation addresses participants by `participant_id` and returns a
    new Roster; the snapshot passed in is never modified, so a caller can
    drop an in-flight result simply by discarding the reference.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()
        self.classifier = PresenceClassifier(self.settings)
        self.merger = IdentityMergeEngine(self.settings)

    def from_timelines(
        self,
        timelines: Mapping[str, ParticipantTimeline] | Iterable[ParticipantTimeline],
    ) -> Roster:
        """
        Build the initial roster from normalized timelines.

        Every timeline is classified, the organizer is split out, and the
        remaining participants are ordered by case-folded display name.
        """
        values = timelines.values() if isinstance(timelines, Mapping) else timelines
        organizer: ParticipantTimeline | None = None
        participants: list[ParticipantTimeline] = []

        for timeline in values:
            classified = self.classifier.classify(timeline)
            if classified.is_organizer and organizer is None:
                organizer = classified
            else:
                participants.append(classified)

        participants.sort(key=lambda p: p.name_key)
        return Roster(participants=tuple(participants), organizer=organizer)

    def _require(self, roster: Roster, participant_id: str) -> int:
        idx = roster.index_of(participant_id)
        if idx is None:
            raise ParticipantNotFoundError(participant_id)
        return idx

    @staticmethod
    def _replace(roster: Roster, participants: list[ParticipantTimeline]) -> Roster:
        return roster.model_copy(update={"participants": tuple(participants)})

    def add_manual_participant(self, roster: Roster, name: str) -> Roster:
        """
        Append an operator-entered participant that never appears in the logs.

        It has no sessions and is marked absent; it can be reordered, toggled
        and merged like any log-derived entry.
        """
        name = (name or "").strip()
        if not name:
            raise InvalidRosterOperationError("Participant name must not be blank.")

        manual = ParticipantTimeline(
            display_name=name,
            email="",
            total_absence_minutes=self.settings.ABSENCE_SENTINEL_MINUTES,
            is_present=False,
            is_manually_marked_absent=True,
        )
        logger.info("Added manual participant '%s'", name)
        return self._replace(roster, list(roster.participants) + [manual])

    def toggle_presence(self, roster: Roster, participant_id: str) -> Roster:
        idx = self._require(roster, participant_id)
        participants = list(roster.participants)
        participants[idx] = self.classifier.toggle(participants[idx])
        logger.info(
            "Toggled presence of '%s' to %s",
            participants[idx].display_name,
            "present" if participants[idx].is_present else "absent",
        )
        return self._replace(roster, participants)

    def remove(self, roster: Roster, participant_id: str) -> Roster:
        idx = self._require(roster, participant_id)
        participants = list(roster.participants)
        removed = participants.pop(idx)
        logger.info("Removed participant '%s'", removed.display_name)
        return self._replace(roster, participants)

    def move(self, roster: Roster, participant_id: str, new_position: int) -> Roster:
        """
        Move a participant to `new_position` (0-based) in the roster order.
        """
        idx = self._require(roster, participant_id)
        if not 0 <= new_position < len(roster.participants):
            raise InvalidRosterOperationError(
                f"Position {new_position} is outside the roster (0-{len(roster.participants) - 1})."
            )
        participants = list(roster.participants)
        moved = participants.pop(idx)
        participants.insert(new_position, moved)
        return self._replace(roster, participants)

    def merge(self, roster: Roster, target_id: str, source_id: str) -> Roster:
        """
        Absorb `source_id` into `target_id`.

        The merged participant takes the target's position and the source
        disappears from the roster. Unknown ids (for example a selection made
        before a previous merge) and self-merges raise InvalidMergeError and
        leave the roster untouched.
        """
        if target_id == source_id:
            raise InvalidMergeError("Cannot merge a participant into itself.")

        target_idx = roster.index_of(target_id)
        source_idx = roster.index_of(source_id)
        if target_idx is None or source_idx is None:
            missing = target_id if target_idx is None else source_id
            raise InvalidMergeError(
                f"Participant with id '{missing}' is no longer in the roster."
            )

        participants = list(roster.participants)
        participants[target_idx] = self.merger.merge(
            participants[target_idx], participants[source_idx]
        )
        participants.pop(source_idx)
        return self._replace(roster, participants)
