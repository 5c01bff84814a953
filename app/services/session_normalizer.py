# app/services/session_normalizer.py
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Union

from pydantic import ValidationError

from app.core.errors import EmptyRosterError, MalformedEventError
from app.schemas.participant import ParticipantTimeline, WindowSessions
from app.schemas.session import (
    LessonScope,
    SessionEvent,
    SessionInterval,
    SessionWindow,
    is_aware,
)

logger = logging.getLogger(__name__)

RawEvent = Union[SessionEvent, Mapping[str, Any]]


@dataclass
class _Accumulator:
    display_name: str
    email: str
    is_organizer: bool = False
    morning: List[SessionInterval] = field(default_factory=list)
    afternoon: List[SessionInterval] = field(default_factory=list)

    def add(self, window: SessionWindow, interval: SessionInterval) -> None:
        if window is SessionWindow.MORNING:
            self.morning.append(interval)
        else:
            self.afternoon.append(interval)


@dataclass
class NormalizationResult:
    """
    Timelines keyed by case-folded display name, plus bookkeeping about
    the records that were kept and dropped per window.
    """

    timelines: Dict[str, ParticipantTimeline]
    accepted: Counter = field(default_factory=Counter)
    dropped: Counter = field(default_factory=Counter)

    def participants_in(self, window: SessionWindow) -> int:
        return sum(1 for t in self.timelines.values() if t.windows.for_window(window))


class SessionNormalizer:
    """
    Turns raw join/leave records into one ParticipantTimeline per identity.

    Rules
    -----
    - Records are grouped by case-insensitive display name; the casing seen
      first is kept as the canonical name.
    - Only the first record carrying the organizer hint designates the
      organizer; later hints are ignored.
    - Malformed records (blank name, unusable times) are skipped. So are
      records whose timestamps disagree with the first accepted record on
      carrying a timezone, since the two cannot be ordered against each other.
    - Each window list is sorted by join time once all records are consumed.

    The produced timelines are not classified yet: absence and presence are
    left to the PresenceClassifier.
    """

    @staticmethod
    def parse_event(raw: RawEvent) -> SessionEvent:
        """
        Validate one raw record. Raises MalformedEventError when unusable.
        """
        if isinstance(raw, SessionEvent):
            return raw
        try:
            return SessionEvent.model_validate(raw)
        except ValidationError as exc:
            reasons = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'event'}: {err['msg']}"
                for err in exc.errors()
            )
            raise MalformedEventError(reasons) from exc

    @classmethod
    def normalize_events(cls, raw_events: Iterable[RawEvent]) -> NormalizationResult:
        """
        Group raw records into timelines, keeping per-window counters.
        """
        accumulators: Dict[str, _Accumulator] = {}
        accepted: Counter = Counter()
        dropped: Counter = Counter()
        organizer_key: str | None = None
        run_aware: bool | None = None

        for raw in raw_events:
            try:
                event = cls.parse_event(raw)
                if run_aware is None:
                    run_aware = is_aware(event.join_time)
                elif is_aware(event.join_time) != run_aware:
                    raise MalformedEventError(
                        "timestamps must all carry a timezone or all be naive"
                    )
            except MalformedEventError as exc:
                window = cls._raw_window(raw)
                dropped[window] += 1
                logger.debug("Skipping malformed %s record: %s", window, exc)
                continue

            key = event.name.casefold()
            acc = accumulators.get(key)
            if acc is None:
                acc = _Accumulator(display_name=event.name, email=event.email)
                accumulators[key] = acc
            elif not acc.email and event.email:
                acc.email = event.email

            if event.is_organizer_hint and organizer_key is None:
                organizer_key = key
                acc.is_organizer = True

            acc.add(
                event.window,
                SessionInterval(join_time=event.join_time, leave_time=event.leave_time),
            )
            accepted[event.window.value] += 1

        timelines = {
            key: ParticipantTimeline(
                display_name=acc.display_name,
                email=acc.email,
                is_organizer=acc.is_organizer,
                windows=WindowSessions(
                    morning=tuple(acc.morning),
                    afternoon=tuple(acc.afternoon),
                ),
            )
            for key, acc in accumulators.items()
        }

        for window in SessionWindow:
            if dropped[window.value] and not accepted[window.value]:
                logger.warning(
                    "All %d %s record(s) were malformed and skipped",
                    dropped[window.value],
                    window.value,
                )

        return NormalizationResult(timelines=timelines, accepted=accepted, dropped=dropped)

    @classmethod
    def normalize(cls, raw_events: Iterable[RawEvent]) -> Dict[str, ParticipantTimeline]:
        """
        Mapping of case-folded display name -> ParticipantTimeline.
        """
        return cls.normalize_events(raw_events).timelines

    @classmethod
    def normalize_for_scope(
        cls,
        raw_events: Iterable[RawEvent],
        scope: LessonScope,
    ) -> Dict[str, ParticipantTimeline]:
        """
        Like `normalize`, but every window required by `scope` must yield at
        least one participant, otherwise EmptyRosterError is raised.

        Sessions of windows outside `scope` are discarded, so stray records
        never add absence to a lesson that did not cover their window.
        """
        result = cls.normalize_events(raw_events)
        for window in scope.windows:
            if result.participants_in(window) == 0:
                raise EmptyRosterError(window.value, dropped=result.dropped[window.value])
        return cls.restrict_to_scope(result.timelines, scope)

    @staticmethod
    def restrict_to_scope(
        timelines: Mapping[str, ParticipantTimeline],
        scope: LessonScope,
    ) -> Dict[str, ParticipantTimeline]:
        """
        Keep only the sessions of in-scope windows; identities left without
        any session are dropped.
        """
        restricted: Dict[str, ParticipantTimeline] = {}
        for key, timeline in timelines.items():
            kept = {
                window.value: timeline.windows.for_window(window) for window in scope.windows
            }
            windows = WindowSessions(**kept)
            if not windows.has_sessions:
                logger.debug(
                    "Dropping '%s': no session in scope '%s'",
                    timeline.display_name,
                    scope.value,
                )
                continue
            restricted[key] = timeline.model_copy(update={"windows": windows})
        return restricted

    @staticmethod
    def _raw_window(raw: RawEvent) -> str:
        if isinstance(raw, SessionEvent):
            return raw.window.value
        value = raw.get("window") if isinstance(raw, Mapping) else None
        if isinstance(value, SessionWindow):
            return value.value
        if isinstance(value, str) and value in {w.value for w in SessionWindow}:
            return value
        return "unknown"
