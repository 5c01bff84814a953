# tests/test_roster_service.py
from datetime import datetime

import pytest

from app.core.errors import (
    InvalidMergeError,
    InvalidRosterOperationError,
    ParticipantNotFoundError,
)
from app.schemas.participant import ParticipantTimeline, WindowSessions
from app.schemas.session import SessionInterval
from app.services.roster_service import RosterService


def _span(start, end) -> SessionInterval:
    return SessionInterval(
        join_time=datetime(2025, 7, 8, *start),
        leave_time=datetime(2025, 7, 8, *end),
    )


def _timeline(name, *spans, organizer=False) -> ParticipantTimeline:
    return ParticipantTimeline(
        display_name=name,
        is_organizer=organizer,
        windows=WindowSessions(morning=tuple(spans)),
    )


@pytest.fixture
def roster():
    return RosterService().from_timelines(
        [
            _timeline("luca Bianchi", _span((9, 0), (12, 0))),
            _timeline("Docente", _span((8, 55), (12, 30)), organizer=True),
            _timeline("Anna Neri", _span((9, 0), (10, 0)), _span((10, 30), (12, 0))),
            _timeline("Maria Rossi", _span((9, 0), (10, 0))),
            _timeline("M. Rossi (phone)", _span((10, 5), (11, 0))),
        ]
    )


def _names(roster):
    return [p.display_name for p in roster.participants]


def test_from_timelines_classifies_and_orders(roster):
    assert roster.organizer is not None
    assert roster.organizer.display_name == "Docente"
    assert _names(roster) == ["Anna Neri", "luca Bianchi", "M. Rossi (phone)", "Maria Rossi"]

    anna = roster.participants[0]
    assert anna.total_absence_minutes == 30
    assert anna.is_present is False


def test_merge_replaces_target_and_drops_source(roster):
    service = RosterService()
    maria = roster.participants[3]
    phone = roster.participants[2]

    merged = service.merge(roster, maria.participant_id, phone.participant_id)

    assert _names(merged) == ["Anna Neri", "luca Bianchi", "Maria Rossi"]
    assert merged.get(maria.participant_id).total_absence_minutes == 5
    assert merged.get(phone.participant_id) is None
    # original snapshot untouched
    assert len(roster.participants) == 4


def test_merge_with_stale_id_leaves_roster_unchanged(roster):
    service = RosterService()
    maria = roster.participants[3]
    phone = roster.participants[2]
    after = service.merge(roster, maria.participant_id, phone.participant_id)

    with pytest.raises(InvalidMergeError):
        service.merge(after, maria.participant_id, phone.participant_id)

    assert len(after.participants) == 3


def test_self_merge_is_rejected(roster):
    pid = roster.participants[0].participant_id
    before = roster.model_copy(deep=True)

    with pytest.raises(InvalidMergeError):
        RosterService().merge(roster, pid, pid)

    assert roster == before


def test_add_manual_participant(roster):
    service = RosterService()

    updated = service.add_manual_participant(roster, "  Paolo Gialli ")

    manual = updated.participants[-1]
    assert manual.display_name == "Paolo Gialli"
    assert manual.is_present is False
    assert manual.total_absence_minutes == 999
    assert not manual.windows.has_sessions

    with pytest.raises(InvalidRosterOperationError):
        service.add_manual_participant(roster, "   ")


def test_manual_participant_can_absorb_a_log_identity(roster):
    service = RosterService()
    updated = service.add_manual_participant(roster, "Luca B.")
    manual = updated.participants[-1]
    luca = updated.participants[1]

    merged = service.merge(updated, manual.participant_id, luca.participant_id)

    result = merged.get(manual.participant_id)
    assert result.display_name == "Luca B."
    assert result.windows.has_sessions
    assert result.is_manually_marked_absent is False
    assert result.is_present is True
    assert result.total_absence_minutes == 0
    assert merged.get(luca.participant_id) is None


def test_toggle_presence(roster):
    service = RosterService()
    luca = roster.participants[1]

    toggled = service.toggle_presence(roster, luca.participant_id)

    assert toggled.get(luca.participant_id).is_present is False
    assert roster.get(luca.participant_id).is_present is True


def test_move_and_remove(roster):
    service = RosterService()
    maria = roster.participants[3]

    moved = service.move(roster, maria.participant_id, 0)
    assert _names(moved)[0] == "Maria Rossi"

    removed = service.remove(moved, maria.participant_id)
    assert "Maria Rossi" not in _names(removed)

    with pytest.raises(InvalidRosterOperationError):
        service.move(roster, maria.participant_id, 4)


def test_unknown_participant_id_raises(roster):
    service = RosterService()

    with pytest.raises(ParticipantNotFoundError):
        service.toggle_presence(roster, "missing")
    with pytest.raises(ParticipantNotFoundError):
        service.remove(roster, "missing")
    with pytest.raises(ParticipantNotFoundError):
        service.move(roster, "missing", 0)
