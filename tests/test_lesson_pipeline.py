# tests/test_lesson_pipeline.py
import pytest

from app.core.errors import EmptyRosterError
from app.schemas.session import LessonScope
from app.services.lesson_pipeline import process_events


def _event(name, join, leave, window="morning", **extra):
    return {
        "name": name,
        "window": window,
        "join_time": f"2025-07-08T{join}",
        "leave_time": f"2025-07-08T{leave}",
        **extra,
    }


EVENTS = [
    _event("Docente", "08:55:00", "12:35:00", is_organizer_hint=True),
    _event("Docente", "13:55:00", "17:20:00", window="afternoon"),
    _event("Giulia Verdi", "09:05:00", "09:50:00"),
    _event("giulia verdi", "09:56:00", "12:10:00"),
    _event("Giulia Verdi", "14:00:00", "17:00:00", window="afternoon"),
    _event("Luca Bianchi", "09:00:00", "10:00:00"),
    _event("Luca Bianchi", "11:00:00", "12:00:00"),
]


def test_process_events_full_day():
    views = process_events(EVENTS, LessonScope.BOTH)

    assert views.roster.organizer.display_name == "Docente"
    giulia, luca = views.roster.participants
    assert giulia.total_absence_minutes == 6
    assert giulia.is_present is True
    assert luca.total_absence_minutes == 60
    assert luca.is_present is False

    assert views.lesson_hours.hours == (9, 10, 11, 12, 14, 15, 16, 17)
    assert views.schedule_text == "09:00 - 12:00 / 14:00 - 17:00"

    assert views.stats.total == 3
    assert views.stats.present == 2
    assert views.stats.absent == 1
    assert views.stats.has_absences is True

    luca_grid = next(h for h in views.hourly if h.participant_id == luca.participant_id)
    assert luca_grid.present_hours == 2
    assert views.organizer_hourly is not None


def test_process_events_rejects_missing_window():
    morning_only = [e for e in EVENTS if e["window"] == "morning"]

    with pytest.raises(EmptyRosterError):
        process_events(morning_only, LessonScope.BOTH)


def test_morning_lesson_ignores_afternoon_gaps():
    events = [
        _event("Giulia Verdi", "09:05:00", "09:50:00"),
        _event("Giulia Verdi", "09:56:00", "12:10:00"),
        _event("Giulia Verdi", "14:00:00", "14:30:00", window="afternoon"),
        _event("Giulia Verdi", "15:30:00", "17:00:00", window="afternoon"),
    ]

    views = process_events(events, LessonScope.MORNING)

    giulia = views.roster.participants[0]
    assert giulia.total_absence_minutes == 6
    assert giulia.is_present is True


def test_mixed_timezone_records_do_not_break_processing():
    events = [
        _event("Anna", "09:00:00", "10:00:00"),
        _event("Anna", "10:05:00Z", "11:00:00Z"),
    ]

    views = process_events(events, LessonScope.MORNING)

    anna = views.roster.participants[0]
    assert len(anna.windows.morning) == 1
    assert anna.is_present is True
