# tests/test_hourly_attendance.py
from datetime import datetime

from app.schemas.lesson import LessonHourSet
from app.schemas.participant import ParticipantTimeline, WindowSessions
from app.schemas.session import SessionInterval
from app.services.hourly_attendance import HourlyAttendanceEvaluator


def _span(start, end) -> SessionInterval:
    return SessionInterval(
        join_time=datetime(2025, 7, 8, *start),
        leave_time=datetime(2025, 7, 8, *end),
    )


def _timeline(morning=(), afternoon=()) -> ParticipantTimeline:
    return ParticipantTimeline(
        display_name="Anna Neri",
        windows=WindowSessions(morning=tuple(morning), afternoon=tuple(afternoon)),
    )


def test_thirty_minutes_is_enough_for_an_hour():
    evaluator = HourlyAttendanceEvaluator()

    assert evaluator.is_present_for_hour(_timeline([_span((9, 0), (9, 30))]), 9) is True
    assert evaluator.is_present_for_hour(_timeline([_span((9, 0), (9, 29))]), 9) is False


def test_dwell_adds_up_separate_sessions_in_the_hour():
    evaluator = HourlyAttendanceEvaluator()
    timeline = _timeline([_span((10, 0), (10, 20)), _span((10, 30), (10, 45))])

    result = evaluator.evaluate_hour(timeline, 10)

    assert result.dwell_minutes == 35.0
    assert result.is_present is True


def test_overlapping_sessions_are_not_counted_twice():
    evaluator = HourlyAttendanceEvaluator()
    timeline = _timeline([_span((10, 0), (10, 20)), _span((10, 10), (10, 25))])

    result = evaluator.evaluate_hour(timeline, 10)

    assert result.dwell_minutes == 25.0
    assert result.is_present is False


def test_hour_uses_only_its_own_window():
    evaluator = HourlyAttendanceEvaluator()
    timeline = _timeline(morning=[_span((9, 0), (12, 0))])

    assert evaluator.is_present_for_hour(timeline, 14) is False
    assert evaluator.is_present_for_hour(timeline, 20) is False


def test_participant_without_sessions_is_absent_every_hour():
    evaluator = HourlyAttendanceEvaluator()
    grid = evaluator.build_grid(_timeline(), LessonHourSet(hours=(9, 10, 11)))

    assert grid.present_hours == 0
    assert all(not h.is_present for h in grid.hours)
    assert grid.attendance_pct == 0.0


def test_grid_percentage():
    evaluator = HourlyAttendanceEvaluator()
    timeline = _timeline(morning=[_span((9, 0), (9, 50))])

    grid = evaluator.build_grid(timeline, LessonHourSet(hours=(9, 10, 11, 12)))

    assert grid.lesson_hours == 4
    assert grid.present_hours == 1
    assert grid.attendance_pct == 25.0
    assert [h.hour for h in grid.hours] == [9, 10, 11, 12]


def test_grid_with_one_of_three_hours():
    evaluator = HourlyAttendanceEvaluator()
    timeline = _timeline(afternoon=[_span((14, 0), (15, 0))])

    grid = evaluator.build_grid(timeline, LessonHourSet(hours=(14, 15, 16)))

    assert grid.attendance_pct == 33.33
