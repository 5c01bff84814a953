# app/services/lesson_dates.py
from __future__ import annotations

import re
from datetime import date

# e.g. "Mattina_2025_07_08.csv"
DATE_IN_FILENAME = re.compile(r"(\d{4})_(\d{2})_(\d{2})")


def extract_lesson_date(filename: str | None) -> date | None:
    """
    Read the lesson date embedded in a log file name as YYYY_MM_DD.

    Returns None when the name carries no valid date.
    """
    if not filename:
        return None

    match = DATE_IN_FILENAME.search(filename)
    if match is None:
        return None

    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError:
        return None


def format_date_for_filename(value: date) -> str:
    return value.strftime("%Y_%m_%d")


def document_filename(lesson_date: date, course_id: str | None = None) -> str:
    """
    Default file name of the rendered attendance document.
    """
    date_part = format_date_for_filename(lesson_date)
    if course_id:
        return f"modello B fad_{course_id}_{date_part}.docx"
    return f"modello B fad_{date_part}.docx"


def resolve_lesson_date(
    explicit: date | None,
    filename: str | None = None,
    today: date | None = None,
) -> date:
    """
    Lesson date to print: the explicit one, else the one in the file name,
    else today.
    """
    if explicit is not None:
        return explicit
    from_name = extract_lesson_date(filename)
    if from_name is not None:
        return from_name
    return today or date.today()
