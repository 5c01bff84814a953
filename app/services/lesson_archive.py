# app/services/lesson_archive.py
from __future__ import annotations

import json
import logging
from datetime import date as date_type
from typing import List

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.lesson_attendance_log import LessonAttendanceLog
from app.schemas.attendance_sheet import AttendanceSheet
from app.schemas.lesson import LessonViews
from app.schemas.lesson_log import LessonAttendanceLogDetail

logger = logging.getLogger(__name__)


async def save_lesson_record(
    db: AsyncSession,
    sheet: AttendanceSheet,
    views: LessonViews,
) -> LessonAttendanceLog:
    """
    Archive the attendance of one lesson day.

    Idempotent behavior: a record already stored for the same
    (course_id, lesson_date, lesson_type) is updated in place instead of
    creating a duplicate.

    The counts cover the whole roster, not only the capped document slots.
    """
    existing_stmt = select(LessonAttendanceLog).where(
        LessonAttendanceLog.course_id == sheet.course_id,
        LessonAttendanceLog.lesson_date == sheet.lesson_date,
        LessonAttendanceLog.lesson_type == sheet.lesson_type.value,
    )
    existing_result = await db.execute(existing_stmt)
    record = existing_result.scalar_one_or_none()

    if record is None:
        record = LessonAttendanceLog(
            course_id=sheet.course_id,
            lesson_date=sheet.lesson_date,
            lesson_type=sheet.lesson_type.value,
        )
        db.add(record)

    # Update fields (both for new + existing records)
    record.subject = sheet.subject
    record.schedule_text = sheet.schedule_text
    record.lesson_hours = ",".join(str(h) for h in sheet.lesson_hours)
    record.used_default_schedule = sheet.used_default_schedule
    record.participant_count = len(views.roster.participants)
    record.present_count = sum(1 for p in views.roster.participants if p.is_present)
    record.sheet_json = sheet.model_dump_json()

    await db.flush()
    await db.commit()
    await db.refresh(record)

    logger.info(
        "Archived lesson %s (%s) for course '%s' as record %d",
        sheet.lesson_date.isoformat(),
        sheet.lesson_type.value,
        sheet.course_id,
        record.id,
    )
    return record


async def list_lesson_records(
    db: AsyncSession,
    from_date: date_type | None = None,
    to_date: date_type | None = None,
    course_id: str | None = None,
) -> List[LessonAttendanceLog]:
    """
    Archived records ordered by date, optionally filtered by an inclusive
    date range and course.
    """
    if from_date is not None and to_date is not None and to_date < from_date:
        raise ValueError("to_date must be greater than or equal to from_date")

    conditions = []
    if from_date is not None:
        conditions.append(LessonAttendanceLog.lesson_date >= from_date)
    if to_date is not None:
        conditions.append(LessonAttendanceLog.lesson_date <= to_date)
    if course_id is not None:
        conditions.append(LessonAttendanceLog.course_id == course_id)

    stmt = select(LessonAttendanceLog)
    if conditions:
        stmt = stmt.where(and_(*conditions))
    stmt = stmt.order_by(LessonAttendanceLog.lesson_date.asc(), LessonAttendanceLog.id.asc())

    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_lesson_record(db: AsyncSession, record_id: int) -> LessonAttendanceLogDetail:
    """
    Fetch one archived record with its stored sheet.

    Raises LookupError when no record has the given id.
    """
    result = await db.execute(
        select(LessonAttendanceLog).where(LessonAttendanceLog.id == record_id)
    )
    record = result.scalar_one_or_none()
    if record is None:
        raise LookupError(f"Lesson record with id={record_id} not found")

    detail = LessonAttendanceLogDetail.model_validate(record)
    sheet = json.loads(record.sheet_json) if record.sheet_json else None
    return detail.model_copy(update={"sheet": sheet})
