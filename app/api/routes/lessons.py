# app/api/routes/lessons.py
from datetime import date as date_type
from http import HTTPStatus

from fastapi import APIRouter, Depends, HTTPException, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.schemas.attendance_requests import SheetRequest
from app.schemas.lesson_log import LessonAttendanceLogDetail, LessonAttendanceLogRead
from app.services.attendance_sheet import build_attendance_sheet
from app.services.lesson_archive import (
    get_lesson_record,
    list_lesson_records,
    save_lesson_record,
)
from app.services.lesson_dates import resolve_lesson_date
from app.services.lesson_pipeline import build_lesson_views

router = APIRouter(prefix="/lessons", tags=["Lessons"])


@router.post(
    "",
    response_model=LessonAttendanceLogRead,
    status_code=HTTPStatus.CREATED,
    summary="Finalize and archive a lesson's attendance",
    description=(
        "Compute the attendance sheet for the given roster snapshot and store it.\n\n"
        "Archiving is idempotent per (`course_id`, lesson date, lesson type): "
        "submitting the same lesson again replaces the stored record.\n\n"
        "Typical usage:\n"
        "- Final step after reviewing merges and manual corrections\n"
        "- Re-archiving after reprocessing the raw logs"
    ),
    responses={
        201: {
            "description": "Lesson attendance archived.",
            "content": {
                "application/json": {
                    "example": {
                        "id": 1,
                        "course_id": "FAD-2025-017",
                        "lesson_date": "2025-07-08",
                        "lesson_type": "both",
                        "subject": "Sicurezza sul lavoro",
                        "schedule_text": "09:00 - 12:00 / 14:00 - 17:00",
                        "lesson_hours": [9, 10, 11, 12, 14, 15, 16, 17],
                        "used_default_schedule": False,
                        "participant_count": 5,
                        "present_count": 4,
                    }
                }
            },
        },
    },
)
async def archive_lesson(
    payload: SheetRequest,
    db: AsyncSession = Depends(get_db),
) -> LessonAttendanceLogRead:
    """
    Build the sheet from the roster snapshot and persist it.
    """
    views = build_lesson_views(payload.roster, payload.scope)
    sheet = build_attendance_sheet(
        views,
        lesson_date=resolve_lesson_date(payload.lesson_date, payload.source_filename),
        subject=payload.subject,
        course_id=payload.course_id,
    )
    record = await save_lesson_record(db, sheet=sheet, views=views)
    return LessonAttendanceLogRead.model_validate(record)


@router.get(
    "",
    response_model=list[LessonAttendanceLogRead],
    status_code=HTTPStatus.OK,
    summary="List archived lessons",
    description=(
        "Return archived lesson records ordered by date, optionally filtered "
        "by an inclusive date range and by course.\n\n"
        "- If `from_date` and `to_date` are both omitted, all records are returned.\n"
        "- If only `from_date` is provided, records from that date onwards are returned.\n"
        "- If only `to_date` is provided, records up to that date are returned."
    ),
    responses={400: {"description": "`to_date` is earlier than `from_date`."}},
)
async def list_lessons(
    from_date: date_type | None = Query(
        default=None,
        description="Start date (inclusive) in ISO format (YYYY-MM-DD).",
        examples=["2025-07-01"],
    ),
    to_date: date_type | None = Query(
        default=None,
        description="End date (inclusive) in ISO format (YYYY-MM-DD).",
        examples=["2025-07-31"],
    ),
    course_id: str | None = Query(
        default=None,
        description="Only return records of this course.",
        examples=["FAD-2025-017"],
    ),
    db: AsyncSession = Depends(get_db),
) -> list[LessonAttendanceLogRead]:
    try:
        records = await list_lesson_records(
            db, from_date=from_date, to_date=to_date, course_id=course_id
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=HTTPStatus.BAD_REQUEST,
            detail=str(exc),
        )

    return [LessonAttendanceLogRead.model_validate(r) for r in records]


@router.get(
    "/{record_id}",
    response_model=LessonAttendanceLogDetail,
    summary="Get an archived lesson with its attendance sheet",
    responses={
        404: {
            "description": "No archived lesson exists with the given ID.",
            "content": {
                "application/json": {
                    "example": {"detail": "Lesson record with id=42 not found"}
                }
            },
        },
    },
)
async def get_lesson(
    record_id: int = Path(
        ...,
        description="Numeric ID of the archived lesson.",
        ge=1,
        examples=[1],
    ),
    db: AsyncSession = Depends(get_db),
) -> LessonAttendanceLogDetail:
    try:
        return await get_lesson_record(db, record_id)
    except LookupError as exc:
        raise HTTPException(
            status_code=HTTPStatus.NOT_FOUND,
            detail=str(exc),
        )
