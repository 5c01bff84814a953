# app/api/routes/attendance.py
from http import HTTPStatus

from fastapi import APIRouter, HTTPException

from app.core.errors import (
    EmptyRosterError,
    InvalidMergeError,
    InvalidRosterOperationError,
    ParticipantNotFoundError,
)
from app.schemas.attendance_requests import (
    AddParticipantRequest,
    MergeRequest,
    MoveParticipantRequest,
    ParticipantRequest,
    ProcessEventsRequest,
    RosterRequest,
    SheetRequest,
)
from app.schemas.attendance_sheet import AttendanceSheet
from app.schemas.lesson import LessonViews
from app.services.attendance_sheet import build_attendance_sheet
from app.services.lesson_dates import resolve_lesson_date
from app.services.lesson_pipeline import build_lesson_views, process_events
from app.services.roster_service import RosterService

router = APIRouter(prefix="/attendance", tags=["Attendance"])


def _not_found(exc: ParticipantNotFoundError) -> HTTPException:
    return HTTPException(status_code=HTTPStatus.NOT_FOUND, detail=str(exc))


def _bad_request(exc: InvalidRosterOperationError) -> HTTPException:
    return HTTPException(status_code=HTTPStatus.BAD_REQUEST, detail=str(exc))


@router.post(
    "/process",
    response_model=LessonViews,
    status_code=HTTPStatus.OK,
    summary="Compute attendance from raw session records",
    description=(
        "Normalize raw join/leave records into one timeline per participant, "
        "classify presence, derive the lesson hours actually taught and build "
        "the hourly attendance grid.\n\n"
        "- Malformed records (blank name, unusable or inverted times) are skipped.\n"
        "- If a window required by `scope` ends up with no participants at all, "
        "the request is rejected with 422.\n"
        "- `lesson_hours.is_default_schedule` is true when no hour could be derived "
        "and the static default schedule was used."
    ),
    responses={
        422: {
            "description": "A required session window has no participants.",
            "content": {
                "application/json": {
                    "example": {"detail": "No participants found for the afternoon session."}
                }
            },
        },
    },
)
async def process_session_records(payload: ProcessEventsRequest) -> LessonViews:
    """
    Run the full attendance pipeline on raw records.
    """
    try:
        return process_events(payload.events, payload.scope)
    except EmptyRosterError as exc:
        raise HTTPException(
            status_code=HTTPStatus.UNPROCESSABLE_ENTITY,
            detail=str(exc),
        )


@router.post(
    "/views",
    response_model=LessonViews,
    status_code=HTTPStatus.OK,
    summary="Recompute lesson views for a roster snapshot",
    description=(
        "Recompute lesson hours, hourly grids, schedule text and head counts "
        "from a roster snapshot, e.g. after switching the lesson scope."
    ),
)
async def recompute_views(payload: RosterRequest) -> LessonViews:
    return build_lesson_views(payload.roster, payload.scope)


@router.post(
    "/merge",
    response_model=LessonViews,
    status_code=HTTPStatus.OK,
    summary="Merge two participants into one identity",
    description=(
        "Absorb `source_id` into `target_id`: sessions are combined, the source "
        "name is kept as an alias with a frozen connection summary, and absence "
        "and presence are recomputed.\n\n"
        "Merges cannot be undone; reprocess the raw records to start over."
    ),
    responses={
        409: {
            "description": "Self-merge, or an id that is no longer in the roster.",
            "content": {
                "application/json": {
                    "example": {"detail": "Cannot merge a participant into itself."}
                }
            },
        },
    },
)
async def merge_participants(payload: MergeRequest) -> LessonViews:
    try:
        roster = RosterService().merge(payload.roster, payload.target_id, payload.source_id)
    except InvalidMergeError as exc:
        raise HTTPException(status_code=HTTPStatus.CONFLICT, detail=str(exc))
    return build_lesson_views(roster, payload.scope)


@router.post(
    "/toggle-presence",
    response_model=LessonViews,
    status_code=HTTPStatus.OK,
    summary="Manually flip a participant's presence",
    description=(
        "Operator override. Toggling to present records 0 absence minutes, "
        "toggling to absent records the 999 sentinel."
    ),
    responses={404: {"description": "No participant with the given id."}},
)
async def toggle_presence(payload: ParticipantRequest) -> LessonViews:
    try:
        roster = RosterService().toggle_presence(payload.roster, payload.participant_id)
    except ParticipantNotFoundError as exc:
        raise _not_found(exc)
    return build_lesson_views(roster, payload.scope)


@router.post(
    "/participants",
    response_model=LessonViews,
    status_code=HTTPStatus.OK,
    summary="Add a participant missing from the logs",
    description=(
        "Append a participant with no sessions, marked absent. It takes part "
        "in ordering, the document slot cap and merges like any other entry."
    ),
    responses={400: {"description": "Blank participant name."}},
)
async def add_participant(payload: AddParticipantRequest) -> LessonViews:
    try:
        roster = RosterService().add_manual_participant(payload.roster, payload.name)
    except InvalidRosterOperationError as exc:
        raise _bad_request(exc)
    return build_lesson_views(roster, payload.scope)


@router.post(
    "/remove",
    response_model=LessonViews,
    status_code=HTTPStatus.OK,
    summary="Remove a participant from the roster",
    responses={404: {"description": "No participant with the given id."}},
)
async def remove_participant(payload: ParticipantRequest) -> LessonViews:
    try:
        roster = RosterService().remove(payload.roster, payload.participant_id)
    except ParticipantNotFoundError as exc:
        raise _not_found(exc)
    return build_lesson_views(roster, payload.scope)


@router.post(
    "/move",
    response_model=LessonViews,
    status_code=HTTPStatus.OK,
    summary="Move a participant to another position",
    description="Roster order decides which participants fill the document slots.",
    responses={
        400: {"description": "Target position outside the roster."},
        404: {"description": "No participant with the given id."},
    },
)
async def move_participant(payload: MoveParticipantRequest) -> LessonViews:
    try:
        roster = RosterService().move(
            payload.roster, payload.participant_id, payload.new_position
        )
    except ParticipantNotFoundError as exc:
        raise _not_found(exc)
    except InvalidRosterOperationError as exc:
        raise _bad_request(exc)
    return build_lesson_views(roster, payload.scope)


@router.post(
    "/sheet",
    response_model=AttendanceSheet,
    status_code=HTTPStatus.OK,
    summary="Build the data for the attendance document",
    description=(
        "Return the values the document renderer needs: date, subject, schedule "
        "text and one slot per participant (first five, roster order, organizer "
        "excluded). Absent participants carry the absence marker."
    ),
)
async def build_sheet(payload: SheetRequest) -> AttendanceSheet:
    views = build_lesson_views(payload.roster, payload.scope)
    return build_attendance_sheet(
        views,
        lesson_date=resolve_lesson_date(payload.lesson_date, payload.source_filename),
        subject=payload.subject,
        course_id=payload.course_id,
    )
