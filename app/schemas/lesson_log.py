# app/schemas/lesson_log.py
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.session import LessonScope


class LessonAttendanceLogRead(BaseModel):
    """
    Public representation of an archived LessonAttendanceLog entry.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., examples=[1], description="Database identifier of the log entry.")
    course_id: str = Field(
        ...,
        examples=["FAD-2025-017"],
        description="Course identifier, empty when not provided.",
    )
    lesson_date: date = Field(..., examples=["2025-07-08"])
    lesson_type: LessonScope = Field(..., examples=["both"])
    subject: str = Field(..., examples=["Sicurezza sul lavoro"])
    schedule_text: str = Field(..., examples=["09:00 - 12:00 / 14:00 - 17:00"])
    lesson_hours: list[int] = Field(
        ...,
        description="Derived lesson hours stored with the record.",
        examples=[[9, 10, 11, 12, 14, 15, 16, 17]],
    )
    used_default_schedule: bool = Field(
        ...,
        description="True when the lesson hours came from the static default schedule.",
    )
    participant_count: int = Field(..., examples=[5])
    present_count: int = Field(..., examples=[4])
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("lesson_hours", mode="before")
    @classmethod
    def _split_hours(cls, value: object) -> object:
        if isinstance(value, str):
            return [int(part) for part in value.split(",") if part.strip()]
        return value


class LessonAttendanceLogDetail(LessonAttendanceLogRead):
    """
    Archived record including the full attendance sheet as stored.
    """

    sheet: dict | None = Field(
        None,
        description="Attendance sheet payload handed to the document renderer.",
    )
