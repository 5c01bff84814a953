# app/schemas/attendance_sheet.py
from datetime import date

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.session import LessonScope


class AttendanceSlot(BaseModel):
    """
    One participant row of the attendance document.

    Window fields are empty strings when the window is outside the lesson
    scope or the participant has no sessions in it.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., examples=["Maria Rossi"])
    morning_in: str = Field("", examples=["09:02:37"])
    morning_out: str = Field("", examples=["12:58:10"])
    afternoon_in: str = Field("", examples=["ASSENTE"])
    afternoon_out: str = Field("", examples=["ASSENTE"])
    presence: str = Field("", examples=["PRESENTE"])
    connections: str = Field(
        "",
        description="Connection summary including merged aliases.",
        examples=["Maria Rossi: 09:00:00-10:00:00; 10:05:00-11:00:00 || M. Rossi (phone): 10:05:00-11:00:00"],
    )


class AttendanceSheet(BaseModel):
    """
    Data handed to the document renderer for one lesson day.
    """

    model_config = ConfigDict(frozen=True)

    lesson_date: date = Field(..., examples=["2025-07-08"])
    subject: str = Field("", examples=["Sicurezza sul lavoro"])
    course_id: str = Field("", examples=["FAD-2025-017"])
    lesson_type: LessonScope
    schedule_text: str = Field(..., examples=["09:00 - 12:00 / 14:00 - 17:00"])
    lesson_hours: tuple[int, ...] = Field(..., examples=[[9, 10, 11, 12]])
    used_default_schedule: bool = False
    slots: tuple[AttendanceSlot, ...] = Field(
        ...,
        description="Non-organizer participants in roster order, capped to ROSTER_SLOT_CAP.",
    )
    document_filename: str = Field(..., examples=["modello B fad_FAD-2025-017_2025_07_08.docx"])
