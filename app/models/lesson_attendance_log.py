from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Integer,
    String,
    Text,
    UniqueConstraint,
)

from app.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class LessonAttendanceLog(Base):
    """
    Finalized attendance record of one lesson day for one course.
    """

    __tablename__ = "lesson_attendance_logs"

    id = Column(Integer, primary_key=True, index=True)

    course_id = Column(String(64), nullable=False, default="", index=True)
    lesson_date = Column(Date, nullable=False, index=True)
    lesson_type = Column(String(16), nullable=False)
    subject = Column(String(255), nullable=False, default="")

    schedule_text = Column(String(64), nullable=False, default="")
    lesson_hours = Column(
        String(128),
        nullable=False,
        default="",
    )
    used_default_schedule = Column(Boolean, nullable=False, default=False)

    participant_count = Column(Integer, nullable=False, default=0)
    present_count = Column(Integer, nullable=False, default=0)

    sheet_json = Column(
        Text,
        nullable=True,
    )

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
    )

    __table_args__ = (
        UniqueConstraint(
            "course_id",
            "lesson_date",
            "lesson_type",
            name="uq_lesson_attendance_logs_course_date_type",
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<LessonAttendanceLog id={self.id} course_id={self.course_id!r} "
            f"date={self.lesson_date} type={self.lesson_type}>"
        )
