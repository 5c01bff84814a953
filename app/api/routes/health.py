# app/api/routes/health.py
from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel, Field

from app.core.config import Settings, get_settings


router = APIRouter(tags=["Health"])


class AttendanceRules(BaseModel):
    """
    Thresholds the running instance applies when computing attendance.
    """

    gap_tolerance_minutes: float = Field(..., examples=[1.5])
    absence_tolerance_minutes: int = Field(..., examples=[15])
    hourly_dwell_minutes: float = Field(..., examples=[30.0])
    hour_derivation_minutes: float = Field(..., examples=[15.0])
    roster_slot_cap: int = Field(..., examples=[5])
    morning_hours: str = Field(..., examples=["09-12"])
    afternoon_hours: str = Field(..., examples=["14-18"])
    break_hour: int = Field(..., examples=[13])

    @classmethod
    def from_settings(cls, settings: Settings) -> "AttendanceRules":
        return cls(
            gap_tolerance_minutes=settings.GAP_TOLERANCE_MINUTES,
            absence_tolerance_minutes=settings.ABSENCE_TOLERANCE_MINUTES,
            hourly_dwell_minutes=settings.HOURLY_DWELL_MINUTES,
            hour_derivation_minutes=settings.HOUR_DERIVATION_MINUTES,
            roster_slot_cap=settings.ROSTER_SLOT_CAP,
            morning_hours=f"{settings.MORNING_START_HOUR:02d}-{settings.MORNING_END_HOUR:02d}",
            afternoon_hours=f"{settings.AFTERNOON_START_HOUR:02d}-{settings.AFTERNOON_END_HOUR:02d}",
            break_hour=settings.BREAK_HOUR,
        )


class HealthResponse(BaseModel):
    status: str = Field(..., examples=["ok"])
    app_name: str = Field(..., examples=["Lesson Attendance"])
    environment: str = Field(
        ...,
        description="Deployment environment (local/dev/stage/prod).",
        examples=["local"],
    )
    timestamp_utc: datetime = Field(..., examples=["2025-07-08T10:30:00Z"])
    rules: AttendanceRules = Field(
        ...,
        description="Attendance thresholds and session windows in effect.",
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness and active attendance rules",
    description=(
        "Confirms the service is up and reports the thresholds it is using, so "
        "an operator can tell why a participant was judged present or absent "
        "without reading the deployment configuration.\n\n"
        "Does not touch the database."
    ),
)
async def health_check() -> HealthResponse:
    settings = get_settings()
    return HealthResponse(
        status="ok",
        app_name=settings.APP_NAME,
        environment=settings.APP_ENV,
        timestamp_utc=datetime.now(tz=timezone.utc),
        rules=AttendanceRules.from_settings(settings),
    )
