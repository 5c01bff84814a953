# app/main.py
from fastapi import FastAPI

from app.api.routes import attendance, health, lessons
from app.core.config import get_settings
from app.core.logging import setup_logging
from app.db.session import init_db_for_startup


def create_app() -> FastAPI:
    """
    Application factory for the Lesson Attendance service.
    """
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, settings.LOG_FILE)

    app = FastAPI(
        title=settings.APP_NAME,
        description=(
            "Backend service that turns videoconference join/leave logs into a\n"
            "lesson attendance record: presence decisions, lesson hours actually\n"
            "taught, hourly attendance, merged identities and the data for the\n"
            "attendance document."
        ),
        version="0.1.0",
    )

    # Routers
    app.include_router(health.router)
    app.include_router(attendance.router)
    app.include_router(lessons.router)

    @app.on_event("startup")
    async def on_startup() -> None:  # pragma: no cover
        await init_db_for_startup()

    return app


app = create_app()
