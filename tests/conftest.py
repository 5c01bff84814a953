# tests/conftest.py
import os
import tempfile

# Point the app at a throwaway SQLite database before anything imports settings.
TEST_DB_PATH = os.path.join(tempfile.gettempdir(), "lesson_attendance_test.db")
os.environ["DB_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ.setdefault("APP_ENV", "test")

if os.path.exists(TEST_DB_PATH):
    os.remove(TEST_DB_PATH)

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.main import create_app  # noqa: E402


@pytest.fixture(scope="session")
def client() -> TestClient:
    """
    Shared TestClient fixture for all tests.

    Uses the application factory; entering the client runs the startup hook,
    which creates the schema in the test database.
    """
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client
