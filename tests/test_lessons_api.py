# tests/test_lessons_api.py
from http import HTTPStatus

EVENTS = [
    {
        "name": "Docente",
        "window": "afternoon",
        "join_time": "2025-07-09T14:00:00",
        "leave_time": "2025-07-09T17:00:00",
        "is_organizer_hint": True,
    },
    {
        "name": "Anna Neri",
        "window": "afternoon",
        "join_time": "2025-07-09T14:00:00",
        "leave_time": "2025-07-09T17:00:00",
    },
]


def _roster(client) -> dict:
    resp = client.post("/attendance/process", json={"scope": "afternoon", "events": EVENTS})
    assert resp.status_code == HTTPStatus.OK, resp.text
    return resp.json()["roster"]


def _archive(client, roster, course_id, lesson_date="2025-07-09"):
    return client.post(
        "/lessons",
        json={
            "scope": "afternoon",
            "roster": roster,
            "lesson_date": lesson_date,
            "subject": "Primo soccorso",
            "course_id": course_id,
        },
    )


def test_archive_lesson_and_fetch_it(client):
    roster = _roster(client)

    resp = _archive(client, roster, "API-LESSONS-1")
    assert resp.status_code == HTTPStatus.CREATED, resp.text
    record = resp.json()
    assert record["lesson_type"] == "afternoon"
    assert record["lesson_hours"] == [14, 15, 16]
    assert record["schedule_text"] == "14:00 - 17:00"
    assert record["participant_count"] == 1
    assert record["present_count"] == 1

    again = _archive(client, roster, "API-LESSONS-1")
    assert again.status_code == HTTPStatus.CREATED
    assert again.json()["id"] == record["id"]

    detail = client.get(f"/lessons/{record['id']}")
    assert detail.status_code == HTTPStatus.OK
    sheet = detail.json()["sheet"]
    assert sheet["slots"][0]["name"] == "Anna Neri"
    assert sheet["slots"][0]["afternoon_in"] == "14:00:00"


def test_list_lessons_filters(client):
    roster = _roster(client)
    for lesson_date in ("2025-08-01", "2025-08-05", "2025-08-10"):
        resp = _archive(client, roster, "API-LESSONS-2", lesson_date=lesson_date)
        assert resp.status_code == HTTPStatus.CREATED

    resp = client.get(
        "/lessons",
        params={"course_id": "API-LESSONS-2", "from_date": "2025-08-02", "to_date": "2025-08-10"},
    )
    assert resp.status_code == HTTPStatus.OK
    assert [r["lesson_date"] for r in resp.json()] == ["2025-08-05", "2025-08-10"]

    resp = client.get("/lessons", params={"from_date": "2025-08-10", "to_date": "2025-08-01"})
    assert resp.status_code == HTTPStatus.BAD_REQUEST


def test_get_unknown_lesson_returns_404(client):
    resp = client.get("/lessons/999999")

    assert resp.status_code == HTTPStatus.NOT_FOUND
    assert resp.json()["detail"] == "Lesson record with id=999999 not found"
