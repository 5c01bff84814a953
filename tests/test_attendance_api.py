# tests/test_attendance_api.py
from http import HTTPStatus


def _event(name, join, leave, window="morning", **extra):
    return {
        "name": name,
        "window": window,
        "join_time": f"2025-07-08T{join}",
        "leave_time": f"2025-07-08T{leave}",
        **extra,
    }


EVENTS = [
    _event("Docente", "08:58:00", "12:05:00", is_organizer_hint=True),
    _event("Maria Rossi", "09:00:00", "10:00:00", email="maria.rossi@example.com"),
    _event("M. Rossi (phone)", "10:05:00", "12:00:00"),
    _event("Luca Bianchi", "09:02:00", "11:58:00"),
    _event("", "09:00:00", "10:00:00"),
]


def _process(client, scope="morning", events=None) -> dict:
    resp = client.post(
        "/attendance/process", json={"scope": scope, "events": events or EVENTS}
    )
    assert resp.status_code == HTTPStatus.OK, resp.text
    return resp.json()


def _id_of(views: dict, name: str) -> str:
    for participant in views["roster"]["participants"]:
        if participant["display_name"] == name:
            return participant["participant_id"]
    raise AssertionError(f"{name} not in roster")


def test_process_returns_roster_hours_and_stats(client):
    data = _process(client)

    assert data["roster"]["organizer"]["display_name"] == "Docente"
    names = [p["display_name"] for p in data["roster"]["participants"]]
    assert names == ["Luca Bianchi", "M. Rossi (phone)", "Maria Rossi"]

    assert data["lesson_hours"] == {"hours": [9, 10, 11], "is_default_schedule": False}
    assert data["schedule_text"] == "09:00 - 12:00"
    assert data["stats"] == {"total": 4, "present": 4, "absent": 0, "has_absences": False}

    maria = data["roster"]["participants"][2]
    assert maria["morning_first_join"] == "2025-07-08T09:00:00"
    assert maria["email"] == "maria.rossi@example.com"


def test_process_rejects_scope_without_participants(client):
    resp = client.post("/attendance/process", json={"scope": "both", "events": EVENTS})

    assert resp.status_code == HTTPStatus.UNPROCESSABLE_ENTITY
    assert resp.json()["detail"] == "No participants found for the afternoon session."


def test_merge_then_stale_merge_conflicts(client):
    views = _process(client)
    maria = _id_of(views, "Maria Rossi")
    phone = _id_of(views, "M. Rossi (phone)")

    resp = client.post(
        "/attendance/merge",
        json={"scope": "morning", "roster": views["roster"], "target_id": maria, "source_id": phone},
    )
    assert resp.status_code == HTTPStatus.OK, resp.text
    merged = resp.json()

    names = [p["display_name"] for p in merged["roster"]["participants"]]
    assert names == ["Luca Bianchi", "Maria Rossi"]
    maria_row = merged["roster"]["participants"][1]
    assert maria_row["total_absence_minutes"] == 5
    assert maria_row["morning_last_leave"] == "2025-07-08T12:00:00"
    assert maria_row["aliases"] == [
        {"name": "M. Rossi (phone)", "connections_summary": "10:05:00-12:00:00"}
    ]

    stale = client.post(
        "/attendance/merge",
        json={"scope": "morning", "roster": merged["roster"], "target_id": maria, "source_id": phone},
    )
    assert stale.status_code == HTTPStatus.CONFLICT


def test_self_merge_conflicts(client):
    views = _process(client)
    maria = _id_of(views, "Maria Rossi")

    resp = client.post(
        "/attendance/merge",
        json={"scope": "morning", "roster": views["roster"], "target_id": maria, "source_id": maria},
    )

    assert resp.status_code == HTTPStatus.CONFLICT
    assert resp.json()["detail"] == "Cannot merge a participant into itself."


def test_toggle_add_move_remove(client):
    views = _process(client)
    luca = _id_of(views, "Luca Bianchi")

    resp = client.post(
        "/attendance/toggle-presence",
        json={"scope": "morning", "roster": views["roster"], "participant_id": luca},
    )
    assert resp.status_code == HTTPStatus.OK
    toggled = resp.json()
    assert toggled["stats"]["absent"] == 1
    assert toggled["roster"]["participants"][0]["total_absence_minutes"] == 999

    resp = client.post(
        "/attendance/participants",
        json={"scope": "morning", "roster": toggled["roster"], "name": "Paolo Gialli"},
    )
    assert resp.status_code == HTTPStatus.OK
    added = resp.json()
    paolo = _id_of(added, "Paolo Gialli")
    assert added["stats"]["absent"] == 2

    resp = client.post(
        "/attendance/move",
        json={"scope": "morning", "roster": added["roster"], "participant_id": paolo, "new_position": 0},
    )
    assert resp.status_code == HTTPStatus.OK
    moved = resp.json()
    assert moved["roster"]["participants"][0]["display_name"] == "Paolo Gialli"

    resp = client.post(
        "/attendance/remove",
        json={"scope": "morning", "roster": moved["roster"], "participant_id": paolo},
    )
    assert resp.status_code == HTTPStatus.OK
    assert "Paolo Gialli" not in [p["display_name"] for p in resp.json()["roster"]["participants"]]


def test_roster_operation_errors(client):
    views = _process(client)
    luca = _id_of(views, "Luca Bianchi")

    resp = client.post(
        "/attendance/toggle-presence",
        json={"scope": "morning", "roster": views["roster"], "participant_id": "missing"},
    )
    assert resp.status_code == HTTPStatus.NOT_FOUND

    resp = client.post(
        "/attendance/participants",
        json={"scope": "morning", "roster": views["roster"], "name": "   "},
    )
    assert resp.status_code == HTTPStatus.BAD_REQUEST

    resp = client.post(
        "/attendance/move",
        json={"scope": "morning", "roster": views["roster"], "participant_id": luca, "new_position": 10},
    )
    assert resp.status_code == HTTPStatus.BAD_REQUEST


def test_views_recomputes_for_another_scope(client):
    events = EVENTS + [_event("Maria Rossi", "14:00:00", "16:00:00", window="afternoon")]
    views = _process(client, scope="both", events=events)

    resp = client.post("/attendance/views", json={"scope": "afternoon", "roster": views["roster"]})

    assert resp.status_code == HTTPStatus.OK
    data = resp.json()
    assert data["scope"] == "afternoon"
    assert data["lesson_hours"]["hours"] == [14, 15]
    assert data["schedule_text"] == "14:00 - 16:00"


def test_sheet_reads_date_from_file_name(client):
    views = _process(client)

    resp = client.post(
        "/attendance/sheet",
        json={
            "scope": "morning",
            "roster": views["roster"],
            "source_filename": "Mattina_2025_07_08.csv",
            "subject": "Sicurezza sul lavoro",
            "course_id": "FAD-17",
        },
    )

    assert resp.status_code == HTTPStatus.OK
    sheet = resp.json()
    assert sheet["lesson_date"] == "2025-07-08"
    assert sheet["lesson_type"] == "morning"
    assert sheet["document_filename"] == "modello B fad_FAD-17_2025_07_08.docx"
    assert [slot["name"] for slot in sheet["slots"]] == [
        "Luca Bianchi",
        "M. Rossi (phone)",
        "Maria Rossi",
    ]
    assert sheet["slots"][0]["morning_in"] == "09:02:00"
    assert sheet["slots"][0]["afternoon_in"] == ""


def test_process_skips_records_with_mismatched_timezone(client):
    events = [
        _event("Anna", "09:00:00", "10:00:00"),
        _event("Anna", "10:05:00Z", "11:00:00Z"),
    ]

    data = _process(client, events=events)

    anna = data["roster"]["participants"][0]
    assert anna["morning_last_leave"] == "2025-07-08T10:00:00"
