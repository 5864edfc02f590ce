from datetime import timedelta
from typing import List

import pytest

from app.models.training_session import TrainingSession
from app.schemas.training_program import (
    AdminProgramDetail, EmployeeProgramDetail, ManagerProgramDetail, ProgramCard, TrainerProgramDetail
)
from app.utils.time import utcnow, utctoday
from tests.helpers.asserts import api_call, assert_error
from tests.helpers.contract import validate_response_schema


def _program_payload(manager, trainer, **overrides):
    payload = {
        "title": "Safety",
        "manager_id": manager.id,
        "deadline": "2025-12-31",
        "sessions": [
            {"session_datetime": "2025-11-01T09:00:00", "duration_minutes": 60, "trainer_id": trainer.id}
        ],
    }
    payload.update(overrides)
    return payload


def test_admin_creates_program_with_sessions(client, staff, auth_headers):
    response = api_call(
        client, "POST", "/api/training-programs",
        headers=auth_headers(staff["admin"]),
        json=_program_payload(staff["manager"], staff["trainer"]),
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["program"]["id"]
    assert data["program"]["title"] == "Safety"
    assert data["program"]["deadline"] == "2025-12-31"
    assert len(data["sessions"]) == 1
    assert data["sessions"][0]["trainer_id"] == staff["trainer"].id
    assert data["sessions"][0]["program_id"] == data["program"]["id"]


def test_create_program_normalizes_timezone(client, staff, auth_headers):
    payload = _program_payload(staff["manager"], staff["trainer"])
    payload["sessions"][0]["session_datetime"] = "2025-11-01T11:00:00+02:00"
    response = api_call(client, "POST", "/api/training-programs", headers=auth_headers(staff["admin"]), json=payload)
    assert response.json()["data"]["sessions"][0]["session_datetime"] == "2025-11-01T09:00:00"


def test_create_program_requires_a_session(client, staff, auth_headers):
    response = client.post(
        "/api/training-programs",
        headers=auth_headers(staff["admin"]),
        json=_program_payload(staff["manager"], staff["trainer"], sessions=[]),
    )
    assert_error(response, 400, "VALIDATION_ERROR")


def test_create_program_rejects_bad_duration(client, staff, auth_headers):
    payload = _program_payload(staff["manager"], staff["trainer"])
    payload["sessions"][0]["duration_minutes"] = 0
    response = client.post("/api/training-programs", headers=auth_headers(staff["admin"]), json=payload)
    assert_error(response, 400, "VALIDATION_ERROR")


def test_create_program_validates_staff_roles(client, db_session, staff, auth_headers):
    headers = auth_headers(staff["admin"])
    wrong_manager = client.post(
        "/api/training-programs", headers=headers,
        json=_program_payload(staff["trainer"], staff["trainer"]),
    )
    assert_error(wrong_manager, 400, "BAD_REQUEST", "manager")

    wrong_trainer = client.post(
        "/api/training-programs", headers=headers,
        json=_program_payload(staff["manager"], staff["employee"]),
    )
    assert_error(wrong_trainer, 400, "BAD_REQUEST", "trainer")
    assert db_session.query(TrainingSession).count() == 0


def test_only_admin_creates_programs(client, staff, auth_headers):
    response = client.post(
        "/api/training-programs",
        headers=auth_headers(staff["manager"]),
        json=_program_payload(staff["manager"], staff["trainer"]),
    )
    assert_error(response, 403, "FORBIDDEN")


def test_cards_are_scoped_by_role(client, staff, program_factory, assign, auth_headers):
    owned = program_factory(staff["manager"], staff["trainer"], title="Owned")
    other = program_factory(staff["other_manager"], staff["other_trainer"], title="Other")
    program_factory(staff["manager"], staff["trainer"], title="Retired", is_active=False)
    assign(owned, staff["employee"])

    def titles(user):
        response = api_call(client, "GET", "/api/training-programs", headers=auth_headers(user))
        validate_response_schema(response.json(), List[ProgramCard])
        return sorted(card["title"] for card in response.json()["data"])

    assert titles(staff["admin"]) == ["Other", "Owned"]
    assert titles(staff["manager"]) == ["Owned"]
    assert titles(staff["trainer"]) == ["Owned"]
    assert titles(staff["other_trainer"]) == ["Other"]
    assert titles(staff["employee"]) == ["Owned"]

    cards = api_call(client, "GET", "/api/training-programs", headers=auth_headers(staff["admin"])).json()["data"]
    owned_card = next(card for card in cards if card["id"] == owned.id)
    assert owned_card["enrollmentCount"] == 1
    assert owned_card["managerName"] == "Test Manager"
    assert other.id in [card["id"] for card in cards]


def test_upcoming_filter_keeps_two_week_window(client, staff, program_factory, auth_headers):
    today = utctoday()
    program_factory(staff["manager"], title="Today", deadline=today)
    program_factory(staff["manager"], title="Edge", deadline=today + timedelta(days=14))
    program_factory(staff["manager"], title="Later", deadline=today + timedelta(days=15))
    program_factory(staff["manager"], title="Past", deadline=today - timedelta(days=1))

    response = api_call(
        client, "GET", "/api/training-programs",
        headers=auth_headers(staff["admin"]), params={"upcoming": "true"},
    )
    assert sorted(card["title"] for card in response.json()["data"]) == ["Edge", "Today"]


def test_admin_detail(client, staff, program_factory, assign, enroll, auth_headers):
    program = program_factory(
        staff["manager"], staff["trainer"],
        session_times=[utcnow() - timedelta(days=2), utcnow() + timedelta(days=2)],
    )
    assign(program, staff["employee"])
    past_session, future_session = program.sessions
    enroll(past_session, staff["employee"])
    enroll(future_session, staff["employee"], completed=True)

    response = api_call(client, "GET", f"/api/training-programs/{program.id}", headers=auth_headers(staff["admin"]))
    data = response.json()["data"]
    AdminProgramDetail.model_validate(data)
    assert data["role"] == "admin"
    assert data["managerName"] == "Test Manager"
    assert [s["id"] for s in data["sessions"]] == [past_session.id, future_session.id]
    assert data["sessions"][0]["trainerName"] == "Test Trainer"
    assert len(data["enrolledEmployees"]) == 2
    assert data["enrolledEmployees"][0]["employee"]["fullName"] == "Test Employee"
    assert data["stats"] == {"totalEnrolled": 1, "completed": 1, "overdue": 1}


def test_manager_detail_lists_assigned_and_available(client, staff, user_factory, program_factory, assign, auth_headers):
    spare = user_factory(last_name="Spare")
    user_factory(last_name="Inactive", is_active=False)
    program = program_factory(staff["manager"], staff["trainer"])
    assign(program, staff["employee"])

    response = api_call(client, "GET", f"/api/training-programs/{program.id}", headers=auth_headers(staff["manager"]))
    data = response.json()["data"]
    ManagerProgramDetail.model_validate(data)
    assert data["role"] == "manager"
    assert [a["employee"]["id"] for a in data["assignedEmployees"]] == [staff["employee"].id]
    assert data["assignedEmployees"][0]["assigned_by_manager_id"] == staff["manager"].id
    assert [e["id"] for e in data["availableEmployees"]] == [spare.id]


def test_trainer_detail_flags_owned_sessions(client, staff, program_factory, db_session, auth_headers):
    program = program_factory(staff["manager"], staff["trainer"])
    db_session.add(TrainingSession(
        program_id=program.id,
        trainer_id=staff["other_trainer"].id,
        session_datetime=utcnow() + timedelta(days=10),
        duration_minutes=30,
        is_active=True,
    ))
    db_session.commit()

    response = api_call(client, "GET", f"/api/training-programs/{program.id}", headers=auth_headers(staff["trainer"]))
    data = response.json()["data"]
    TrainerProgramDetail.model_validate(data)
    assert data["role"] == "trainer"
    assert [s["isOwner"] for s in data["sessions"]] == [True, False]
    assert data["stats"] == {"totalEnrolled": 0, "completed": 0}


def test_employee_detail_shows_only_own_enrollments(client, staff, user_factory, program_factory, assign, enroll, auth_headers):
    colleague = user_factory(last_name="Colleague")
    program = program_factory(
        staff["manager"], staff["trainer"],
        session_times=[utcnow() + timedelta(days=1), utcnow() + timedelta(days=2)],
    )
    assign(program, staff["employee"])
    assign(program, colleague)
    first, second = program.sessions
    enroll(first, staff["employee"], completed=True)
    enroll(first, colleague)
    enroll(second, colleague)

    response = api_call(client, "GET", f"/api/training-programs/{program.id}", headers=auth_headers(staff["employee"]))
    data = response.json()["data"]
    EmployeeProgramDetail.model_validate(data)
    assert data["role"] == "employee"
    assert len(data["sessions"]) == 2
    assert [e["employee"]["id"] for e in data["myEnrollments"]] == [staff["employee"].id]
    assert data["stats"] == {"enrolled": 1, "completed": 1, "available": 1}


def test_detail_access_rules(client, staff, program_factory, auth_headers):
    program = program_factory(staff["manager"], staff["trainer"])
    url = f"/api/training-programs/{program.id}"

    assert_error(client.get(url, headers=auth_headers(staff["other_manager"])), 403, "FORBIDDEN")
    assert_error(client.get(url, headers=auth_headers(staff["other_trainer"])), 403, "FORBIDDEN")
    assert_error(client.get(url, headers=auth_headers(staff["employee"])), 403, "FORBIDDEN")
    assert_error(client.get("/api/training-programs/9999", headers=auth_headers(staff["admin"])), 404, "NOT_FOUND")


def test_inactive_program_is_not_found(client, staff, program_factory, auth_headers):
    program = program_factory(staff["manager"], staff["trainer"], is_active=False)
    response = client.get(f"/api/training-programs/{program.id}", headers=auth_headers(staff["admin"]))
    assert_error(response, 404, "NOT_FOUND")


def test_update_replaces_sessions(client, db_session, staff, program_factory, assign, enroll, auth_headers):
    program = program_factory(
        staff["manager"], staff["trainer"],
        session_times=[utcnow() + timedelta(days=1), utcnow() + timedelta(days=2)],
    )
    assign(program, staff["employee"])
    enroll(program.sessions[0], staff["employee"])

    response = api_call(
        client, "PATCH", f"/api/training-programs/{program.id}",
        headers=auth_headers(staff["admin"]),
        json={
            "title": "Safety Refresher",
            "sessions": [
                {"session_datetime": "2030-01-15T14:00:00", "duration_minutes": 90, "trainer_id": staff["other_trainer"].id}
            ],
        },
    )
    data = response.json()["data"]
    assert data["title"] == "Safety Refresher"
    assert len(data["sessions"]) == 1
    assert data["sessions"][0]["trainer_id"] == staff["other_trainer"].id
    assert data["enrolledEmployees"] == []
    assert db_session.query(TrainingSession).filter(TrainingSession.program_id == program.id).count() == 1


def test_update_without_sessions_keeps_them(client, staff, program_factory, auth_headers):
    program = program_factory(staff["manager"], staff["trainer"])
    response = api_call(
        client, "PATCH", f"/api/training-programs/{program.id}",
        headers=auth_headers(staff["admin"]), json={"notes": "Bring boots"},
    )
    data = response.json()["data"]
    assert data["notes"] == "Bring boots"
    assert len(data["sessions"]) == 1


def test_update_missing_program(client, staff, auth_headers):
    response = client.patch("/api/training-programs/9999", headers=auth_headers(staff["admin"]), json={"title": "X"})
    assert_error(response, 404, "NOT_FOUND")


def test_delete_deactivates_program_and_sessions(client, db_session, staff, program_factory, auth_headers):
    program = program_factory(staff["manager"], staff["trainer"])
    response = api_call(client, "DELETE", f"/api/training-programs/{program.id}", headers=auth_headers(staff["admin"]))
    assert response.json()["data"]["is_active"] is False

    db_session.expire_all()
    assert all(not s.is_active for s in db_session.query(TrainingSession).filter_by(program_id=program.id))
    cards = api_call(client, "GET", "/api/training-programs", headers=auth_headers(staff["admin"])).json()["data"]
    assert cards == []


@pytest.mark.parametrize("field", ["title", "manager_id", "deadline", "is_active"])
def test_update_rejects_null_for_required_fields(client, db_session, staff, program_factory, auth_headers, field):
    program = program_factory(staff["manager"], staff["trainer"], title="Keep Me")
    response = client.patch(
        f"/api/training-programs/{program.id}", headers=auth_headers(staff["admin"]), json={field: None}
    )
    assert_error(response, 400, "VALIDATION_ERROR", f"{field} cannot be null")

    db_session.refresh(program)
    assert program.title == "Keep Me"
    assert program.is_active is True


def test_update_accepts_null_notes(client, staff, program_factory, auth_headers):
    program = program_factory(staff["manager"], staff["trainer"])
    response = api_call(
        client, "PATCH", f"/api/training-programs/{program.id}",
        headers=auth_headers(staff["admin"]), json={"notes": None},
    )
    assert response.json()["data"]["notes"] is None
