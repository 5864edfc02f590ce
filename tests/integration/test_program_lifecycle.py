from datetime import timedelta

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.utils.time import utcnow
from tests.helpers.asserts import api_call


def test_program_lifecycle(client: TestClient, db_session: Session, staff, user_factory, auth_headers):
    """
    Admin creates a program, the manager assigns staff, employees enroll and
    the trainer completes the session; every role's view follows along.
    """
    print("\n[TEST] Program lifecycle")

    admin_headers = auth_headers(staff["admin"])
    manager_headers = auth_headers(staff["manager"])
    trainer_headers = auth_headers(staff["trainer"])
    employee = staff["employee"]
    employee_headers = auth_headers(employee)
    second = user_factory(first_name="Sam", last_name="Second")

    print("[1] Admin creates the program")
    session_time = utcnow() + timedelta(days=2)
    r_program = api_call(client, "POST", "/api/training-programs", headers=admin_headers, json={
        "title": "Safety",
        "manager_id": staff["manager"].id,
        "deadline": (session_time + timedelta(days=7)).date().isoformat(),
        "sessions": [
            {"session_datetime": session_time.isoformat(), "duration_minutes": 60, "trainer_id": staff["trainer"].id},
        ],
    })
    assert r_program.status_code == 201
    program_id = r_program.json()["data"]["program"]["id"]
    session_id = r_program.json()["data"]["sessions"][0]["id"]
    print(f"[OK] Program {program_id} created")

    print("[2] Manager assigns one employee")
    r_assign = api_call(client, "POST", f"/api/programs/{program_id}/assign", headers=manager_headers,
                        json={"employeeId": employee.id})
    assert r_assign.json()["data"]["id"]

    detail = api_call(client, "GET", f"/api/training-programs/{program_id}", headers=manager_headers).json()["data"]
    assert [a["employee"]["id"] for a in detail["assignedEmployees"]] == [employee.id]
    assert employee.id not in [e["id"] for e in detail["availableEmployees"]]
    assert second.id in [e["id"] for e in detail["availableEmployees"]]

    print("[3] Manager assigns everyone else")
    r_all = api_call(client, "POST", f"/api/programs/{program_id}/assign-all", headers=manager_headers)
    assert r_all.json()["data"]["assigned"] == 1

    print("[4] Employees enroll")
    api_call(client, "POST", f"/api/sessions/{session_id}/enroll", headers=employee_headers)
    api_call(client, "POST", f"/api/sessions/{session_id}/enroll", headers=auth_headers(second))

    stats = api_call(client, "GET", "/api/employee/dashboard-stats", headers=employee_headers).json()["data"]
    assert stats == {"totalEnrolled": 1, "overdue": 0, "completed": 0, "available": 0}
    upcoming = api_call(client, "GET", "/api/employee/upcoming-sessions", headers=employee_headers).json()["data"]
    assert [u["sessionId"] for u in upcoming] == [session_id]

    print("[5] Trainer marks one enrollment, then the rest")
    trainer_view = api_call(client, "GET", f"/api/training-programs/{program_id}", headers=trainer_headers).json()["data"]
    first_enrollment = next(e for e in trainer_view["enrolledEmployees"] if e["employee"]["id"] == employee.id)
    api_call(client, "PATCH", f"/api/enrollments/{first_enrollment['id']}", headers=trainer_headers,
             json={"completed": True})
    r_complete = api_call(client, "POST", f"/api/sessions/{session_id}/complete-all", headers=trainer_headers)
    assert r_complete.json()["data"]["updated"] == 1
    assert r_complete.json()["data"]["already_completed"] == 1

    print("[6] Everyone sees the results")
    rate = api_call(client, "GET", "/api/stats/completion-rates", headers=admin_headers).json()["data"]
    assert rate == {"total": 2, "completed": 2, "rate": 100.0}
    admin_view = api_call(client, "GET", f"/api/training-programs/{program_id}", headers=admin_headers).json()["data"]
    assert admin_view["stats"] == {"totalEnrolled": 2, "completed": 2, "overdue": 0}
    assert api_call(client, "GET", "/api/employee/upcoming-sessions", headers=employee_headers).json()["data"] == []

    print("[7] Admin retires the program")
    api_call(client, "DELETE", f"/api/training-programs/{program_id}", headers=admin_headers)
    dashboard = api_call(client, "GET", "/api/admin/dashboard-stats", headers=admin_headers).json()["data"]
    assert dashboard["activePrograms"] == 0
    assert dashboard["activeSessions"] == 0
    r_gone = client.get(f"/api/training-programs/{program_id}", headers=employee_headers)
    assert r_gone.status_code == 404
    print("[OK] Lifecycle complete")
