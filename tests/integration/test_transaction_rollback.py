from datetime import timedelta

import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from app.crud.training_session import training_session as crud_training_session
from app.models.session_enrollment import SessionEnrollment
from app.models.training_program import TrainingProgram
from app.models.training_session import TrainingSession
from app.utils import deps as deps_utils
from app.utils.time import utcnow
from tests.helpers.asserts import api_call, assert_error
import main


@pytest.fixture
def real_transactions(client, database_engine, monkeypatch):
    """Serve write endpoints through the application's own commit/rollback dependency."""
    main.app.dependency_overrides.pop(deps_utils.get_transactional_db, None)
    monkeypatch.setattr(
        deps_utils, "SessionLocal",
        sessionmaker(autocommit=False, autoflush=False, bind=database_engine),
    )
    return client


def _fail_session_insert(monkeypatch):
    def _boom(*args, **kwargs):
        raise SQLAlchemyError("session insert failed")
    monkeypatch.setattr(crud_training_session, "create_many", _boom)


def test_failed_session_replacement_rolls_back_whole_update(
    real_transactions, db_session, staff, program_factory, assign, enroll, auth_headers, monkeypatch
):
    """
    An update that renames the program and replaces its sessions must leave
    everything untouched when the session insert fails.
    """
    print("\n[TEST] Rollback of a failed program update")
    client = real_transactions

    print("[1] Seed a program with two sessions and one enrollment")
    program = program_factory(
        staff["manager"], staff["trainer"],
        title="Original Title",
        session_times=[utcnow() + timedelta(days=1), utcnow() + timedelta(days=2)],
    )
    assign(program, staff["employee"])
    enroll(program.sessions[0], staff["employee"])
    session_ids = sorted(s.id for s in program.sessions)

    print("[2] PATCH with a failing session insert")
    _fail_session_insert(monkeypatch)
    response = client.patch(
        f"/api/training-programs/{program.id}",
        headers=auth_headers(staff["admin"]),
        json={
            "title": "Renamed",
            "sessions": [
                {"session_datetime": "2030-01-15T14:00:00", "duration_minutes": 90, "trainer_id": staff["trainer"].id}
            ],
        },
    )
    assert_error(response, 500, "INTERNAL_SERVER_ERROR", "session insert failed")

    print("[3] Verify nothing changed")
    db_session.expire_all()
    assert db_session.get(TrainingProgram, program.id).title == "Original Title", "title update was not rolled back"
    remaining = sorted(s.id for s in db_session.query(TrainingSession).filter_by(program_id=program.id))
    assert remaining == session_ids, "old sessions were deleted despite the failure"
    assert db_session.query(SessionEnrollment).count() == 1, "enrollment was lost despite the failure"
    print("[OK] Update rolled back")


def test_failed_program_create_leaves_no_program(real_transactions, db_session, staff, auth_headers, monkeypatch):
    print("\n[TEST] Rollback of a failed program create")
    client = real_transactions
    _fail_session_insert(monkeypatch)

    response = client.post(
        "/api/training-programs",
        headers=auth_headers(staff["admin"]),
        json={
            "title": "Half Written",
            "manager_id": staff["manager"].id,
            "deadline": "2030-12-31",
            "sessions": [
                {"session_datetime": "2030-11-01T09:00:00", "duration_minutes": 60, "trainer_id": staff["trainer"].id}
            ],
        },
    )
    assert_error(response, 500, "INTERNAL_SERVER_ERROR")

    db_session.expire_all()
    assert db_session.query(TrainingProgram).filter_by(title="Half Written").count() == 0, "program row survived"
    print("[OK] No partial program")


def test_successful_request_commits(real_transactions, db_session, staff, program_factory, auth_headers):
    client = real_transactions
    program = program_factory(staff["manager"], staff["trainer"])

    api_call(
        client, "PATCH", f"/api/training-programs/{program.id}",
        headers=auth_headers(staff["admin"]), json={"title": "Committed"},
    )

    db_session.expire_all()
    assert db_session.get(TrainingProgram, program.id).title == "Committed"
