import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
import uuid
from datetime import timedelta
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from app.core.database import Base, get_db
from app.utils import deps as deps_utils
import main
from fastapi.testclient import TestClient
from app.crud.user import user as crud_user
from app.crud.training_program import training_program as crud_training_program
from app.crud.training_session import training_session as crud_training_session
from app.crud.program_assignment import program_assignment as crud_program_assignment
from app.crud.session_enrollment import session_enrollment as crud_session_enrollment
from app.core.security import create_access_token, get_password_hash
from app.core.constants import RoleEnum
from app.core.config import settings
from app.utils.time import utcnow, utctoday

test_db_url = settings.TEST_DATABASE_URL or "sqlite://"

DEFAULT_PASSWORD = "testpass123"

@pytest.fixture(scope="function")
def database_engine():
    if test_db_url.startswith("sqlite"):
        engine = create_engine(test_db_url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    else:
        engine = create_engine(test_db_url)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()

@pytest.fixture(scope="function")
def db_session(database_engine):
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=database_engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()

@pytest.fixture(scope="function")
def client(db_session):
    # Re-initialize the app for each test function to ensure a clean state
    from importlib import reload
    reload(main)

    def _transactional():
        try:
            yield db_session
            db_session.commit()
        except Exception:
            db_session.rollback()
            raise

    main.app.dependency_overrides[get_db] = lambda: db_session
    main.app.dependency_overrides[deps_utils.get_db] = lambda: db_session
    main.app.dependency_overrides[deps_utils.get_transactional_db] = _transactional
    with TestClient(main.app) as test_client:
        yield test_client

@pytest.fixture
def user_factory(db_session):
    def _user_factory(role=RoleEnum.EMPLOYEE, email=None, password=DEFAULT_PASSWORD, is_active=True, first_name=None, last_name=None):
        role = RoleEnum(role)
        user_data = {
            "email": email or f"{role.value}-{uuid.uuid4().hex[:8]}@test.com",
            "first_name": first_name or "Test",
            "last_name": last_name or role.value.capitalize(),
            "role": role,
            "hashed_password": get_password_hash(password),
            "is_active": is_active,
        }
        return crud_user.create(db_session, obj_in=user_data)
    return _user_factory

@pytest.fixture
def token_for_user():
    def _token_for_user(user):
        return create_access_token(data={"user_id": user.id})
    return _token_for_user

@pytest.fixture
def auth_headers(token_for_user):
    def _auth_headers(user):
        return {"Authorization": f"Bearer {token_for_user(user)}"}
    return _auth_headers

@pytest.fixture
def token_for_role(client, user_factory):
    """Log a fresh active user of each role in through the API."""
    tokens = {}

    def _create_token_for_role(role_name: str):
        if role_name in tokens:
            return tokens[role_name]

        user = user_factory(role=role_name)
        response = client.post("/api/auth/login", json={"email": user.email, "password": DEFAULT_PASSWORD})
        body = response.json()
        token = body.get("data", {}).get("token", {}).get("access_token")
        assert token, f"Login failed or token missing: {body}"
        tokens[role_name] = token
        return token

    return _create_token_for_role

@pytest.fixture
def program_factory(db_session):
    """Create an active program with one session per entry in ``session_times``."""
    def _program_factory(manager, trainer=None, title="Safety Basics", deadline=None, session_times=None, is_active=True):
        program = crud_training_program.create(db_session, obj_in={
            "title": title,
            "notes": None,
            "manager_id": manager.id,
            "deadline": deadline or (utctoday() + timedelta(days=30)),
            "is_active": is_active,
        })
        if session_times is None:
            session_times = [utcnow() + timedelta(days=3)]
        for when in session_times:
            crud_training_session.create(db_session, obj_in={
                "program_id": program.id,
                "trainer_id": trainer.id if trainer else None,
                "session_datetime": when,
                "duration_minutes": 60,
                "is_active": True,
            })
        db_session.refresh(program)
        return program
    return _program_factory

@pytest.fixture
def assign(db_session):
    def _assign(program, employee, manager=None):
        return crud_program_assignment.create(db_session, obj_in={
            "program_id": program.id,
            "employee_id": employee.id,
            "assigned_by_manager_id": (manager or program.manager).id,
        })
    return _assign

@pytest.fixture
def enroll(db_session):
    def _enroll(session, employee, completed=False):
        return crud_session_enrollment.create(db_session, obj_in={
            "session_id": session.id,
            "employee_id": employee.id,
            "completed": completed,
            "completion_date": utcnow() if completed else None,
        })
    return _enroll

@pytest.fixture
def staff(user_factory):
    """One active user of each role, plus a second manager and trainer."""
    return {
        "admin": user_factory(role=RoleEnum.ADMIN, last_name="Admin"),
        "manager": user_factory(role=RoleEnum.MANAGER, last_name="Manager"),
        "other_manager": user_factory(role=RoleEnum.MANAGER, last_name="Othermanager"),
        "trainer": user_factory(role=RoleEnum.TRAINER, last_name="Trainer"),
        "other_trainer": user_factory(role=RoleEnum.TRAINER, last_name="Othertrainer"),
        "employee": user_factory(role=RoleEnum.EMPLOYEE, last_name="Employee"),
    }
