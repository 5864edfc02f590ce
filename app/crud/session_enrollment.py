from datetime import datetime
from typing import Any, List, Optional
from sqlalchemy.orm import Session, joinedload

from app.crud.base import CRUDBase
from app.models.session_enrollment import SessionEnrollment
from app.models.training_program import TrainingProgram
from app.models.training_session import TrainingSession
from app.schemas.session_enrollment import SessionEnrollment as SessionEnrollmentSchema, EnrollmentUpdate


class CRUDSessionEnrollment(CRUDBase[SessionEnrollment, SessionEnrollmentSchema, EnrollmentUpdate]):
    def get(self, db: Session, id: Any) -> Optional[SessionEnrollment]:
        return (
            db.query(SessionEnrollment)
            .options(joinedload(SessionEnrollment.session))
            .filter(SessionEnrollment.id == id)
            .first()
        )

    def get_by_session_and_employee(self, db: Session, *, session_id: int, employee_id: int) -> Optional[SessionEnrollment]:
        return db.query(SessionEnrollment).filter(
            SessionEnrollment.session_id == session_id,
            SessionEnrollment.employee_id == employee_id,
        ).first()

    def get_by_session(self, db: Session, *, session_id: int) -> List[SessionEnrollment]:
        return db.query(SessionEnrollment).filter(SessionEnrollment.session_id == session_id).all()

    def _program_query(self, db: Session, program_id: int):
        return (
            db.query(SessionEnrollment)
            .join(TrainingSession, SessionEnrollment.session_id == TrainingSession.id)
            .filter(TrainingSession.program_id == program_id, TrainingSession.is_active == True)
        )

    def get_by_program(self, db: Session, *, program_id: int, employee_id: Optional[int] = None) -> List[SessionEnrollment]:
        """Enrollments in the active sessions of a program."""
        query = self._program_query(db, program_id).options(joinedload(SessionEnrollment.employee))
        if employee_id is not None:
            query = query.filter(SessionEnrollment.employee_id == employee_id)
        return query.order_by(TrainingSession.session_datetime, SessionEnrollment.id).all()

    def count_by_program(
        self,
        db: Session,
        *,
        program_id: int,
        completed: Optional[bool] = None,
        session_before: Optional[datetime] = None,
    ) -> int:
        query = self._program_query(db, program_id)
        if completed is not None:
            query = query.filter(SessionEnrollment.completed == completed)
        if session_before is not None:
            query = query.filter(TrainingSession.session_datetime < session_before)
        return query.count()

    def get_active_by_employee(self, db: Session, *, employee_id: int) -> List[SessionEnrollment]:
        """An employee's enrollments whose session is still active."""
        return (
            db.query(SessionEnrollment)
            .join(TrainingSession, SessionEnrollment.session_id == TrainingSession.id)
            .options(joinedload(SessionEnrollment.session))
            .filter(SessionEnrollment.employee_id == employee_id, TrainingSession.is_active == True)
            .order_by(TrainingSession.session_datetime)
            .all()
        )

    def get_enrolled_session_ids(self, db: Session, *, employee_id: int) -> List[int]:
        rows = db.query(SessionEnrollment.session_id).filter(SessionEnrollment.employee_id == employee_id).all()
        return [row.session_id for row in rows]

    def get_upcoming_for_employee(self, db: Session, *, employee_id: int, now: datetime, limit: int) -> List[SessionEnrollment]:
        return (
            db.query(SessionEnrollment)
            .join(TrainingSession, SessionEnrollment.session_id == TrainingSession.id)
            .join(TrainingProgram, TrainingSession.program_id == TrainingProgram.id)
            .options(
                joinedload(SessionEnrollment.session).joinedload(TrainingSession.trainer),
                joinedload(SessionEnrollment.session).joinedload(TrainingSession.program),
            )
            .filter(
                SessionEnrollment.employee_id == employee_id,
                SessionEnrollment.completed == False,
                TrainingSession.is_active == True,
                TrainingSession.session_datetime >= now,
            )
            .order_by(TrainingSession.session_datetime)
            .limit(limit)
            .all()
        )

    def count_all(self, db: Session, *, completed: Optional[bool] = None) -> int:
        query = db.query(SessionEnrollment)
        if completed is not None:
            query = query.filter(SessionEnrollment.completed == completed)
        return query.count()

    def mark_complete(
        self, db: Session, *, enrollments: List[SessionEnrollment], completion_date: datetime, notes: Optional[str], commit: bool = True
    ) -> int:
        for enrollment in enrollments:
            enrollment.completed = True
            enrollment.completion_date = completion_date
            enrollment.notes = notes
            db.add(enrollment)
        db.flush()
        if commit:
            db.commit()
        return len(enrollments)


session_enrollment = CRUDSessionEnrollment(SessionEnrollment)
