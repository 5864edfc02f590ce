import logging
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.crud.program_assignment import program_assignment as crud_program_assignment
from app.crud.session_enrollment import session_enrollment as crud_session_enrollment
from app.crud.training_session import training_session as crud_training_session
from app.models.session_enrollment import SessionEnrollment
from app.models.training_session import TrainingSession
from app.schemas.session_enrollment import CompleteAllResult, EnrollmentUpdate
from app.schemas.user import UserContext
from app.utils.permission import PermissionHelper as permission_helper
from app.utils.time import utcnow

logger = logging.getLogger(__name__)


class SessionEnrollmentService:

    def _get_session_or_404(self, db: Session, session_id: int) -> TrainingSession:
        session = crud_training_session.get(db, id=session_id)
        if not session:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found.")
        return session

    def enroll(self, db: Session, *, session_id: int, context: UserContext, notes: Optional[str] = None) -> SessionEnrollment:
        session = self._get_session_or_404(db, session_id)
        if not session.is_active:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Session is not active.")

        assignment = crud_program_assignment.get_by_program_and_employee(
            db, program_id=session.program_id, employee_id=context.id
        )
        if not assignment:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You are not assigned to this training program.",
            )

        if crud_session_enrollment.get_by_session_and_employee(db, session_id=session.id, employee_id=context.id):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="You are already enrolled in this session.",
            )

        enrollment = crud_session_enrollment.create(
            db,
            obj_in={
                "session_id": session.id,
                "employee_id": context.id,
                "completed": False,
                "completion_date": None,
                "notes": notes,
            },
            commit=False,
        )
        logger.info(f"Employee {context.id} enrolled in session {session.id}")
        return enrollment

    def unenroll(self, db: Session, *, session_id: int, context: UserContext) -> None:
        enrollment = crud_session_enrollment.get_by_session_and_employee(
            db, session_id=session_id, employee_id=context.id
        )
        if not enrollment:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Enrollment not found.")
        if enrollment.completed:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cannot unenroll from completed sessions.",
            )

        crud_session_enrollment.delete(db, id=enrollment.id, commit=False)
        logger.info(f"Employee {context.id} unenrolled from session {session_id}")

    def mark_complete(
        self, db: Session, *, enrollment_id: int, update_in: EnrollmentUpdate, context: UserContext
    ) -> SessionEnrollment:
        if update_in.completed is not True:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Can only mark enrollments as complete, not incomplete",
            )

        enrollment = crud_session_enrollment.get(db, id=enrollment_id)
        if not enrollment:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Enrollment not found.")
        permission_helper.require_session_owner(context, enrollment.session)

        notes = update_in.notes or enrollment.notes
        crud_session_enrollment.mark_complete(
            db, enrollments=[enrollment], completion_date=utcnow(), notes=notes, commit=False
        )
        db.refresh(enrollment)
        logger.info(f"Trainer {context.id} marked enrollment {enrollment.id} complete")
        return enrollment

    def complete_all(
        self, db: Session, *, session_id: int, context: UserContext, notes: Optional[str] = None
    ) -> CompleteAllResult:
        session = self._get_session_or_404(db, session_id)
        permission_helper.require_session_owner(context, session)

        enrollments = crud_session_enrollment.get_by_session(db, session_id=session.id)
        pending = [e for e in enrollments if not e.completed]
        already_completed = len(enrollments) - len(pending)
        if not pending:
            return CompleteAllResult(
                updated=0,
                already_completed=already_completed,
                message="All enrollments are already completed.",
            )

        updated = crud_session_enrollment.mark_complete(
            db, enrollments=pending, completion_date=utcnow(), notes=notes, commit=False
        )
        logger.info(f"Trainer {context.id} completed {updated} enrollment(s) in session {session.id}")
        return CompleteAllResult(
            updated=updated,
            already_completed=already_completed,
            message=f"Marked {updated} enrollment(s) as complete.",
        )


session_enrollment_service = SessionEnrollmentService()
