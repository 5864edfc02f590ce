from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from app.crud.base import CRUDBase
from app.models.program_assignment import ProgramAssignment
from app.models.session_enrollment import SessionEnrollment
from app.models.training_program import TrainingProgram
from app.models.training_session import TrainingSession
from app.schemas.program_assignment import ProgramAssignment as ProgramAssignmentSchema


class CRUDProgramAssignment(CRUDBase[ProgramAssignment, ProgramAssignmentSchema, ProgramAssignmentSchema]):
    def get_by_program_and_employee(self, db: Session, *, program_id: int, employee_id: int) -> Optional[ProgramAssignment]:
        return db.query(ProgramAssignment).filter(
            ProgramAssignment.program_id == program_id,
            ProgramAssignment.employee_id == employee_id,
        ).first()

    def get_by_program(self, db: Session, *, program_id: int) -> List[ProgramAssignment]:
        return (
            db.query(ProgramAssignment)
            .options(joinedload(ProgramAssignment.employee))
            .filter(ProgramAssignment.program_id == program_id)
            .order_by(ProgramAssignment.created_at, ProgramAssignment.id)
            .all()
        )

    def get_by_employee(self, db: Session, *, employee_id: int) -> List[ProgramAssignment]:
        return (
            db.query(ProgramAssignment)
            .options(joinedload(ProgramAssignment.program).joinedload(TrainingProgram.manager))
            .filter(ProgramAssignment.employee_id == employee_id)
            .order_by(ProgramAssignment.created_at)
            .all()
        )

    def get_employee_ids(self, db: Session, *, program_id: int) -> List[int]:
        rows = db.query(ProgramAssignment.employee_id).filter(ProgramAssignment.program_id == program_id).all()
        return [row.employee_id for row in rows]

    def get_program_ids_for_employee(self, db: Session, *, employee_id: int) -> List[int]:
        rows = db.query(ProgramAssignment.program_id).filter(ProgramAssignment.employee_id == employee_id).all()
        return [row.program_id for row in rows]

    def count_by_program(self, db: Session, *, program_id: int) -> int:
        return db.query(ProgramAssignment).filter(ProgramAssignment.program_id == program_id).count()

    def remove_with_enrollments(
        self, db: Session, *, program_id: int, employee_ids: Optional[List[int]] = None, commit: bool = True
    ) -> int:
        """Delete assignments of a program, and first the matching employees'
        enrollments in every session of that program.

        ``employee_ids=None`` removes every assignment of the program.
        Returns the number of assignments deleted.
        """
        session_ids = select(TrainingSession.id).where(TrainingSession.program_id == program_id)
        enrollments = db.query(SessionEnrollment).filter(SessionEnrollment.session_id.in_(session_ids))
        assignments = db.query(ProgramAssignment).filter(ProgramAssignment.program_id == program_id)
        if employee_ids is not None:
            if not employee_ids:
                return 0
            enrollments = enrollments.filter(SessionEnrollment.employee_id.in_(employee_ids))
            assignments = assignments.filter(ProgramAssignment.employee_id.in_(employee_ids))

        enrollments.delete(synchronize_session=False)
        removed = assignments.delete(synchronize_session=False)
        db.flush()
        if commit:
            db.commit()
        return removed


program_assignment = CRUDProgramAssignment(ProgramAssignment)
