from datetime import date
from typing import Any, List, Optional
from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from app.crud.base import CRUDBase
from app.models.program_assignment import ProgramAssignment
from app.models.training_program import TrainingProgram
from app.models.training_session import TrainingSession
from app.schemas.training_program import TrainingProgramCreate, TrainingProgramUpdate


class CRUDTrainingProgram(CRUDBase[TrainingProgram, TrainingProgramCreate, TrainingProgramUpdate]):
    def get(self, db: Session, id: Any) -> Optional[TrainingProgram]:
        return (
            db.query(TrainingProgram)
            .options(joinedload(TrainingProgram.manager))
            .filter(TrainingProgram.id == id)
            .first()
        )

    def get_active(self, db: Session, *, id: Any) -> Optional[TrainingProgram]:
        return (
            db.query(TrainingProgram)
            .options(joinedload(TrainingProgram.manager))
            .filter(TrainingProgram.id == id, TrainingProgram.is_active == True)
            .first()
        )

    def get_visible(
        self,
        db: Session,
        *,
        manager_id: Optional[int] = None,
        trainer_id: Optional[int] = None,
        employee_id: Optional[int] = None,
        deadline_from: Optional[date] = None,
        deadline_to: Optional[date] = None,
    ) -> List[TrainingProgram]:
        """Active programs, optionally narrowed to those a given user can see."""
        query = (
            db.query(TrainingProgram)
            .options(joinedload(TrainingProgram.manager))
            .filter(TrainingProgram.is_active == True)
        )
        if manager_id is not None:
            query = query.filter(TrainingProgram.manager_id == manager_id)
        if trainer_id is not None:
            trainer_programs = select(TrainingSession.program_id).where(
                TrainingSession.trainer_id == trainer_id,
                TrainingSession.is_active == True,
            )
            query = query.filter(TrainingProgram.id.in_(trainer_programs))
        if employee_id is not None:
            assigned_programs = select(ProgramAssignment.program_id).where(
                ProgramAssignment.employee_id == employee_id
            )
            query = query.filter(TrainingProgram.id.in_(assigned_programs))
        if deadline_from is not None:
            query = query.filter(TrainingProgram.deadline >= deadline_from)
        if deadline_to is not None:
            query = query.filter(TrainingProgram.deadline <= deadline_to)
        return query.order_by(TrainingProgram.deadline, TrainingProgram.id).all()

    def count_active(self, db: Session, *, manager_id: Optional[int] = None) -> int:
        query = db.query(TrainingProgram).filter(TrainingProgram.is_active == True)
        if manager_id is not None:
            query = query.filter(TrainingProgram.manager_id == manager_id)
        return query.count()

    def get_by_manager(self, db: Session, *, manager_id: int) -> List[TrainingProgram]:
        return (
            db.query(TrainingProgram)
            .filter(TrainingProgram.manager_id == manager_id, TrainingProgram.is_active == True)
            .order_by(TrainingProgram.deadline)
            .all()
        )


training_program = CRUDTrainingProgram(TrainingProgram)
