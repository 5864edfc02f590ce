from typing import Any, List, Optional
from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload

from app.crud.base import CRUDBase
from app.models.session_enrollment import SessionEnrollment
from app.models.training_session import TrainingSession
from app.schemas.training_program import SessionCreate


class CRUDTrainingSession(CRUDBase[TrainingSession, SessionCreate, SessionCreate]):
    def get(self, db: Session, id: Any) -> Optional[TrainingSession]:
        return (
            db.query(TrainingSession)
            .options(joinedload(TrainingSession.program))
            .filter(TrainingSession.id == id)
            .first()
        )

    def get_active_by_program(self, db: Session, *, program_id: int) -> List[TrainingSession]:
        return (
            db.query(TrainingSession)
            .options(joinedload(TrainingSession.trainer))
            .filter(TrainingSession.program_id == program_id, TrainingSession.is_active == True)
            .order_by(TrainingSession.session_datetime)
            .all()
        )

    def get_active_ids_by_programs(self, db: Session, *, program_ids: List[int]) -> List[int]:
        if not program_ids:
            return []
        rows = (
            db.query(TrainingSession.id)
            .filter(TrainingSession.program_id.in_(program_ids), TrainingSession.is_active == True)
            .all()
        )
        return [row.id for row in rows]

    def get_by_trainer(self, db: Session, *, trainer_id: int) -> List[TrainingSession]:
        return (
            db.query(TrainingSession)
            .options(joinedload(TrainingSession.program))
            .filter(TrainingSession.trainer_id == trainer_id, TrainingSession.is_active == True)
            .order_by(TrainingSession.session_datetime)
            .all()
        )

    def trainer_has_active_session(self, db: Session, *, program_id: int, trainer_id: int) -> bool:
        return (
            db.query(TrainingSession.id)
            .filter(
                TrainingSession.program_id == program_id,
                TrainingSession.trainer_id == trainer_id,
                TrainingSession.is_active == True,
            )
            .first()
            is not None
        )

    def count_active(self, db: Session, *, trainer_id: Optional[int] = None) -> int:
        query = db.query(TrainingSession).filter(TrainingSession.is_active == True)
        if trainer_id is not None:
            query = query.filter(TrainingSession.trainer_id == trainer_id)
        return query.count()

    def delete_by_program(self, db: Session, *, program_id: int, commit: bool = True) -> int:
        """Hard delete every session of a program along with its enrollments."""
        session_ids = select(TrainingSession.id).where(TrainingSession.program_id == program_id)
        db.query(SessionEnrollment).filter(
            SessionEnrollment.session_id.in_(session_ids)
        ).delete(synchronize_session=False)
        deleted = (
            db.query(TrainingSession)
            .filter(TrainingSession.program_id == program_id)
            .delete(synchronize_session=False)
        )
        db.flush()
        if commit:
            db.commit()
        return deleted

    def deactivate_by_program(self, db: Session, *, program_id: int, commit: bool = True) -> int:
        updated = (
            db.query(TrainingSession)
            .filter(TrainingSession.program_id == program_id)
            .update({TrainingSession.is_active: False}, synchronize_session=False)
        )
        db.flush()
        if commit:
            db.commit()
        return updated


training_session = CRUDTrainingSession(TrainingSession)
