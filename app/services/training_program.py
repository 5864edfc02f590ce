import logging
from datetime import timedelta
from typing import List

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.constants import RoleEnum
from app.crud.program_assignment import program_assignment as crud_program_assignment
from app.crud.session_enrollment import session_enrollment as crud_session_enrollment
from app.crud.training_program import training_program as crud_training_program
from app.crud.training_session import training_session as crud_training_session
from app.crud.user import user as crud_user
from app.models.training_program import TrainingProgram
from app.models.training_session import TrainingSession
from app.schemas.training_program import (
    AdminProgramDetail,
    AdminStats,
    EmployeeInfo,
    EmployeeProgramDetail,
    EmployeeStats,
    ManagerProgramDetail,
    ProgramAssignmentInfo,
    ProgramCard,
    ProgramSession,
    SessionCreate,
    SessionEnrollmentInfo,
    TrainerProgramDetail,
    TrainerStats,
    TrainingProgramCreate,
    TrainingProgramCreated,
    TrainingProgramUpdate,
)
from app.schemas.user import UserContext
from app.utils.permission import PermissionHelper as permission_helper
from app.utils.time import utcnow, utctoday

logger = logging.getLogger(__name__)


def employee_info(user) -> EmployeeInfo:
    return EmployeeInfo(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        full_name=user.full_name,
    )


class TrainingProgramService:

    def get_program_or_404(self, db: Session, program_id: int) -> TrainingProgram:
        program = crud_training_program.get_active(db, id=program_id)
        if not program:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Training program not found.")
        return program

    def can_access_program(self, db: Session, *, program: TrainingProgram, context: UserContext) -> bool:
        if permission_helper.is_admin(context):
            return True
        if permission_helper.is_manager(context):
            return permission_helper.is_program_owner(context, program) and program.is_active
        if permission_helper.is_trainer(context):
            return crud_training_session.trainer_has_active_session(db, program_id=program.id, trainer_id=context.id)
        if permission_helper.is_employee(context):
            return crud_program_assignment.get_by_program_and_employee(
                db, program_id=program.id, employee_id=context.id
            ) is not None
        return False

    # Listing

    def training_program_cards(self, db: Session, *, context: UserContext, upcoming_only: bool = False) -> List[ProgramCard]:
        filters = {}
        if permission_helper.is_manager(context):
            filters["manager_id"] = context.id
        elif permission_helper.is_trainer(context):
            filters["trainer_id"] = context.id
        elif permission_helper.is_employee(context):
            filters["employee_id"] = context.id

        if upcoming_only:
            today = utctoday()
            filters["deadline_from"] = today
            filters["deadline_to"] = today + timedelta(days=settings.UPCOMING_DEADLINE_DAYS)

        programs = crud_training_program.get_visible(db, **filters)
        return [
            ProgramCard(
                id=program.id,
                title=program.title,
                manager_name=program.manager_name,
                deadline=program.deadline,
                enrollment_count=crud_program_assignment.count_by_program(db, program_id=program.id),
            )
            for program in programs
        ]

    # Detail

    def get_program_detail(self, db: Session, *, program_id: int, context: UserContext):
        program = self.get_program_or_404(db, program_id)
        if not self.can_access_program(db, program=program, context=context):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have access to this training program.",
            )

        if context.role == RoleEnum.ADMIN:
            return self.admin_detail(db, program=program)
        if context.role == RoleEnum.MANAGER:
            return self.manager_detail(db, program=program)
        if context.role == RoleEnum.TRAINER:
            return self.trainer_detail(db, program=program, trainer_id=context.id)
        return self.employee_detail(db, program=program, employee_id=context.id)

    @staticmethod
    def _base_fields(program: TrainingProgram) -> dict:
        return {
            "id": program.id,
            "title": program.title,
            "notes": program.notes,
            "manager_id": program.manager_id,
            "manager_name": program.manager_name,
            "deadline": program.deadline,
            "is_active": program.is_active,
            "created_at": program.created_at,
            "updated_at": program.updated_at,
        }

    @staticmethod
    def _session(session: TrainingSession, owner_id: int = None) -> ProgramSession:
        return ProgramSession(
            id=session.id,
            program_id=session.program_id,
            trainer_id=session.trainer_id,
            trainer_name=session.trainer_name,
            session_datetime=session.session_datetime,
            duration_minutes=session.duration_minutes,
            notes=session.notes,
            is_active=session.is_active,
            is_owner=(session.trainer_id == owner_id) if owner_id is not None else None,
        )

    @staticmethod
    def _enrollments(enrollments) -> List[SessionEnrollmentInfo]:
        return [
            SessionEnrollmentInfo(
                id=e.id,
                employee=employee_info(e.employee),
                session_id=e.session_id,
                completed=e.completed,
                completion_date=e.completion_date,
                notes=e.notes,
            )
            for e in enrollments
        ]

    def admin_detail(self, db: Session, *, program: TrainingProgram) -> AdminProgramDetail:
        sessions = crud_training_session.get_active_by_program(db, program_id=program.id)
        enrollments = crud_session_enrollment.get_by_program(db, program_id=program.id)
        stats = AdminStats(
            total_enrolled=crud_program_assignment.count_by_program(db, program_id=program.id),
            completed=crud_session_enrollment.count_by_program(db, program_id=program.id, completed=True),
            overdue=crud_session_enrollment.count_by_program(
                db, program_id=program.id, completed=False, session_before=utcnow()
            ),
        )
        return AdminProgramDetail(
            **self._base_fields(program),
            sessions=[self._session(s) for s in sessions],
            enrolled_employees=self._enrollments(enrollments),
            stats=stats,
        )

    def manager_detail(self, db: Session, *, program: TrainingProgram) -> ManagerProgramDetail:
        assignments = crud_program_assignment.get_by_program(db, program_id=program.id)
        assigned_ids = [a.employee_id for a in assignments]
        available = crud_user.get_active_employees_excluding(db, exclude_ids=assigned_ids)
        return ManagerProgramDetail(
            **self._base_fields(program),
            assigned_employees=[
                ProgramAssignmentInfo(
                    id=a.id,
                    employee=employee_info(a.employee),
                    assigned_by_manager_id=a.assigned_by_manager_id,
                    notes=a.notes,
                    created_at=a.created_at,
                )
                for a in assignments
            ],
            available_employees=[employee_info(u) for u in available],
        )

    def trainer_detail(self, db: Session, *, program: TrainingProgram, trainer_id: int) -> TrainerProgramDetail:
        sessions = crud_training_session.get_active_by_program(db, program_id=program.id)
        enrollments = crud_session_enrollment.get_by_program(db, program_id=program.id)
        return TrainerProgramDetail(
            **self._base_fields(program),
            sessions=[self._session(s, owner_id=trainer_id) for s in sessions],
            enrolled_employees=self._enrollments(enrollments),
            stats=TrainerStats(
                total_enrolled=len(enrollments),
                completed=sum(1 for e in enrollments if e.completed),
            ),
        )

    def employee_detail(self, db: Session, *, program: TrainingProgram, employee_id: int) -> EmployeeProgramDetail:
        sessions = crud_training_session.get_active_by_program(db, program_id=program.id)
        my_enrollments = crud_session_enrollment.get_by_program(db, program_id=program.id, employee_id=employee_id)
        return EmployeeProgramDetail(
            **self._base_fields(program),
            sessions=[self._session(s) for s in sessions],
            my_enrollments=self._enrollments(my_enrollments),
            stats=EmployeeStats(
                enrolled=len(my_enrollments),
                completed=sum(1 for e in my_enrollments if e.completed),
                available=len(sessions) - len(my_enrollments),
            ),
        )

    # Admin writes

    def _validate_staff(self, db: Session, *, manager_id: int = None, sessions: List[SessionCreate] = None):
        if manager_id is not None:
            manager = crud_user.get_active(db, id=manager_id)
            if not manager or manager.role != RoleEnum.MANAGER:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="manager_id must reference an active manager.",
                )
        for session_in in sessions or []:
            trainer = crud_user.get_active(db, id=session_in.trainer_id)
            if not trainer or trainer.role != RoleEnum.TRAINER:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="trainer_id must reference an active trainer.",
                )

    def _insert_sessions(self, db: Session, *, program_id: int, sessions: List[SessionCreate]) -> List[TrainingSession]:
        return crud_training_session.create_many(
            db,
            objs_in=[{**s.model_dump(), "program_id": program_id} for s in sessions],
            commit=False,
        )

    def create_program(self, db: Session, *, program_in: TrainingProgramCreate) -> TrainingProgramCreated:
        """Create a program and its sessions. The caller's transaction commits both or neither."""
        self._validate_staff(db, manager_id=program_in.manager_id, sessions=program_in.sessions)

        program = crud_training_program.create(
            db, obj_in=program_in.model_dump(exclude={"sessions"}), commit=False
        )
        sessions = self._insert_sessions(db, program_id=program.id, sessions=program_in.sessions)
        logger.info(f"Created training program {program.id} with {len(sessions)} session(s)")
        return TrainingProgramCreated(program=program, sessions=sessions)

    def update_program(self, db: Session, *, program_id: int, program_in: TrainingProgramUpdate) -> AdminProgramDetail:
        program = crud_training_program.get(db, id=program_id)
        if not program:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Training program not found.")

        update_data = program_in.model_dump(exclude_unset=True, exclude={"sessions"})
        self._validate_staff(db, manager_id=update_data.get("manager_id"), sessions=program_in.sessions)

        if update_data:
            program = crud_training_program.update(db, db_obj=program, obj_in=update_data, commit=False)

        if program_in.sessions is not None:
            crud_training_session.delete_by_program(db, program_id=program.id, commit=False)
            self._insert_sessions(db, program_id=program.id, sessions=program_in.sessions)
            db.expire_all()
            logger.info(f"Replaced sessions of training program {program.id}")

        logger.info(f"Updated training program {program_id}")
        return self.admin_detail(db, program=crud_training_program.get(db, id=program_id))

    def deactivate_program(self, db: Session, *, program_id: int) -> TrainingProgram:
        program = self.get_program_or_404(db, program_id)
        crud_training_session.deactivate_by_program(db, program_id=program.id, commit=False)
        program = crud_training_program.update(db, db_obj=program, obj_in={"is_active": False}, commit=False)
        logger.info(f"Deactivated training program {program.id}")
        return program


training_program_service = TrainingProgramService()
