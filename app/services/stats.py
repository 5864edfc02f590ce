from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.constants import RoleEnum
from app.crud.program_assignment import program_assignment as crud_program_assignment
from app.crud.session_enrollment import session_enrollment as crud_session_enrollment
from app.crud.training_program import training_program as crud_training_program
from app.crud.training_session import training_session as crud_training_session
from app.crud.user import user as crud_user
from app.schemas.stats import (
    AdminDashboardStats, CompletionRate, EmployeeDashboardStats, ProgramCount, SessionCount, UpcomingSession
)
from app.schemas.user import UserContext
from app.utils.permission import PermissionHelper as permission_helper
from app.utils.time import utcnow


class StatsService:
    """Read-only counters behind the dashboards."""

    def count_users_by_role(self, db: Session, *, role: RoleEnum) -> int:
        return crud_user.count_active_by_role(db, role=role)

    def count_programs(self, db: Session, *, manager_id: Optional[int] = None) -> int:
        return crud_training_program.count_active(db, manager_id=manager_id)

    def count_sessions(self, db: Session, *, trainer_id: Optional[int] = None) -> int:
        return crud_training_session.count_active(db, trainer_id=trainer_id)

    def completion_rate(self, db: Session) -> CompletionRate:
        total = crud_session_enrollment.count_all(db)
        completed = crud_session_enrollment.count_all(db, completed=True)
        rate = round(completed / total * 100, 2) if total > 0 else 0
        return CompletionRate(total=total, completed=completed, rate=rate)

    def admin_dashboard_stats(self, db: Session) -> AdminDashboardStats:
        return AdminDashboardStats(
            admins=self.count_users_by_role(db, role=RoleEnum.ADMIN),
            employees=self.count_users_by_role(db, role=RoleEnum.EMPLOYEE),
            managers=self.count_users_by_role(db, role=RoleEnum.MANAGER),
            trainers=self.count_users_by_role(db, role=RoleEnum.TRAINER),
            active_sessions=self.count_sessions(db),
            active_programs=self.count_programs(db),
        )

    def employee_dashboard_stats(self, db: Session, *, employee_id: int) -> EmployeeDashboardStats:
        now = utcnow()
        enrollments = crud_session_enrollment.get_active_by_employee(db, employee_id=employee_id)

        overdue = sum(1 for e in enrollments if not e.completed and e.session.session_datetime < now)
        completed = sum(1 for e in enrollments if e.completed)

        program_ids = crud_program_assignment.get_program_ids_for_employee(db, employee_id=employee_id)
        available_session_ids = set(crud_training_session.get_active_ids_by_programs(db, program_ids=program_ids))
        enrolled_session_ids = set(crud_session_enrollment.get_enrolled_session_ids(db, employee_id=employee_id))

        return EmployeeDashboardStats(
            total_enrolled=len(enrollments),
            overdue=overdue,
            completed=completed,
            available=len(available_session_ids - enrolled_session_ids),
        )

    def upcoming_enrolled_sessions(
        self, db: Session, *, employee_id: int, limit: Optional[int] = None
    ) -> List[UpcomingSession]:
        enrollments = crud_session_enrollment.get_upcoming_for_employee(
            db,
            employee_id=employee_id,
            now=utcnow(),
            limit=limit or settings.UPCOMING_SESSIONS_LIMIT,
        )
        return [
            UpcomingSession(
                enrollment_id=e.id,
                session_id=e.session.id,
                session_datetime=e.session.session_datetime,
                duration_minutes=e.session.duration_minutes,
                notes=e.session.notes,
                trainer_name=e.session.trainer_name,
                program_id=e.session.program_id,
                program_title=e.session.program.title,
            )
            for e in enrollments
        ]

    def scoped_session_count(self, db: Session, *, context: UserContext, trainer_id: Optional[int]) -> SessionCount:
        """Admins may count any trainer's sessions or all of them; everyone else only their own."""
        if trainer_id is not None:
            permission_helper.require_self_or_admin(context, trainer_id)
        elif not permission_helper.is_admin(context):
            trainer_id = context.id
        return SessionCount(active_sessions=self.count_sessions(db, trainer_id=trainer_id))

    def scoped_program_count(self, db: Session, *, context: UserContext, manager_id: Optional[int]) -> ProgramCount:
        if manager_id is not None:
            permission_helper.require_self_or_admin(context, manager_id)
        elif not permission_helper.is_admin(context):
            manager_id = context.id
        return ProgramCount(active_programs=self.count_programs(db, manager_id=manager_id))


stats_service = StatsService()
