from fastapi import HTTPException, status

from app.core.constants import RoleEnum
from app.models.training_program import TrainingProgram
from app.models.training_session import TrainingSession
from app.schemas.user import UserContext


class PermissionHelper:
    @staticmethod
    def is_admin(context: UserContext) -> bool:
        return context.role == RoleEnum.ADMIN

    @staticmethod
    def is_manager(context: UserContext) -> bool:
        return context.role == RoleEnum.MANAGER

    @staticmethod
    def is_trainer(context: UserContext) -> bool:
        return context.role == RoleEnum.TRAINER

    @staticmethod
    def is_employee(context: UserContext) -> bool:
        return context.role == RoleEnum.EMPLOYEE

    @staticmethod
    def is_program_owner(context: UserContext, program: TrainingProgram) -> bool:
        return program.manager_id == context.id

    @staticmethod
    def is_session_owner(context: UserContext, session: TrainingSession) -> bool:
        return session.trainer_id == context.id

    @staticmethod
    def require_program_owner(context: UserContext, program: TrainingProgram):
        if not PermissionHelper.is_program_owner(context, program):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You can only manage assignments for programs you own."
            )

    @staticmethod
    def require_session_owner(context: UserContext, session: TrainingSession):
        if not PermissionHelper.is_session_owner(context, session):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You can only manage enrollments for sessions you lead."
            )

    @staticmethod
    def require_self_or_admin(context: UserContext, user_id: int):
        """Non-admins may only scope a query to their own id."""
        if not PermissionHelper.is_admin(context) and user_id != context.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You can only view your own statistics."
            )
