import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.core.constants import ROLE_ORDER, VALID_ROLES, RoleEnum
from app.core.security import get_password_hash
from app.crud.program_assignment import program_assignment as crud_program_assignment
from app.crud.session_enrollment import session_enrollment as crud_session_enrollment
from app.crud.training_program import training_program as crud_training_program
from app.crud.training_session import training_session as crud_training_session
from app.crud.user import user as crud_user
from app.models.user import User
from app.schemas.user import User as UserSchema, UserContext, UserCreate, UserDetail, UserUpdate
from app.utils.permission import PermissionHelper as permission_helper

logger = logging.getLogger(__name__)


def parse_role(role: str) -> RoleEnum:
    if role not in VALID_ROLES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid role. Must be one of: {', '.join(VALID_ROLES)}",
        )
    return RoleEnum(role)


class UserService:

    def _get_or_404(self, db: Session, user_id: int) -> User:
        user = crud_user.get(db, id=user_id)
        if not user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
        return user

    def list_users(
        self,
        db: Session,
        *,
        role: Optional[str] = None,
        is_active: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> List[User]:
        role_enum = parse_role(role) if role else None
        users = crud_user.get_filtered(db, role=role_enum, is_active=is_active, search=search)
        return sorted(users, key=lambda u: (ROLE_ORDER[u.role], u.last_name.lower(), u.first_name.lower()))

    def list_by_role(self, db: Session, *, role: str) -> List[User]:
        return crud_user.get_active_by_role(db, role=parse_role(role))

    def get_user_detail(self, db: Session, *, user_id: int, context: UserContext) -> UserDetail:
        """A user row. Admins also get the role-specific program and session data."""
        user = self._get_or_404(db, user_id)
        # Built from the plain row so the ORM relationships of the same name are not picked up.
        detail = UserDetail(**UserSchema.model_validate(user).model_dump())
        if not permission_helper.is_admin(context):
            return detail

        if user.role == RoleEnum.MANAGER:
            detail.managed_programs = [
                self._program_summary(program)
                for program in crud_training_program.get_by_manager(db, manager_id=user.id)
            ]
        elif user.role == RoleEnum.TRAINER:
            detail.training_sessions = [
                {
                    "id": session.id,
                    "program_id": session.program_id,
                    "program_title": session.program.title if session.program else None,
                    "session_datetime": session.session_datetime,
                    "duration_minutes": session.duration_minutes,
                    "notes": session.notes,
                }
                for session in crud_training_session.get_by_trainer(db, trainer_id=user.id)
            ]
        elif user.role == RoleEnum.EMPLOYEE:
            detail.assigned_programs = [
                {
                    "assignment_id": assignment.id,
                    "notes": assignment.notes,
                    "created_at": assignment.created_at,
                    **self._program_summary(assignment.program),
                }
                for assignment in crud_program_assignment.get_by_employee(db, employee_id=user.id)
                if assignment.program and assignment.program.is_active
            ]
            detail.enrolled_sessions = [
                {
                    "enrollment_id": enrollment.id,
                    "session_id": enrollment.session_id,
                    "program_id": enrollment.session.program_id,
                    "session_datetime": enrollment.session.session_datetime,
                    "completed": enrollment.completed,
                    "completion_date": enrollment.completion_date,
                }
                for enrollment in crud_session_enrollment.get_active_by_employee(db, employee_id=user.id)
            ]
        return detail

    @staticmethod
    def _program_summary(program) -> Dict[str, Any]:
        return {
            "id": program.id,
            "title": program.title,
            "deadline": program.deadline,
            "managerName": program.manager_name,
            "is_active": program.is_active,
        }

    def create_user(self, db: Session, *, user_in: UserCreate) -> User:
        if crud_user.get_by_email(db, email=user_in.email):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="A user with this email already exists.",
            )
        user_data = user_in.model_dump(exclude={"password"})
        user_data["hashed_password"] = get_password_hash(user_in.password)
        user = crud_user.create(db, obj_in=user_data, commit=False)
        logger.info(f"Created user {user.id} with role {user.role.value}")
        return user

    def update_user(self, db: Session, *, user_id: int, user_in: UserUpdate, context: UserContext) -> User:
        user = self._get_or_404(db, user_id)
        update_data = user_in.model_dump(exclude_unset=True)

        if user.id == context.id:
            if "role" in update_data and update_data["role"] != user.role:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="You cannot change your own role.",
                )
            if update_data.get("is_active") is False:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="You cannot deactivate your own account.",
                )

        if "email" in update_data and update_data["email"] != user.email:
            existing = crud_user.get_by_email(db, email=update_data["email"])
            if existing and existing.id != user.id:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="A user with this email already exists.",
                )

        password = update_data.pop("password", None)
        if password:
            update_data["hashed_password"] = get_password_hash(password)

        user = crud_user.update(db, db_obj=user, obj_in=update_data, commit=False)
        logger.info(f"Updated user {user.id}: {sorted(update_data.keys())}")
        return user

    def deactivate_user(self, db: Session, *, user_id: int, context: UserContext) -> User:
        if user_id == context.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You cannot delete your own account.",
            )
        user = self._get_or_404(db, user_id)
        user = crud_user.update_user_active_status(db, user=user, is_active=False, commit=False)
        logger.info(f"Deactivated user {user.id}")
        return user


user_service = UserService()
