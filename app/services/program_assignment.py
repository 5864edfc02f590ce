import logging

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.core.constants import RoleEnum
from app.crud.program_assignment import program_assignment as crud_program_assignment
from app.crud.training_program import training_program as crud_training_program
from app.crud.user import user as crud_user
from app.models.training_program import TrainingProgram
from app.schemas.program_assignment import (
    AssignEmployeeRequest, AssignmentCreated, BulkAssignResult, BulkRemoveResult
)
from app.schemas.user import UserContext
from app.services.training_program import employee_info
from app.utils.permission import PermissionHelper as permission_helper

logger = logging.getLogger(__name__)


class ProgramAssignmentService:
    """Manager-side assignment of employees to the programs they own."""

    def _get_owned_program(self, db: Session, *, program_id: int, context: UserContext) -> TrainingProgram:
        program = crud_training_program.get(db, id=program_id)
        if not program:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Training program not found.")
        permission_helper.require_program_owner(context, program)
        return program

    def assign_employee(
        self, db: Session, *, program_id: int, assign_in: AssignEmployeeRequest, context: UserContext
    ) -> AssignmentCreated:
        program = self._get_owned_program(db, program_id=program_id, context=context)

        employee = crud_user.get(db, id=assign_in.employee_id)
        if not employee:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Employee not found.")
        if employee.role != RoleEnum.EMPLOYEE:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User is not an employee.")
        if not employee.is_active:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Employee is inactive.")

        existing = crud_program_assignment.get_by_program_and_employee(
            db, program_id=program.id, employee_id=employee.id
        )
        if existing:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Employee is already assigned to this program.",
            )

        assignment = crud_program_assignment.create(
            db,
            obj_in={
                "program_id": program.id,
                "employee_id": employee.id,
                "assigned_by_manager_id": context.id,
                "notes": assign_in.notes,
            },
            commit=False,
        )
        logger.info(f"Manager {context.id} assigned employee {employee.id} to program {program.id}")
        return AssignmentCreated(id=assignment.id, employee=employee_info(employee), created_at=assignment.created_at)

    def assign_all(self, db: Session, *, program_id: int, context: UserContext) -> BulkAssignResult:
        program = self._get_owned_program(db, program_id=program_id, context=context)

        assigned_ids = crud_program_assignment.get_employee_ids(db, program_id=program.id)
        remaining = crud_user.get_active_employees_excluding(db, exclude_ids=assigned_ids)
        if not remaining:
            return BulkAssignResult(assigned=0, message="All active employees are already assigned.")

        crud_program_assignment.create_many(
            db,
            objs_in=[
                {"program_id": program.id, "employee_id": employee.id, "assigned_by_manager_id": context.id}
                for employee in remaining
            ],
            commit=False,
        )
        logger.info(f"Manager {context.id} assigned {len(remaining)} employee(s) to program {program.id}")
        return BulkAssignResult(
            assigned=len(remaining),
            message=f"Assigned {len(remaining)} employee(s) to the program.",
        )

    def remove_employee(self, db: Session, *, program_id: int, employee_id: int, context: UserContext) -> None:
        program = self._get_owned_program(db, program_id=program_id, context=context)

        assignment = crud_program_assignment.get_by_program_and_employee(
            db, program_id=program.id, employee_id=employee_id
        )
        if not assignment:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assignment not found.")

        crud_program_assignment.remove_with_enrollments(
            db, program_id=program.id, employee_ids=[employee_id], commit=False
        )
        logger.info(f"Manager {context.id} removed employee {employee_id} from program {program.id}")

    def remove_all(self, db: Session, *, program_id: int, context: UserContext) -> BulkRemoveResult:
        program = self._get_owned_program(db, program_id=program_id, context=context)

        removed = crud_program_assignment.remove_with_enrollments(db, program_id=program.id, commit=False)
        logger.info(f"Manager {context.id} removed {removed} assignment(s) from program {program.id}")
        return BulkRemoveResult(removed=removed, message=f"Removed {removed} employee(s) from the program.")


program_assignment_service = ProgramAssignmentService()
