from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.constants import RoleEnum
from app.schemas.program_assignment import AssignEmployeeRequest, AssignmentCreated, BulkAssignResult, BulkRemoveResult
from app.schemas.response import APIResponse
from app.schemas.user import UserContext
from app.services.program_assignment import program_assignment_service
from app.utils import deps

router = APIRouter()

require_manager = deps.require_role(RoleEnum.MANAGER)


@router.post("/{program_id}/assign", response_model=APIResponse[AssignmentCreated], status_code=status.HTTP_201_CREATED)
def assign_employee(
    *,
    db: Session = Depends(deps.get_transactional_db),
    program_id: int,
    assign_in: AssignEmployeeRequest,
    context: UserContext = Depends(require_manager)
):
    assignment = program_assignment_service.assign_employee(
        db, program_id=program_id, assign_in=assign_in, context=context
    )
    return APIResponse(message="Employee assigned successfully", data=assignment)


@router.delete("/{program_id}/assign", response_model=APIResponse[BulkRemoveResult])
def remove_all_employees(
    *,
    db: Session = Depends(deps.get_transactional_db),
    program_id: int,
    context: UserContext = Depends(require_manager)
):
    result = program_assignment_service.remove_all(db, program_id=program_id, context=context)
    return APIResponse(message=result.message, data=result)


@router.delete("/{program_id}/assign/{employee_id}", response_model=APIResponse[None])
def remove_employee(
    *,
    db: Session = Depends(deps.get_transactional_db),
    program_id: int,
    employee_id: int,
    context: UserContext = Depends(require_manager)
):
    program_assignment_service.remove_employee(
        db, program_id=program_id, employee_id=employee_id, context=context
    )
    return APIResponse(message="Employee removed from program successfully")


@router.post("/{program_id}/assign-all", response_model=APIResponse[BulkAssignResult])
def assign_all_employees(
    *,
    db: Session = Depends(deps.get_transactional_db),
    program_id: int,
    context: UserContext = Depends(require_manager)
):
    result = program_assignment_service.assign_all(db, program_id=program_id, context=context)
    return APIResponse(message=result.message, data=result)
