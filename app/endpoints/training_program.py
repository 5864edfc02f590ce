from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.constants import RoleEnum
from app.schemas.response import APIResponse
from app.schemas.training_program import (
    AdminProgramDetail, ProgramCard, ProgramDetail, TrainingProgram,
    TrainingProgramCreate, TrainingProgramCreated, TrainingProgramUpdate
)
from app.schemas.user import UserContext
from app.services.training_program import training_program_service
from app.utils import deps

router = APIRouter()


@router.get("", response_model=APIResponse[List[ProgramCard]])
def list_training_programs(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user),
    upcoming: bool = False
):
    cards = training_program_service.training_program_cards(db, context=context, upcoming_only=upcoming)
    return APIResponse(message="Training programs retrieved successfully", data=cards)


@router.post("", response_model=APIResponse[TrainingProgramCreated], status_code=status.HTTP_201_CREATED)
def create_training_program(
    *,
    db: Session = Depends(deps.get_transactional_db),
    program_in: TrainingProgramCreate,
    context: UserContext = Depends(deps.require_role(RoleEnum.ADMIN))
):
    created = training_program_service.create_program(db, program_in=program_in)
    return APIResponse(message="Training program created successfully", data=created)


@router.get("/{program_id}", response_model=APIResponse[ProgramDetail])
def read_training_program(
    *,
    db: Session = Depends(deps.get_db),
    program_id: int,
    context: UserContext = Depends(deps.get_current_user)
):
    detail = training_program_service.get_program_detail(db, program_id=program_id, context=context)
    return APIResponse(message="Training program retrieved successfully", data=detail)


@router.patch("/{program_id}", response_model=APIResponse[AdminProgramDetail])
def update_training_program(
    *,
    db: Session = Depends(deps.get_transactional_db),
    program_id: int,
    program_in: TrainingProgramUpdate,
    context: UserContext = Depends(deps.require_role(RoleEnum.ADMIN))
):
    detail = training_program_service.update_program(db, program_id=program_id, program_in=program_in)
    return APIResponse(message="Training program updated successfully", data=detail)


@router.delete("/{program_id}", response_model=APIResponse[TrainingProgram])
def delete_training_program(
    *,
    db: Session = Depends(deps.get_transactional_db),
    program_id: int,
    context: UserContext = Depends(deps.require_role(RoleEnum.ADMIN))
):
    program = training_program_service.deactivate_program(db, program_id=program_id)
    return APIResponse(message="Training program deactivated successfully", data=TrainingProgram.model_validate(program))
