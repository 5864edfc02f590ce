from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.constants import RoleEnum
from app.schemas.response import APIResponse
from app.schemas.stats import CompletionRate, ProgramCount, SessionCount
from app.schemas.user import UserContext
from app.services.stats import stats_service
from app.utils import deps

router = APIRouter()


@router.get("/sessions", response_model=APIResponse[SessionCount])
def count_sessions(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user),
    trainer_id: Optional[int] = Query(None, alias="trainerId")
):
    data = stats_service.scoped_session_count(db, context=context, trainer_id=trainer_id)
    return APIResponse(message="Session count retrieved successfully", data=data)


@router.get("/programs", response_model=APIResponse[ProgramCount])
def count_programs(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user),
    manager_id: Optional[int] = Query(None, alias="managerId")
):
    data = stats_service.scoped_program_count(db, context=context, manager_id=manager_id)
    return APIResponse(message="Program count retrieved successfully", data=data)


@router.get("/completion-rates", response_model=APIResponse[CompletionRate])
def completion_rates(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.require_role(RoleEnum.ADMIN, RoleEnum.MANAGER))
):
    return APIResponse(message="Completion rates retrieved successfully", data=stats_service.completion_rate(db))
