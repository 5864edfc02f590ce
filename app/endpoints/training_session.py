from typing import Optional
from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.orm import Session

from app.core.constants import RoleEnum
from app.schemas.response import APIResponse
from app.schemas.session_enrollment import CompleteAllRequest, CompleteAllResult, EnrollRequest, SessionEnrollment
from app.schemas.user import UserContext
from app.services.session_enrollment import session_enrollment_service
from app.utils import deps

router = APIRouter()


@router.post("/{session_id}/enroll", response_model=APIResponse[SessionEnrollment], status_code=status.HTTP_201_CREATED)
def enroll_in_session(
    *,
    db: Session = Depends(deps.get_transactional_db),
    session_id: int,
    enroll_in: Optional[EnrollRequest] = Body(None),
    context: UserContext = Depends(deps.require_role(RoleEnum.EMPLOYEE))
):
    enrollment = session_enrollment_service.enroll(
        db, session_id=session_id, context=context, notes=enroll_in.notes if enroll_in else None
    )
    return APIResponse(message="Enrolled in session successfully", data=SessionEnrollment.model_validate(enrollment))


@router.delete("/{session_id}/enroll", response_model=APIResponse[None])
def unenroll_from_session(
    *,
    db: Session = Depends(deps.get_transactional_db),
    session_id: int,
    context: UserContext = Depends(deps.require_role(RoleEnum.EMPLOYEE))
):
    session_enrollment_service.unenroll(db, session_id=session_id, context=context)
    return APIResponse(message="Unenrolled from session successfully")


@router.post("/{session_id}/complete-all", response_model=APIResponse[CompleteAllResult])
def complete_all_enrollments(
    *,
    db: Session = Depends(deps.get_transactional_db),
    session_id: int,
    complete_in: Optional[CompleteAllRequest] = Body(None),
    context: UserContext = Depends(deps.require_role(RoleEnum.TRAINER))
):
    result = session_enrollment_service.complete_all(
        db, session_id=session_id, context=context, notes=complete_in.notes if complete_in else None
    )
    return APIResponse(message=result.message, data=result)
