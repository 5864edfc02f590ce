from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.constants import RoleEnum
from app.schemas.response import APIResponse
from app.schemas.session_enrollment import EnrollmentUpdate, SessionEnrollment
from app.schemas.user import UserContext
from app.services.session_enrollment import session_enrollment_service
from app.utils import deps

router = APIRouter()


@router.patch("/{enrollment_id}", response_model=APIResponse[SessionEnrollment])
def mark_enrollment_complete(
    *,
    db: Session = Depends(deps.get_transactional_db),
    enrollment_id: int,
    update_in: EnrollmentUpdate,
    context: UserContext = Depends(deps.require_role(RoleEnum.TRAINER))
):
    enrollment = session_enrollment_service.mark_complete(
        db, enrollment_id=enrollment_id, update_in=update_in, context=context
    )
    return APIResponse(message="Enrollment marked as complete", data=SessionEnrollment.model_validate(enrollment))
