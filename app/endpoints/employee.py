from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.constants import RoleEnum
from app.schemas.response import APIResponse
from app.schemas.stats import EmployeeDashboardStats, UpcomingSession
from app.schemas.user import UserContext
from app.services.stats import stats_service
from app.utils import deps

router = APIRouter()

require_employee = deps.require_role(RoleEnum.EMPLOYEE)


@router.get("/dashboard-stats", response_model=APIResponse[EmployeeDashboardStats])
def get_employee_dashboard_stats(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(require_employee)
):
    stats = stats_service.employee_dashboard_stats(db, employee_id=context.id)
    return APIResponse(message="Dashboard stats retrieved successfully", data=stats)


@router.get("/upcoming-sessions", response_model=APIResponse[List[UpcomingSession]])
def get_upcoming_sessions(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(require_employee)
):
    sessions = stats_service.upcoming_enrolled_sessions(db, employee_id=context.id)
    return APIResponse(message="Upcoming sessions retrieved successfully", data=sessions)
