from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.constants import RoleEnum
from app.schemas.response import APIResponse
from app.schemas.stats import AdminDashboardStats
from app.schemas.user import UserContext
from app.services.stats import stats_service
from app.utils import deps

router = APIRouter()


@router.get("/dashboard-stats", response_model=APIResponse[AdminDashboardStats])
def get_admin_dashboard_stats(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.require_role(RoleEnum.ADMIN))
):
    """Role head-counts plus active session and program totals."""
    stats = stats_service.admin_dashboard_stats(db)
    return APIResponse(message="Dashboard stats retrieved successfully", data=stats)
