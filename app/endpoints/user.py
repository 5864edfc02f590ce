from typing import List, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.constants import RoleEnum
from app.schemas.response import APIResponse
from app.schemas.user import User, UserContext, UserCreate, UserDeactivated, UserDetail, UserDisplay, UserOption, UserUpdate
from app.services.user import user_service
from app.utils import deps

router = APIRouter()


@router.get("", response_model=APIResponse[List[UserDisplay]])
def list_users(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user),
    role: Optional[str] = None,
    is_active: Optional[bool] = None,
    search: Optional[str] = None,
):
    users = user_service.list_users(db, role=role, is_active=is_active, search=search)
    return APIResponse(
        message="Users retrieved successfully",
        data=[UserDisplay.model_validate(u) for u in users],
    )


@router.post("", response_model=APIResponse[User], status_code=status.HTTP_201_CREATED)
def create_user(
    *,
    db: Session = Depends(deps.get_transactional_db),
    user_in: UserCreate,
    context: UserContext = Depends(deps.require_role(RoleEnum.ADMIN))
):
    new_user = user_service.create_user(db, user_in=user_in)
    return APIResponse(message="User created successfully", data=User.model_validate(new_user))


@router.get("/by-role/{role}", response_model=APIResponse[List[UserOption]])
def list_users_by_role(
    role: str,
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user)
):
    users = user_service.list_by_role(db, role=role)
    return APIResponse(
        message="Users retrieved successfully",
        data=[UserOption.model_validate(u) for u in users],
    )


@router.get("/{user_id}", response_model=APIResponse[UserDetail])
def read_user(
    user_id: int,
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user)
):
    detail = user_service.get_user_detail(db, user_id=user_id, context=context)
    return APIResponse(message="User retrieved successfully", data=detail)


@router.patch("/{user_id}", response_model=APIResponse[User])
def update_user(
    *,
    user_id: int,
    db: Session = Depends(deps.get_transactional_db),
    user_in: UserUpdate,
    context: UserContext = Depends(deps.require_role(RoleEnum.ADMIN))
):
    updated = user_service.update_user(db, user_id=user_id, user_in=user_in, context=context)
    return APIResponse(message="User updated successfully", data=User.model_validate(updated))


@router.delete("/{user_id}", response_model=APIResponse[UserDeactivated])
def delete_user(
    user_id: int,
    db: Session = Depends(deps.get_transactional_db),
    context: UserContext = Depends(deps.require_role(RoleEnum.ADMIN))
):
    user = user_service.deactivate_user(db, user_id=user_id, context=context)
    return APIResponse(
        message="User deactivated successfully",
        data=UserDeactivated(id=user.id, is_active=user.is_active),
    )
