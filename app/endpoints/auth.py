from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.schemas.response import APIResponse
from app.schemas.token import LoginRequest, LoginResponse
from app.schemas.user import User, UserContext, UserSignup
from app.services.auth import auth_service
from app.utils import deps

router = APIRouter()

@router.post("/signup", response_model=APIResponse[User], status_code=status.HTTP_201_CREATED)
def signup(
    *,
    db: Session = Depends(deps.get_transactional_db),
    user_in: UserSignup
):
    """Self-service registration. New accounts are employees."""
    new_user = auth_service.signup(db, user_in=user_in)
    return APIResponse(message="Account created successfully", data=User.model_validate(new_user))

@router.post("/login", response_model=APIResponse[LoginResponse])
def login_for_access_token(
    request: LoginRequest,
    db: Session = Depends(deps.get_db)
):
    login_response = auth_service.login(db, email=request.email, password=request.password)
    return APIResponse(message="Login successful", data=login_response)

@router.post("/logout", response_model=APIResponse[None])
def logout(
    db: Session = Depends(deps.get_transactional_db),
    token: str = Depends(deps.get_token),
    context: UserContext = Depends(deps.get_current_user)
):
    auth_service.logout(db, token=token)
    return APIResponse(message="Logged out successfully")

@router.get("/me", response_model=APIResponse[User])
def read_current_user(
    context: UserContext = Depends(deps.get_current_user)
):
    return APIResponse(message="Current user retrieved successfully", data=context.user)
