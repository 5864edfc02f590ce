from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from pydantic import ValidationError
from sqlalchemy.orm import Session
from typing import Optional

from app.core.constants import RoleEnum
from app.core.database import SessionLocal
from app.core.security import decode_access_token
from app.crud.user import user as user_crud
from app.crud.token_denylist import token_denylist as token_denylist_crud
from app.schemas.token import TokenPayload
from app.schemas.user import UserContext

http_bearer = HTTPBearer(auto_error=False)

CREDENTIALS_ERROR = "Could not validate credentials"
INACTIVE_ERROR = "Your account is inactive."
FORBIDDEN_ERROR = "You do not have permission to access this resource."

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_transactional_db():
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

def get_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(http_bearer)) -> str:
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=CREDENTIALS_ERROR,
        )
    return credentials.credentials

def get_current_user(
    db: Session = Depends(get_db),
    token: str = Depends(get_token),
) -> UserContext:
    try:
        payload = decode_access_token(token)
        token_data = TokenPayload(**payload)
    except (JWTError, ValidationError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=CREDENTIALS_ERROR,
        )

    if token_data.user_id is None or token_denylist_crud.is_revoked(db, jti=token_data.jti):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=CREDENTIALS_ERROR,
        )

    # Role and status always come from the database, never from the token.
    user = user_crud.get(db, id=token_data.user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=CREDENTIALS_ERROR,
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=INACTIVE_ERROR,
        )

    return UserContext(user=user)

def require_role(*roles: RoleEnum):
    """Dependency that requires an authenticated caller holding one of ``roles``."""
    allowed = set(roles)

    def _verify_role(context: UserContext = Depends(get_current_user)) -> UserContext:
        if context.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=FORBIDDEN_ERROR,
            )
        return context
    return _verify_role
