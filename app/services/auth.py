import logging
from datetime import datetime, timezone

from fastapi import HTTPException, status
from jose import JWTError
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.constants import RoleEnum
from app.core.security import create_access_token, decode_access_token, get_password_hash, verify_password
from app.crud.token_denylist import token_denylist as crud_token_denylist
from app.crud.user import user as crud_user
from app.models.user import User
from app.schemas.token import LoginResponse, Token, TokenPayload
from app.schemas.token_denylist import TokenDenylistCreate
from app.schemas.user import UserSignup
from app.utils.time import utcnow

logger = logging.getLogger(__name__)

class AuthService:
    def signup(self, db: Session, *, user_in: UserSignup) -> User:
        if crud_user.get_by_email(db, email=user_in.email):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="A user with this email already exists.",
            )

        user_data = user_in.model_dump(exclude={"password"})
        user_data["role"] = RoleEnum.EMPLOYEE
        user_data["hashed_password"] = get_password_hash(user_in.password)
        user = crud_user.create(db, obj_in=user_data, commit=False)
        logger.info(f"User {user.id} signed up as {user.role.value}")
        return user

    def login(self, db: Session, *, email: str, password: str) -> LoginResponse:
        user = crud_user.get_by_email(db, email=email)
        if not user or not verify_password(password, user.hashed_password):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Incorrect email or password",
            )

        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Your account is inactive.",
            )

        access_token = create_access_token(data={"user_id": user.id})
        return LoginResponse(
            token=Token(access_token=access_token, expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60),
            user=user,
        )

    def logout(self, db: Session, *, token: str) -> None:
        try:
            token_data = TokenPayload(**decode_access_token(token))
        except (JWTError, ValidationError):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

        if not token_data.jti or not token_data.exp:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Token missing JTI or expiration claim")

        purged = crud_token_denylist.purge_expired(db, now=utcnow(), commit=False)
        if purged:
            logger.debug(f"Purged {purged} expired denylist entries")

        if crud_token_denylist.is_revoked(db, jti=token_data.jti):
            return
        crud_token_denylist.create(
            db,
            obj_in=TokenDenylistCreate(
                jti=token_data.jti,
                user_id=token_data.user_id,
                exp=datetime.fromtimestamp(token_data.exp, tz=timezone.utc).replace(tzinfo=None),
            ),
            commit=False,
        )
        logger.info(f"Revoked token for user {token_data.user_id}")


auth_service = AuthService()
