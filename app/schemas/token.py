from typing import Optional

from pydantic import BaseModel, EmailStr

from app.schemas.user import User


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class TokenPayload(BaseModel):
    """Claims carried by an access token. Role is not a claim; it is read from the user row."""
    user_id: Optional[int] = None
    jti: Optional[str] = None
    exp: Optional[int] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class LoginResponse(BaseModel):
    token: Token
    user: User
