from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator, ConfigDict
from typing import Optional, Any, List, Dict
from datetime import datetime

from app.core.constants import RoleEnum

class UserBase(BaseModel):
    """Base user schema with common fields."""
    email: EmailStr
    first_name: str
    last_name: str
    phone: Optional[str] = None

    @field_validator("first_name", "last_name")
    def not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("Name fields cannot be empty")
        return v.strip()

class UserSignup(UserBase):
    """Self-service registration. New accounts always get the employee role."""
    password: str

    @field_validator("password")
    def validate_password(cls, v):
        if not v or not v.strip():
            raise ValueError("Password cannot be empty or contain only whitespace.")
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters long.")
        return v

class UserCreate(UserSignup):
    """Schema for an admin creating a user; role is required."""
    role: RoleEnum

class UserUpdate(BaseModel):
    """Schema for an admin updating a user. Only provided fields change."""
    email: Optional[EmailStr] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[RoleEnum] = None
    phone: Optional[str] = None
    is_active: Optional[bool] = None
    password: Optional[str] = None

    @field_validator("first_name", "last_name")
    def not_empty(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Name fields cannot be empty")
        return v

    @field_validator("password")
    def validate_password(cls, v):
        if v is not None and len(v) < 8:
            raise ValueError("Password must be at least 8 characters long.")
        return v

    @model_validator(mode="after")
    def reject_null_required_fields(self):
        nulled = [
            f for f in ("email", "first_name", "last_name", "role", "is_active")
            if f in self.model_fields_set and getattr(self, f) is None
        ]
        if nulled:
            raise ValueError(f"{', '.join(nulled)} cannot be null")
        return self

class User(BaseModel):
    """Main user schema for reading user data."""
    id: int
    email: str
    first_name: str
    last_name: str
    role: RoleEnum
    phone: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

class UserDisplay(User):
    """User row with the computed display fields used by the directory."""
    full_name: str = Field(alias="fullName")
    initials: str

class UserOption(BaseModel):
    """Compact user entry for pickers."""
    id: int
    full_name: str = Field(alias="fullName")
    email: str
    role: RoleEnum
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

class UserDetail(User):
    """User row plus the role-specific data only admins receive."""
    managed_programs: Optional[List[Dict[str, Any]]] = Field(None, alias="managedPrograms")
    training_sessions: Optional[List[Dict[str, Any]]] = Field(None, alias="trainingSessions")
    assigned_programs: Optional[List[Dict[str, Any]]] = Field(None, alias="assignedPrograms")
    enrolled_sessions: Optional[List[Dict[str, Any]]] = Field(None, alias="enrolledSessions")

class UserDeactivated(BaseModel):
    id: int
    is_active: bool

class UserContext(BaseModel):
    """The authenticated caller, as re-read from the database for this request."""
    user: User
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    @property
    def id(self) -> int:
        return self.user.id

    @property
    def role(self) -> RoleEnum:
        return self.user.role
