from pydantic import BaseModel, ConfigDict, StrictBool
from typing import Optional
from datetime import datetime


class EnrollRequest(BaseModel):
    notes: Optional[str] = None


class EnrollmentUpdate(BaseModel):
    # only a literal JSON true is accepted; False is rejected by the service
    completed: Optional[StrictBool] = None
    notes: Optional[str] = None


class CompleteAllRequest(BaseModel):
    notes: Optional[str] = None


class SessionEnrollment(BaseModel):
    id: int
    session_id: int
    employee_id: int
    completed: bool
    completion_date: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class CompleteAllResult(BaseModel):
    updated: int
    already_completed: int
    message: str
