from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

from app.schemas.training_program import EmployeeInfo


class AssignEmployeeRequest(BaseModel):
    employee_id: int = Field(..., alias="employeeId")
    notes: Optional[str] = None
    model_config = ConfigDict(populate_by_name=True)


class ProgramAssignment(BaseModel):
    id: int
    program_id: int
    employee_id: int
    assigned_by_manager_id: int
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class AssignmentCreated(BaseModel):
    id: int
    employee: EmployeeInfo
    created_at: Optional[datetime] = None


class BulkAssignResult(BaseModel):
    assigned: int
    message: str


class BulkRemoveResult(BaseModel):
    removed: int
    message: str
