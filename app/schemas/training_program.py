from datetime import date, datetime, timezone
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class SessionCreate(BaseModel):
    session_datetime: datetime
    duration_minutes: int = Field(..., gt=0)
    trainer_id: int
    notes: Optional[str] = None
    is_active: bool = True

    @field_validator("session_datetime")
    def normalize_datetime(cls, v):
        return _to_naive_utc(v)


class TrainingProgramCreate(BaseModel):
    title: str
    notes: Optional[str] = None
    manager_id: int
    deadline: date
    is_active: bool = True
    sessions: List[SessionCreate] = Field(..., min_length=1)

    @field_validator("title")
    def title_not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()


class TrainingProgramUpdate(BaseModel):
    """Partial update. A supplied ``sessions`` list replaces every existing session."""
    title: Optional[str] = None
    notes: Optional[str] = None
    manager_id: Optional[int] = None
    deadline: Optional[date] = None
    is_active: Optional[bool] = None
    sessions: Optional[List[SessionCreate]] = Field(None, min_length=1)

    @field_validator("title")
    def title_not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Title cannot be empty")
        return v

    @model_validator(mode="after")
    def reject_null_required_fields(self):
        # omitted means unchanged; an explicit null would clear a NOT NULL column
        nulled = [
            f for f in ("title", "manager_id", "deadline", "is_active")
            if f in self.model_fields_set and getattr(self, f) is None
        ]
        if nulled:
            raise ValueError(f"{', '.join(nulled)} cannot be null")
        return self


class TrainingSession(BaseModel):
    id: int
    program_id: int
    trainer_id: Optional[int] = None
    session_datetime: datetime
    duration_minutes: int
    notes: Optional[str] = None
    is_active: bool
    model_config = ConfigDict(from_attributes=True)


class TrainingProgram(BaseModel):
    id: int
    title: str
    notes: Optional[str] = None
    manager_id: int
    deadline: date
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class TrainingProgramCreated(BaseModel):
    program: TrainingProgram
    sessions: List[TrainingSession]


class ProgramCard(BaseModel):
    id: int
    title: str
    manager_name: str = Field(alias="managerName")
    deadline: date
    enrollment_count: int = Field(alias="enrollmentCount")
    model_config = ConfigDict(populate_by_name=True)


class EmployeeInfo(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    full_name: str = Field(alias="fullName")
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class ProgramSession(BaseModel):
    id: int
    program_id: int
    trainer_id: Optional[int] = None
    trainer_name: Optional[str] = Field(None, alias="trainerName")
    session_datetime: datetime
    duration_minutes: int
    notes: Optional[str] = None
    is_active: bool
    is_owner: Optional[bool] = Field(None, alias="isOwner")
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class ProgramAssignmentInfo(BaseModel):
    id: int
    employee: EmployeeInfo
    assigned_by_manager_id: int
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class SessionEnrollmentInfo(BaseModel):
    id: int
    employee: EmployeeInfo
    session_id: int
    completed: bool
    completion_date: Optional[datetime] = None
    notes: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)


class AdminStats(BaseModel):
    total_enrolled: int = Field(alias="totalEnrolled")
    completed: int
    overdue: int
    model_config = ConfigDict(populate_by_name=True)


class TrainerStats(BaseModel):
    total_enrolled: int = Field(alias="totalEnrolled")
    completed: int
    model_config = ConfigDict(populate_by_name=True)


class EmployeeStats(BaseModel):
    enrolled: int
    completed: int
    available: int


class ProgramBase(BaseModel):
    id: int
    title: str
    notes: Optional[str] = None
    manager_id: int
    manager_name: str = Field(alias="managerName")
    deadline: date
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class AdminProgramDetail(ProgramBase):
    role: Literal["admin"] = "admin"
    sessions: List[ProgramSession]
    enrolled_employees: List[SessionEnrollmentInfo] = Field(alias="enrolledEmployees")
    stats: AdminStats


class ManagerProgramDetail(ProgramBase):
    role: Literal["manager"] = "manager"
    assigned_employees: List[ProgramAssignmentInfo] = Field(alias="assignedEmployees")
    available_employees: List[EmployeeInfo] = Field(alias="availableEmployees")


class TrainerProgramDetail(ProgramBase):
    role: Literal["trainer"] = "trainer"
    sessions: List[ProgramSession]
    enrolled_employees: List[SessionEnrollmentInfo] = Field(alias="enrolledEmployees")
    stats: TrainerStats


class EmployeeProgramDetail(ProgramBase):
    role: Literal["employee"] = "employee"
    sessions: List[ProgramSession]
    my_enrollments: List[SessionEnrollmentInfo] = Field(alias="myEnrollments")
    stats: EmployeeStats


# Each variant pins its own `role` literal, so exactly one matches on validation.
ProgramDetail = Union[AdminProgramDetail, ManagerProgramDetail, TrainerProgramDetail, EmployeeProgramDetail]
