from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class AdminDashboardStats(BaseModel):
    admins: int
    employees: int
    managers: int
    trainers: int
    active_sessions: int = Field(alias="activeSessions")
    active_programs: int = Field(alias="activePrograms")
    model_config = ConfigDict(populate_by_name=True)


class EmployeeDashboardStats(BaseModel):
    total_enrolled: int = Field(alias="totalEnrolled")
    overdue: int
    completed: int
    available: int
    model_config = ConfigDict(populate_by_name=True)


class UpcomingSession(BaseModel):
    enrollment_id: int = Field(alias="enrollmentId")
    session_id: int = Field(alias="sessionId")
    session_datetime: datetime = Field(alias="sessionDatetime")
    duration_minutes: int = Field(alias="durationMinutes")
    notes: Optional[str] = None
    trainer_name: Optional[str] = Field(None, alias="trainerName")
    program_id: int = Field(alias="programId")
    program_title: str = Field(alias="programTitle")
    model_config = ConfigDict(populate_by_name=True)


class CompletionRate(BaseModel):
    total: int
    completed: int
    rate: float


class SessionCount(BaseModel):
    active_sessions: int = Field(alias="activeSessions")
    model_config = ConfigDict(populate_by_name=True)


class ProgramCount(BaseModel):
    active_programs: int = Field(alias="activePrograms")
    model_config = ConfigDict(populate_by_name=True)
