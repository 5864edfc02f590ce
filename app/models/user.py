from sqlalchemy import Boolean, Column, String, Integer, DateTime, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
from app.core.constants import RoleEnum

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    first_name = Column(String, nullable=False)
    last_name = Column(String, index=True, nullable=False)
    role = Column(Enum(RoleEnum, values_callable=lambda e: [m.value for m in e]), nullable=False, default=RoleEnum.EMPLOYEE, index=True)
    phone = Column(String, nullable=True)
    hashed_password = Column(String, nullable=True)
    is_active = Column(Boolean(), default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    managed_programs = relationship("TrainingProgram", back_populates="manager", foreign_keys="TrainingProgram.manager_id")
    training_sessions = relationship("TrainingSession", back_populates="trainer")
    program_assignments = relationship("ProgramAssignment", back_populates="employee", foreign_keys="ProgramAssignment.employee_id")
    session_enrollments = relationship("SessionEnrollment", back_populates="employee")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def initials(self) -> str:
        return f"{self.first_name[:1]}{self.last_name[:1]}".upper()
