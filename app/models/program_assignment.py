from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base

class ProgramAssignment(Base):
    __tablename__ = "program_assignment"
    __table_args__ = (
        UniqueConstraint("program_id", "employee_id", name="uq_program_assignment_program_employee"),
    )

    id = Column(Integer, primary_key=True, index=True)
    program_id = Column(Integer, ForeignKey("training_program.id"), nullable=False, index=True)
    employee_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    assigned_by_manager_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    program = relationship("TrainingProgram", back_populates="assignments")
    employee = relationship("User", back_populates="program_assignments", foreign_keys=[employee_id])
    assigned_by = relationship("User", foreign_keys=[assigned_by_manager_id])
