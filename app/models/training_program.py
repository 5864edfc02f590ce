from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base

class TrainingProgram(Base):
    __tablename__ = "training_program"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, index=True, nullable=False)
    notes = Column(String, nullable=True)
    manager_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    deadline = Column(Date, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    manager = relationship("User", back_populates="managed_programs", foreign_keys=[manager_id])
    sessions = relationship(
        "TrainingSession",
        back_populates="program",
        order_by="TrainingSession.session_datetime",
        cascade="all, delete-orphan",
    )
    assignments = relationship("ProgramAssignment", back_populates="program", cascade="all, delete-orphan")

    @property
    def manager_name(self) -> str:
        return self.manager.full_name if self.manager else "Unknown"
