from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base

class SessionEnrollment(Base):
    __tablename__ = "session_enrollment"
    __table_args__ = (
        UniqueConstraint("session_id", "employee_id", name="uq_session_enrollment_session_employee"),
    )

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(Integer, ForeignKey("training_session.id"), nullable=False, index=True)
    employee_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    completed = Column(Boolean, default=False, nullable=False)
    completion_date = Column(DateTime, nullable=True)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    session = relationship("TrainingSession", back_populates="enrollments")
    employee = relationship("User", back_populates="session_enrollments")
