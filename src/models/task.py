from sqlalchemy import Boolean, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from .base import Base


class TaskModel(Base):
    __tablename__ = "tasks"

    task_id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=False)
    deadline = Column(String, index=True, nullable=False)  # ISO format string, UTC
    max_marks = Column(Integer, nullable=False, default=100)
    phase_id = Column(String, ForeignKey("phases.phase_id"), index=True, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(String, nullable=False)

    phase = relationship("PhaseModel")
