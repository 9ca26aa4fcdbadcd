from sqlalchemy import Boolean, Column, String

from .base import Base


class PhaseModel(Base):
    __tablename__ = "phases"

    phase_id = Column(String, primary_key=True, index=True)
    name = Column(String, unique=True, index=True, nullable=False)
    description = Column(String, nullable=True)
    start_date = Column(String, nullable=False)  # ISO format string, UTC
    end_date = Column(String, nullable=False)  # ISO format string, UTC
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(String, nullable=False)
