from sqlalchemy import Column, Float, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import Base


class SubmissionModel(Base):
    __tablename__ = "submissions"
    __table_args__ = (
        UniqueConstraint("team_id", "task_id", name="uq_submissions_team_task"),
    )

    submission_id = Column(String, primary_key=True, index=True)
    team_id = Column(
        String, ForeignKey("teams.team_id", ondelete="CASCADE"), index=True, nullable=False
    )
    task_id = Column(
        String, ForeignKey("tasks.task_id", ondelete="CASCADE"), index=True, nullable=False
    )
    file_name = Column(String, nullable=False)
    file_url = Column(String, nullable=False)
    submitted_at = Column(String, nullable=False)  # ISO format string, UTC
    marks = Column(Float, nullable=False, default=0)
    remarks = Column(String, nullable=False, default="")
    status = Column(String, nullable=False, default="pending")  # 'pending' or 'graded'

    team = relationship("TeamModel")
    task = relationship("TaskModel")
