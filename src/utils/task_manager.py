"""Task catalog utilities."""

import logging
import secrets
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from config import DEFAULT_TASK_MAX_MARKS
from core.exceptions import TaskNotFoundError, ValidationError
from models.task import TaskModel
from utils.phase_manager import PhaseManager
from utils.timestamps import to_utc_iso, utc_now_iso

logger = logging.getLogger(__name__)


class TaskManager:
    """Manages tasks published within phases."""

    def __init__(self, db: Session):
        self.db = db

    def create_task(
        self,
        title: str,
        description: str,
        deadline: datetime,
        phase_id: str,
        max_marks: Optional[int] = None,
    ) -> TaskModel:
        """Create a task inside an existing phase.

        Args:
            title: Task title.
            description: What teams must hand in.
            deadline: Last moment a submission is accepted.
            phase_id: Phase the task belongs to.
            max_marks: Highest score a grader may award (default 100).

        Returns:
            The created TaskModel.

        Raises:
            PhaseNotFoundError: If the phase does not exist.
            ValidationError: If max_marks is not positive.
        """
        phase = PhaseManager(self.db).get_phase(phase_id)
        if max_marks is None:
            max_marks = DEFAULT_TASK_MAX_MARKS
        if max_marks <= 0:
            raise ValidationError("Max marks must be a positive number")

        model = TaskModel(
            task_id=secrets.token_hex(12),
            title=title.strip(),
            description=description.strip(),
            deadline=to_utc_iso(deadline),
            max_marks=max_marks,
            phase_id=phase.phase_id,
            is_active=True,
            created_at=utc_now_iso(),
        )
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Created task: %s (id=%s, phase=%s)", model.title, model.task_id, phase.name)
        return model

    def get_task(self, task_id: str) -> TaskModel:
        model = (
            self.db.query(TaskModel)
            .options(joinedload(TaskModel.phase))
            .filter(TaskModel.task_id == task_id)
            .first()
        )
        if not model:
            raise TaskNotFoundError(task_id)
        return model

    def list_tasks(self) -> List[TaskModel]:
        """All tasks with their phase, for administrators."""
        return (
            self.db.query(TaskModel)
            .options(joinedload(TaskModel.phase))
            .order_by(TaskModel.created_at.asc())
            .all()
        )

    def list_active_tasks(self) -> List[TaskModel]:
        """Active tasks, earliest deadline first, for participants."""
        return (
            self.db.query(TaskModel)
            .options(joinedload(TaskModel.phase))
            .filter(TaskModel.is_active.is_(True))
            .order_by(TaskModel.deadline.asc())
            .all()
        )

    def update_task(
        self,
        task_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        deadline: Optional[datetime] = None,
        max_marks: Optional[int] = None,
        is_active: Optional[bool] = None,
    ) -> TaskModel:
        """Apply a partial update; fields left as None keep their value."""
        model = self.get_task(task_id)
        if title is not None:
            model.title = title.strip()
        if description is not None:
            model.description = description.strip()
        if deadline is not None:
            model.deadline = to_utc_iso(deadline)
        if max_marks is not None:
            if max_marks <= 0:
                raise ValidationError("Max marks must be a positive number")
            model.max_marks = max_marks
        if is_active is not None:
            model.is_active = is_active
        self.db.commit()
        self.db.refresh(model)
        logger.info("Updated task %s", task_id)
        return model
