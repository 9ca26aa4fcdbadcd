from datetime import datetime
from typing import Optional

from pydantic import Field

from schemas.base import CamelModel
from schemas.phase import PhaseRef


class CreateTaskRequest(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    deadline: Optional[datetime] = None
    max_marks: Optional[int] = Field(default=None, gt=0)
    phase_id: Optional[str] = None


class UpdateTaskRequest(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    deadline: Optional[datetime] = None
    max_marks: Optional[int] = Field(default=None, gt=0)
    is_active: Optional[bool] = None


class TaskInfo(CamelModel):
    id: str
    title: str
    description: str
    deadline: str
    max_marks: int
    phase: Optional[PhaseRef] = None
    is_active: bool
    # Derived when the view is built; never stored
    is_expired: bool
