from typing import Optional

from pydantic import Field

from schemas.base import CamelModel
from schemas.team import TeamRef


class GradeSubmissionRequest(CamelModel):
    marks: float = Field(description="Score awarded to the submission.")
    remarks: str = Field(default="", description="Evaluator feedback.")


class SubmissionInfo(CamelModel):
    id: str
    team_id: str
    task_id: str
    file_name: str
    file_url: str
    submitted_at: str
    marks: float
    remarks: str
    status: str
    team: Optional[TeamRef] = None
