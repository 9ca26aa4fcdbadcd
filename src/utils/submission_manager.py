"""Submission intake, retrieval and grading.

A team holds at most one submission per task. Uploading again before the
deadline replaces the stored file in place. The file is written before the
record, so every failure after the write removes the new file again; files
left behind by a crash are reclaimed by sweep_orphaned_uploads().
"""

import logging
import math
import secrets
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from core.exceptions import (
    DeadlinePassedError,
    MarksOutOfRangeError,
    SubmissionNotFoundError,
    ValidationError,
)
from models.submission import SubmissionModel
from utils.task_manager import TaskManager
from utils.team_manager import TeamManager
from utils.timestamps import is_past, to_utc_iso, utc_now
from utils.upload_storage import UploadStorage, validate_pdf_upload

logger = logging.getLogger(__name__)

STATUS_PENDING = "pending"
STATUS_GRADED = "graded"


class SubmissionManager:
    """Manages the submission ledger and the files behind it."""

    def __init__(self, db: Session, storage: Optional[UploadStorage] = None):
        self.db = db
        self.storage = storage or UploadStorage()

    def submit(
        self,
        team_id: Optional[str],
        task_id: str,
        content: Optional[bytes],
        original_name: Optional[str],
        content_type: Optional[str],
        now: Optional[datetime] = None,
    ) -> SubmissionModel:
        """Store a team's file for a task, creating or replacing its submission.

        A resubmission keeps the previous marks and remarks but goes back to
        "pending" so graders see the new file.

        Args:
            team_id: Team of the submitting participant.
            task_id: Task being answered.
            content: Raw file bytes.
            original_name: Client-side file name; only its extension is kept.
            content_type: Declared MIME type.
            now: Clock override for deadline checks.

        Returns:
            The created or updated SubmissionModel.

        Raises:
            ValidationError: If the caller has no team.
            InvalidUploadError: If the file is missing, too large or not a PDF.
            TaskNotFoundError: If the task does not exist.
            DeadlinePassedError: If the task deadline has passed.
        """
        if not team_id:
            raise ValidationError("You are not part of a team")
        validate_pdf_upload(content, content_type)

        file_name = self.storage.save(content, original_name)
        try:
            task = TaskManager(self.db).get_task(task_id)
            now = now or utc_now()
            if is_past(task.deadline, now):
                logger.warning(
                    "Rejected late submission from team %s for task %s", team_id, task_id
                )
                raise DeadlinePassedError(task_id)

            submission = (
                self.db.query(SubmissionModel)
                .filter(
                    SubmissionModel.team_id == team_id,
                    SubmissionModel.task_id == task_id,
                )
                .first()
            )
            previous_file = None
            if submission:
                previous_file = submission.file_name
                submission.file_name = file_name
                submission.file_url = self.storage.url_for(file_name)
                submission.submitted_at = to_utc_iso(now)
                submission.status = STATUS_PENDING
            else:
                submission = SubmissionModel(
                    submission_id=secrets.token_hex(12),
                    team_id=team_id,
                    task_id=task_id,
                    file_name=file_name,
                    file_url=self.storage.url_for(file_name),
                    submitted_at=to_utc_iso(now),
                    marks=0,
                    remarks="",
                    status=STATUS_PENDING,
                )
                self.db.add(submission)
            self.db.commit()
        except Exception:
            self.db.rollback()
            self.storage.delete(file_name)
            raise

        # The record no longer points at the old file, so it can go now
        if previous_file and previous_file != file_name:
            self.storage.delete(previous_file)
        self.db.refresh(submission)
        logger.info(
            "Team %s submitted %s for task %s", team_id, file_name, task_id
        )
        return submission

    def get_team_submission(self, team_id: Optional[str], task_id: str) -> SubmissionModel:
        model = (
            self.db.query(SubmissionModel)
            .filter(
                SubmissionModel.team_id == team_id,
                SubmissionModel.task_id == task_id,
            )
            .first()
        )
        if not model:
            raise SubmissionNotFoundError(task_id, "No submission found")
        return model

    def list_team_submissions(self, team_id: Optional[str]) -> List[SubmissionModel]:
        return (
            self.db.query(SubmissionModel)
            .filter(SubmissionModel.team_id == team_id)
            .order_by(SubmissionModel.submitted_at.desc())
            .all()
        )

    def list_task_submissions(self, task_id: str) -> List[SubmissionModel]:
        """Every team's submission for a task, newest first."""
        return (
            self.db.query(SubmissionModel)
            .options(joinedload(SubmissionModel.team))
            .filter(SubmissionModel.task_id == task_id)
            .order_by(SubmissionModel.submitted_at.desc())
            .all()
        )

    def grade(self, submission_id: str, marks: float, remarks: str = "") -> SubmissionModel:
        """Record a grade and refresh team standings.

        Raises:
            SubmissionNotFoundError: If the submission does not exist.
            MarksOutOfRangeError: If marks fall outside 0..task.max_marks.
        """
        model = (
            self.db.query(SubmissionModel)
            .options(joinedload(SubmissionModel.task))
            .filter(SubmissionModel.submission_id == submission_id)
            .first()
        )
        if not model:
            raise SubmissionNotFoundError(submission_id)
        max_marks = model.task.max_marks if model.task else None
        if not math.isfinite(marks) or marks < 0 or (
            max_marks is not None and marks > max_marks
        ):
            raise MarksOutOfRangeError(marks, max_marks)

        model.marks = marks
        model.remarks = remarks or ""
        model.status = STATUS_GRADED
        self.db.commit()
        TeamManager(self.db).refresh_standings()
        self.db.refresh(model)
        logger.info("Graded submission %s: %s", submission_id, marks)
        return model

    def sweep_orphaned_uploads(self) -> List[str]:
        """Delete stored files that no submission references."""
        referenced = [row[0] for row in self.db.query(SubmissionModel.file_name).all()]
        return self.storage.sweep(referenced)
