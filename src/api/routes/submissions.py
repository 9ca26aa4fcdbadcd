"""Submission routes: upload, retrieval, grading and the leaderboard."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from api.routes.auth import require
from config import MAX_SUBMISSION_SIZE
from core.dependencies import SubmissionManagerDep, TeamManagerDep
from core.exceptions import NotFoundError, ValidationError
from core.permissions import Capability
from schemas.submission import GradeSubmissionRequest
from schemas.user import User
from utils.converters import submission_to_info

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/submissions", tags=["Submission"])


@router.get("/leaderboard", summary="排行榜")
def leaderboard(team_manager: TeamManagerDep) -> dict:
    """Public standings: teams by total graded points, ties sharing a rank."""
    entries = [entry.dump() for entry in team_manager.leaderboard()]
    return {"success": True, "count": len(entries), "leaderboard": entries}


@router.post("/{task_id}", summary="提交任务（上传PDF）")
async def submit_task(
    task_id: str,
    file: Optional[UploadFile] = File(default=None, description="Submission PDF"),
    current_user: User = Depends(require(Capability.SUBMIT_WORK)),
    submission_manager: SubmissionManagerDep = None,
) -> dict:
    """Upload the team's PDF for a task, replacing any earlier upload.

    Args:
        task_id: Task being answered.
        file: Multipart field "file"; PDF, at most 5MB.
        current_user: Authenticated leader or member.
        submission_manager: Injected SubmissionManager instance.

    Returns:
        Dictionary with the stored submission.

    Raises:
        HTTPException: 400 for a bad file, no team or a passed deadline,
            404 for an unknown task, 500 otherwise.
    """
    content = None
    original_name = None
    content_type = None
    if file is not None:
        # One byte past the limit is enough to reject oversized files
        content = await file.read(MAX_SUBMISSION_SIZE + 1)
        original_name = file.filename
        content_type = file.content_type

    try:
        submission = submission_manager.submit(
            team_id=current_user.team_id,
            task_id=task_id,
            content=content,
            original_name=original_name,
            content_type=content_type,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception:
        logger.exception("Submission error")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error dealing with submission",
        )

    return {
        "success": True,
        "message": "Task submitted successfully",
        "submission": submission_to_info(submission).dump(),
    }


@router.get("", summary="获取本队全部提交")
def list_my_submissions(
    submission_manager: SubmissionManagerDep,
    current_user: User = Depends(require(Capability.VIEW_OWN_SUBMISSIONS)),
) -> dict:
    submissions = submission_manager.list_team_submissions(current_user.team_id)
    return {
        "success": True,
        "submissions": [submission_to_info(s).dump() for s in submissions],
    }


@router.get("/{task_id}/me", summary="获取本队某任务的提交")
def get_my_submission(
    task_id: str,
    submission_manager: SubmissionManagerDep,
    current_user: User = Depends(require(Capability.VIEW_OWN_SUBMISSIONS)),
) -> dict:
    try:
        submission = submission_manager.get_team_submission(current_user.team_id, task_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"success": True, "submission": submission_to_info(submission).dump()}


@router.get("/task/{task_id}", summary="获取某任务的全部提交")
def list_task_submissions(
    task_id: str,
    submission_manager: SubmissionManagerDep,
    current_user: User = Depends(require(Capability.REVIEW_SUBMISSIONS)),
) -> dict:
    """All teams' submissions for a task, newest first, with team populated."""
    submissions = submission_manager.list_task_submissions(task_id)
    return {
        "success": True,
        "count": len(submissions),
        "submissions": [
            submission_to_info(s, include_team=True).dump() for s in submissions
        ],
    }


@router.put("/{submission_id}/grade", summary="评分")
def grade_submission(
    submission_id: str,
    req: GradeSubmissionRequest,
    submission_manager: SubmissionManagerDep,
    current_user: User = Depends(require(Capability.GRADE_SUBMISSIONS)),
) -> dict:
    """Grade a submission.

    Raises:
        HTTPException: 404 if the submission does not exist, 400 if marks are
            outside 0..max marks of the task.
    """
    try:
        submission = submission_manager.grade(submission_id, req.marks, req.remarks)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    logger.info("Submission %s graded by %s", submission_id, current_user.user_id)
    return {
        "success": True,
        "message": "Submission graded successfully",
        "submission": submission_to_info(submission).dump(),
    }
