"""Participant-facing task routes."""

from fastapi import APIRouter, Depends, HTTPException, status

from api.routes.auth import get_current_user
from core.dependencies import TaskManagerDep
from core.exceptions import TaskNotFoundError
from schemas.user import User
from utils.converters import task_to_info
from utils.timestamps import utc_now

router = APIRouter(prefix="/api/tasks", tags=["Task"])


@router.get("", summary="获取所有进行中的任务")
def list_tasks(
    task_manager: TaskManagerDep,
    current_user: User = Depends(get_current_user),
) -> dict:
    """List active tasks, earliest deadline first, each flagged when expired."""
    now = utc_now()
    tasks = [task_to_info(t, now).dump() for t in task_manager.list_active_tasks()]
    return {"success": True, "count": len(tasks), "tasks": tasks}


@router.get("/{task_id}", summary="获取单个任务")
def get_task(
    task_id: str,
    task_manager: TaskManagerDep,
    current_user: User = Depends(get_current_user),
) -> dict:
    """Get one task.

    Raises:
        HTTPException: 404 if the task does not exist.
    """
    try:
        task = task_manager.get_task(task_id)
    except TaskNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {"success": True, "task": task_to_info(task).dump()}
