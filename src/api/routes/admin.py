"""Administrator routes: dashboard stats, teams, phases and tasks."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from api.routes.auth import require
from core.dependencies import (
    PhaseManagerDep,
    StatsManagerDep,
    TaskManagerDep,
    TeamManagerDep,
)
from core.exceptions import ConflictError, NotFoundError, ValidationError
from core.permissions import Capability
from schemas.phase import CreatePhaseRequest
from schemas.task import CreateTaskRequest, UpdateTaskRequest
from schemas.user import User
from utils.converters import phase_to_info, task_to_info, team_to_detail
from utils.timestamps import utc_now

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])

manage_event = require(Capability.MANAGE_EVENT)


@router.get("/stats", summary="仪表盘统计")
def get_stats(
    stats_manager: StatsManagerDep,
    current_user: User = Depends(require(Capability.VIEW_STATS)),
) -> dict:
    """Counts of teams, participants, evaluators and users plus the active phase name."""
    return {"success": True, "stats": stats_manager.collect().dump()}


@router.get("/teams", summary="获取全部队伍")
def list_teams(
    team_manager: TeamManagerDep,
    current_user: User = Depends(require(Capability.VIEW_STATS)),
) -> dict:
    teams = [team_to_detail(t).dump() for t in team_manager.list_teams()]
    return {"success": True, "count": len(teams), "teams": teams}


@router.post("/phases", status_code=status.HTTP_201_CREATED, summary="创建阶段")
def create_phase(
    req: CreatePhaseRequest,
    phase_manager: PhaseManagerDep,
    current_user: User = Depends(manage_event),
) -> dict:
    """Create a phase.

    Raises:
        HTTPException: 400 on missing fields, a reversed window or a
            duplicate name.
    """
    if not req.name or not req.name.strip() or req.start_date is None or req.end_date is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please provide all required fields",
        )
    try:
        phase = phase_manager.create_phase(
            name=req.name,
            start_date=req.start_date,
            end_date=req.end_date,
            description=req.description,
        )
    except (ConflictError, ValidationError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"success": True, "phase": phase_to_info(phase).dump()}


@router.get("/phases", summary="获取全部阶段")
def list_phases(
    phase_manager: PhaseManagerDep,
    current_user: User = Depends(manage_event),
) -> dict:
    now = utc_now()
    phases = [phase_to_info(p, now).dump() for p in phase_manager.list_phases()]
    return {"success": True, "count": len(phases), "phases": phases}


@router.get("/phases/active", summary="获取当前阶段")
def get_active_phase(
    phase_manager: PhaseManagerDep,
    current_user: User = Depends(require(Capability.VIEW_STATS)),
) -> dict:
    phase = phase_manager.get_active_phase()
    return {"success": True, "phase": phase_to_info(phase).dump() if phase else None}


@router.put("/phases/{phase_id}/activate", summary="激活阶段")
def activate_phase(
    phase_id: str,
    phase_manager: PhaseManagerDep,
    current_user: User = Depends(manage_event),
) -> dict:
    """Make one phase the only active phase.

    Raises:
        HTTPException: 404 if the phase does not exist.
    """
    try:
        phase = phase_manager.activate_phase(phase_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return {
        "success": True,
        "message": f"Phase {phase.name} is now active",
        "phase": phase_to_info(phase).dump(),
    }


@router.post("/tasks", status_code=status.HTTP_201_CREATED, summary="创建任务")
def create_task(
    req: CreateTaskRequest,
    task_manager: TaskManagerDep,
    current_user: User = Depends(manage_event),
) -> dict:
    """Publish a task inside a phase.

    Raises:
        HTTPException: 400 on missing fields, 404 if the phase does not exist.
    """
    if not req.title or not req.description or req.deadline is None or not req.phase_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please provide all required fields",
        )
    try:
        task = task_manager.create_task(
            title=req.title,
            description=req.description,
            deadline=req.deadline,
            phase_id=req.phase_id,
            max_marks=req.max_marks,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return {"success": True, "task": task_to_info(task).dump()}


@router.get("/tasks", summary="获取全部任务")
def list_tasks(
    task_manager: TaskManagerDep,
    current_user: User = Depends(manage_event),
) -> dict:
    now = utc_now()
    tasks = [task_to_info(t, now).dump() for t in task_manager.list_tasks()]
    return {"success": True, "count": len(tasks), "tasks": tasks}


@router.patch("/tasks/{task_id}", summary="更新任务")
def update_task(
    task_id: str,
    req: UpdateTaskRequest,
    task_manager: TaskManagerDep,
    current_user: User = Depends(manage_event),
) -> dict:
    """Partially update a task; omitted fields keep their value."""
    try:
        task = task_manager.update_task(
            task_id,
            title=req.title,
            description=req.description,
            deadline=req.deadline,
            max_marks=req.max_marks,
            is_active=req.is_active,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    logger.info("Task %s updated by %s", task_id, current_user.user_id)
    return {"success": True, "task": task_to_info(task).dump()}
