"""Conversions from ORM models to API schemas."""

from datetime import datetime
from typing import Optional

from models.phase import PhaseModel
from models.submission import SubmissionModel
from models.task import TaskModel
from models.team import TeamModel
from models.user import UserModel
from schemas.phase import PhaseInfo, PhaseRef
from schemas.submission import SubmissionInfo
from schemas.task import TaskInfo
from schemas.team import TeamDetail, TeamMemberInfo, TeamRef, TeamSummary
from schemas.user import User, UserSummary
from utils.timestamps import is_past, parse_iso, utc_now


def model_to_user(model: UserModel) -> User:
    return User(
        user_id=model.user_id,
        name=model.name,
        email=model.email,
        phone=model.phone,
        role=model.role,
        team_id=model.team_id,
        city=model.city,
        year=model.year,
        branch=model.branch,
        instagram=model.instagram,
        linkedin=model.linkedin,
        institute_name=model.institute_name,
        create_at=model.create_at,
    )


def user_to_summary(user: User, with_contact: bool = False) -> UserSummary:
    summary = UserSummary(
        id=user.user_id, name=user.name, role=user.role, team_id=user.team_id
    )
    if with_contact:
        summary.phone = user.phone
        summary.email = user.email
    return summary


def team_to_summary(model: TeamModel) -> TeamSummary:
    return TeamSummary(
        id=model.team_id,
        team_name=model.team_name,
        team_code=model.team_code,
        college_name=model.college_name,
        total_points=model.total_points or 0,
        rank=model.rank or 0,
    )


def team_to_ref(model: TeamModel) -> TeamRef:
    return TeamRef(id=model.team_id, team_name=model.team_name, team_code=model.team_code)


def _member_info(model: UserModel) -> TeamMemberInfo:
    return TeamMemberInfo(
        id=model.user_id,
        name=model.name,
        email=model.email,
        phone=model.phone,
        role=model.role,
    )


def team_to_detail(model: TeamModel) -> TeamDetail:
    summary = team_to_summary(model)
    return TeamDetail(
        **summary.model_dump(),
        leader=_member_info(model.leader) if model.leader else None,
        members=[_member_info(member) for member in model.members],
        created_at=model.created_at,
    )


def phase_to_info(model: PhaseModel, now: Optional[datetime] = None) -> PhaseInfo:
    now = now or utc_now()
    return PhaseInfo(
        id=model.phase_id,
        name=model.name,
        description=model.description,
        start_date=model.start_date,
        end_date=model.end_date,
        is_active=bool(model.is_active),
        is_current=parse_iso(model.start_date) <= now <= parse_iso(model.end_date),
        created_at=model.created_at,
    )


def task_to_info(model: TaskModel, now: Optional[datetime] = None) -> TaskInfo:
    phase = None
    if model.phase is not None:
        phase = PhaseRef(id=model.phase.phase_id, name=model.phase.name)
    return TaskInfo(
        id=model.task_id,
        title=model.title,
        description=model.description,
        deadline=model.deadline,
        max_marks=model.max_marks,
        phase=phase,
        is_active=bool(model.is_active),
        is_expired=is_past(model.deadline, now),
    )


def submission_to_info(
    model: SubmissionModel, include_team: bool = False
) -> SubmissionInfo:
    info = SubmissionInfo(
        id=model.submission_id,
        team_id=model.team_id,
        task_id=model.task_id,
        file_name=model.file_name,
        file_url=model.file_url,
        submitted_at=model.submitted_at,
        marks=model.marks or 0,
        remarks=model.remarks or "",
        status=model.status,
    )
    if include_team and model.team is not None:
        info.team = team_to_ref(model.team)
    return info
