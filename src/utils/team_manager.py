"""Team management utilities.

Teams are created at leader registration and grow as members join with the
team code. Team codes are issued from a counter row that is incremented with
a single UPDATE, so two registrations never read the same "last code".
"""

import logging
import secrets
from typing import Dict, List

from sqlalchemy import Integer, cast, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from config import MAX_TEAM_MEMBERS, TEAM_CODE_BASE
from core.exceptions import (
    InvalidTeamCodeError,
    TeamFullError,
    TeamNameTakenError,
    TeamNotFoundError,
)
from models.counter import CounterModel
from models.submission import SubmissionModel
from models.team import TeamModel
from models.team_membership import TeamMembershipModel
from models.user import UserModel
from schemas.team import LeaderboardEntry
from utils.timestamps import utc_now_iso

logger = logging.getLogger(__name__)

TEAM_CODE_COUNTER = "team_code"


class TeamManager:
    """Manages teams, rosters, team codes and standings."""

    def __init__(self, db: Session):
        self.db = db

    # --- Team codes ---

    def _seed_team_code_counter(self) -> None:
        """Create the counter row, continuing after the highest issued code."""
        highest = self.db.query(
            func.max(cast(TeamModel.team_code, Integer))
        ).scalar()
        start = TEAM_CODE_BASE - 1
        if highest is not None and highest > start:
            start = highest
        self.db.add(CounterModel(name=TEAM_CODE_COUNTER, value=start))
        self.db.flush()
        logger.info("Seeded team code counter at %s", start)

    def _increment_counter(self) -> int:
        stmt = (
            update(CounterModel)
            .where(CounterModel.name == TEAM_CODE_COUNTER)
            .values(value=CounterModel.value + 1)
            .execution_options(synchronize_session=False)
        )
        return self.db.execute(stmt).rowcount

    def allocate_team_code(self) -> str:
        """Issue the next team code within the current transaction.

        The first code is TEAM_CODE_BASE; every later one is the previous
        plus one.

        Returns:
            The code as a numeric string.
        """
        if self._increment_counter() == 0:
            try:
                with self.db.begin_nested():
                    self._seed_team_code_counter()
            except IntegrityError:
                # A concurrent registration created the row first
                logger.info("Team code counter already seeded")
            self._increment_counter()
        value = self.db.execute(
            select(CounterModel.value).where(CounterModel.name == TEAM_CODE_COUNTER)
        ).scalar_one()
        return str(value)

    # --- Lookups ---

    def team_name_taken(self, team_name: str) -> bool:
        existing = (
            self.db.query(TeamModel.team_id)
            .filter(TeamModel.team_name == team_name.strip())
            .first()
        )
        return existing is not None

    def get_team(self, team_id: str) -> TeamModel:
        model = self.db.query(TeamModel).filter(TeamModel.team_id == team_id).first()
        if not model:
            raise TeamNotFoundError(team_id)
        return model

    def get_team_by_code(self, team_code: str) -> TeamModel:
        model = (
            self.db.query(TeamModel)
            .filter(TeamModel.team_code == team_code.strip())
            .first()
        )
        if not model:
            raise InvalidTeamCodeError(team_code)
        return model

    def member_count(self, team: TeamModel) -> int:
        return (
            self.db.query(TeamMembershipModel)
            .filter(TeamMembershipModel.team_id == team.team_id)
            .count()
        )

    def list_teams(self) -> List[TeamModel]:
        """All teams, newest first, with leader and roster loaded."""
        return (
            self.db.query(TeamModel)
            .options(
                joinedload(TeamModel.leader),
                joinedload(TeamModel.memberships).joinedload(TeamMembershipModel.user),
            )
            .order_by(TeamModel.created_at.desc())
            .all()
        )

    # --- Roster changes (caller commits) ---

    def create_team(
        self, team_name: str, college_name: str, leader: UserModel
    ) -> TeamModel:
        """Stage a team led by ``leader`` with the leader as sole member.

        Raises:
            TeamNameTakenError: If the name is already registered.
        """
        team_name = team_name.strip()
        if self.team_name_taken(team_name):
            raise TeamNameTakenError(team_name)

        now = utc_now_iso()
        team = TeamModel(
            team_id=secrets.token_hex(12),
            team_name=team_name,
            team_code=self.allocate_team_code(),
            college_name=college_name.strip(),
            leader_id=leader.user_id,
            total_points=0,
            rank=0,
            created_at=now,
        )
        self.db.add(team)
        self.db.flush()
        self.db.add(
            TeamMembershipModel(team_id=team.team_id, user_id=leader.user_id, joined_at=now)
        )
        leader.team_id = team.team_id
        self.db.flush()
        return team

    def ensure_capacity(self, team: TeamModel) -> None:
        """Raise TeamFullError when the roster is already at the cap."""
        if self.member_count(team) >= MAX_TEAM_MEMBERS:
            raise TeamFullError(MAX_TEAM_MEMBERS)

    def add_member(self, team: TeamModel, user: UserModel) -> None:
        self.ensure_capacity(team)
        self.db.add(
            TeamMembershipModel(
                team_id=team.team_id, user_id=user.user_id, joined_at=utc_now_iso()
            )
        )
        user.team_id = team.team_id
        self.db.flush()

    # --- Standings ---

    def refresh_standings(self) -> None:
        """Recompute every team's total from graded marks, then the ranks."""
        totals: Dict[str, float] = dict(
            self.db.query(SubmissionModel.team_id, func.sum(SubmissionModel.marks))
            .filter(SubmissionModel.status == "graded")
            .group_by(SubmissionModel.team_id)
            .all()
        )
        teams = self.db.query(TeamModel).all()
        for team in teams:
            team.total_points = totals.get(team.team_id) or 0
        points = [team.total_points for team in teams]
        for team in teams:
            team.rank = rank_for(team.total_points, points)
        self.db.commit()

    def leaderboard(self) -> List[LeaderboardEntry]:
        teams = (
            self.db.query(TeamModel)
            .order_by(TeamModel.total_points.desc(), TeamModel.team_name)
            .all()
        )
        points = [team.total_points or 0 for team in teams]
        return [
            LeaderboardEntry(
                rank=rank_for(team.total_points or 0, points),
                team_id=team.team_id,
                team_name=team.team_name,
                college_name=team.college_name,
                total_points=team.total_points or 0,
            )
            for team in teams
        ]


def rank_for(team_points: float, all_points: List[float]) -> int:
    """One plus the number of teams with strictly more points; ties share a rank."""
    return 1 + sum(1 for other in all_points if other > team_points)
