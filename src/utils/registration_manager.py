"""Leader and member registration workflows.

Each registration stages the user, the team changes and the team code in one
database transaction and commits once, so a failure part-way leaves nothing
behind.
"""

import logging
from typing import Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.exceptions import TeamNameTakenError, UserAlreadyExistsError
from core.permissions import Role
from models.team import TeamModel
from models.user import UserModel
from schemas.user import RegisterLeaderRequest, RegisterMemberRequest, User
from utils.converters import model_to_user
from utils.team_manager import TeamManager
from utils.user_manager import UserManager

logger = logging.getLogger(__name__)


class RegistrationManager:
    """Creates participant accounts together with their team linkage."""

    def __init__(self, db: Session):
        self.db = db
        self.users = UserManager(db)
        self.teams = TeamManager(db)

    def _commit(self, team_name: str = "") -> None:
        # The pre-checks can race with a concurrent registration; the unique
        # constraints catch what they miss.
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            if "team_name" in str(e.orig).lower():
                raise TeamNameTakenError(team_name) from e
            if "email" in str(e.orig).lower() or "phone" in str(e.orig).lower():
                raise UserAlreadyExistsError() from e
            raise

    def register_leader(self, req: RegisterLeaderRequest) -> Tuple[User, TeamModel]:
        """Create a leader and the team they lead.

        Args:
            req: Registration payload; required fields are already checked.

        Returns:
            The created user and team.

        Raises:
            UserAlreadyExistsError: If the email or phone is taken.
            TeamNameTakenError: If the team name is taken.
            ValidationError: If the email or password is malformed.
        """
        if self.users.identity_taken(req.email, req.phone):
            raise UserAlreadyExistsError()
        if self.teams.team_name_taken(req.team_name):
            raise TeamNameTakenError(req.team_name)

        try:
            leader = self.users.build_user(
                name=req.name,
                email=req.email,
                phone=req.phone,
                password=req.password,
                role=Role.LEADER,
                institute_name=req.college_name.strip(),
                city=req.city,
                year=req.year,
                branch=req.branch,
                instagram=req.instagram,
                linkedin=req.linkedin,
            )
            team = self.teams.create_team(req.team_name, req.college_name, leader)
        except Exception:
            self.db.rollback()
            raise
        self._commit(req.team_name)
        self.db.refresh(leader)
        self.db.refresh(team)
        logger.info(
            "Registered team %s (code %s) led by %s",
            team.team_id,
            team.team_code,
            leader.user_id,
        )
        return model_to_user(leader), team

    def register_member(self, req: RegisterMemberRequest) -> Tuple[User, TeamModel]:
        """Create a member and append them to the team behind ``req.team_code``.

        Raises:
            UserAlreadyExistsError: If the email or phone is taken.
            InvalidTeamCodeError: If the code matches no team.
            TeamFullError: If the roster is at the cap.
            ValidationError: If the email or password is malformed.
        """
        if self.users.identity_taken(req.email, req.phone):
            raise UserAlreadyExistsError()
        team = self.teams.get_team_by_code(req.team_code)
        self.teams.ensure_capacity(team)

        try:
            member: UserModel = self.users.build_user(
                name=req.name,
                email=req.email,
                phone=req.phone,
                password=req.password,
                role=Role.MEMBER,
                institute_name=team.college_name,
                year=req.year,
                branch=req.branch,
            )
            self.teams.add_member(team, member)
        except Exception:
            self.db.rollback()
            raise
        self._commit()
        self.db.refresh(member)
        self.db.refresh(team)
        logger.info("User %s joined team %s", member.user_id, team.team_id)
        return model_to_user(member), team
