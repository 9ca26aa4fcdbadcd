"""Dashboard statistics, computed fresh on every call."""

from sqlalchemy.orm import Session

from core.permissions import Role
from models.team import TeamModel
from schemas.admin import PortalStats
from utils.phase_manager import PhaseManager
from utils.user_manager import UserManager

NO_ACTIVE_PHASE = "No Active Phase"


class StatsManager:
    def __init__(self, db: Session):
        self.db = db

    def collect(self) -> PortalStats:
        users = UserManager(self.db)
        active_phase = PhaseManager(self.db).get_active_phase()
        return PortalStats(
            total_teams=self.db.query(TeamModel).count(),
            total_participants=users.count_users(Role.LEADER, Role.MEMBER),
            total_evaluators=users.count_users(Role.EVALUATOR),
            total_users=users.count_users(),
            current_phase=active_phase.name if active_phase else NO_ACTIVE_PHASE,
        )
