from .base import Base
from .counter import CounterModel
from .phase import PhaseModel
from .submission import SubmissionModel
from .task import TaskModel
from .team import TeamModel
from .team_membership import TeamMembershipModel
from .user import UserModel

__all__ = [
    "Base",
    "CounterModel",
    "PhaseModel",
    "SubmissionModel",
    "TaskModel",
    "TeamModel",
    "TeamMembershipModel",
    "UserModel",
]
