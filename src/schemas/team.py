from typing import List, Optional

from schemas.base import CamelModel


class TeamSummary(CamelModel):
    id: str
    team_name: str
    team_code: str
    college_name: str
    total_points: float = 0
    rank: int = 0


class TeamMemberInfo(CamelModel):
    id: str
    name: str
    email: str
    phone: str
    role: str


class TeamDetail(TeamSummary):
    """Team with leader and roster populated, for the admin listing."""

    leader: Optional[TeamMemberInfo] = None
    members: List[TeamMemberInfo] = []
    created_at: str


class TeamRef(CamelModel):
    id: str
    team_name: str
    team_code: str


class LeaderboardEntry(CamelModel):
    rank: int
    team_id: str
    team_name: str
    college_name: str
    total_points: float
