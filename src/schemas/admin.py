from schemas.base import CamelModel


class PortalStats(CamelModel):
    total_teams: int
    total_participants: int
    total_evaluators: int
    total_users: int
    current_phase: str
