from sqlalchemy import Column, Float, Integer, String, ForeignKey
from sqlalchemy.orm import relationship

from .base import Base


class TeamModel(Base):
    __tablename__ = "teams"

    team_id = Column(String, primary_key=True, index=True)
    team_name = Column(String, unique=True, index=True, nullable=False)
    team_code = Column(String, unique=True, index=True, nullable=False)
    college_name = Column(String, nullable=False)
    leader_id = Column(String, ForeignKey("users.user_id"), index=True, nullable=False)
    total_points = Column(Float, nullable=False, default=0)
    rank = Column(Integer, nullable=False, default=0)
    created_at = Column(String, nullable=False)

    leader = relationship("UserModel", foreign_keys=[leader_id])
    memberships = relationship(
        "TeamMembershipModel",
        back_populates="team",
        cascade="all, delete-orphan",
        order_by="TeamMembershipModel.id",
    )

    @property
    def members(self):
        return [m.user for m in self.memberships]
