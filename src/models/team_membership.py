from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship

from .base import Base


class TeamMembershipModel(Base):
    __tablename__ = "team_memberships"

    # Autoincrement id keeps the roster in join order, leader first
    id = Column(Integer, primary_key=True, index=True)
    team_id = Column(String, ForeignKey("teams.team_id", ondelete="CASCADE"), index=True)
    user_id = Column(
        String, ForeignKey("users.user_id", ondelete="CASCADE"), unique=True, index=True
    )
    joined_at = Column(String, nullable=False)

    team = relationship("TeamModel", back_populates="memberships")
    user = relationship("UserModel")
