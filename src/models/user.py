"""User database model.

This module defines the User database model using SQLAlchemy.
"""

from sqlalchemy import Column, String
from .base import Base


class UserModel(Base):
    """User database model."""

    __tablename__ = "users"

    user_id = Column(String, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    phone = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False)  # see core.permissions.Role
    # Back-reference to the team; the roster itself lives in team_memberships
    team_id = Column(String, index=True, nullable=True)
    city = Column(String, nullable=True)
    year = Column(String, nullable=True)  # e.g. "FE", "SE", "TE", "BE"
    branch = Column(String, nullable=True)
    instagram = Column(String, nullable=True)
    linkedin = Column(String, nullable=True)
    institute_name = Column(String, nullable=True)
    create_at = Column(String, nullable=False)  # ISO format string
