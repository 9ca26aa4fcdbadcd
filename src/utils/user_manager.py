"""User management utilities.

This module provides user management functionality including user storage,
password hashing, lookups and credential verification.
"""

import logging
import re
import secrets
from typing import Optional

import bcrypt
from sqlalchemy import or_
from sqlalchemy.orm import Session

from config import BCRYPT_ROUNDS, MIN_PASSWORD_LENGTH
from core.exceptions import UserAlreadyExistsError, UserNotFoundError, ValidationError
from core.permissions import Role
from models.user import UserModel
from schemas.user import User
from utils.converters import model_to_user
from utils.timestamps import utc_now_iso

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$")

# Compared against when the phone is unknown so that both failure paths of
# authenticate() cost one bcrypt check
_DUMMY_HASH = bcrypt.hashpw(b"not-a-password", bcrypt.gensalt(rounds=4)).decode("utf-8")


class UserManager:
    """Manages user data persistence and operations using SQLAlchemy."""

    def __init__(self, db: Session):
        """Initialize UserManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    @staticmethod
    def _password_bytes(password: str) -> bytes:
        # bcrypt only looks at the first 72 bytes
        return password.encode("utf-8")[:72]

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password.

        Returns:
            Hashed password (bcrypt hash string).
        """
        salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
        return bcrypt.hashpw(self._password_bytes(password), salt).decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against a bcrypt hash.

        Args:
            plain_password: Plain text password to verify.
            hashed_password: Bcrypt hash string to verify against.

        Returns:
            True if password matches, False otherwise.
        """
        try:
            return bcrypt.checkpw(
                self._password_bytes(plain_password), hashed_password.encode("utf-8")
            )
        except ValueError as e:
            logger.error("Password verification error: %s", e)
            return False

    def identity_taken(self, email: str, phone: str) -> bool:
        """Return True if any user already uses the email or the phone."""
        existing = (
            self.db.query(UserModel.user_id)
            .filter(
                or_(
                    UserModel.email == email.strip().lower(),
                    UserModel.phone == phone.strip(),
                )
            )
            .first()
        )
        return existing is not None

    def build_user(
        self,
        name: str,
        email: str,
        phone: str,
        password: str,
        role: Role,
        team_id: Optional[str] = None,
        institute_name: Optional[str] = None,
        city: Optional[str] = None,
        year: Optional[str] = None,
        branch: Optional[str] = None,
        instagram: Optional[str] = None,
        linkedin: Optional[str] = None,
    ) -> UserModel:
        """Validate and stage a new user in the current transaction.

        The caller owns the commit, so a user can be created together with
        the team it belongs to.

        Raises:
            ValidationError: If the email or password is malformed.
            UserAlreadyExistsError: If the email or phone is taken.
        """
        email = email.strip().lower()
        phone = phone.strip()
        if not EMAIL_PATTERN.match(email):
            raise ValidationError("Please provide a valid email")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        if self.identity_taken(email, phone):
            raise UserAlreadyExistsError()

        model = UserModel(
            user_id=secrets.token_hex(12),
            name=name.strip(),
            email=email,
            phone=phone,
            password_hash=self.hash_password(password),
            role=Role(role).value,
            team_id=team_id,
            city=city,
            year=year,
            branch=branch,
            instagram=instagram,
            linkedin=linkedin,
            institute_name=institute_name,
            create_at=utc_now_iso(),
        )
        self.db.add(model)
        self.db.flush()
        return model

    def create_user(self, name: str, email: str, phone: str, password: str, role: Role, **profile) -> User:
        """Create and commit a standalone user (staff accounts).

        Returns:
            Created User object.
        """
        model = self.build_user(name, email, phone, password, role, **profile)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Created %s user: %s", model.role, model.user_id)
        return model_to_user(model)

    def _get_model(self, user_id: str) -> UserModel:
        model = self.db.query(UserModel).filter(UserModel.user_id == user_id).first()
        if not model:
            raise UserNotFoundError(user_id)
        return model

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        """Get a user by user ID.

        Args:
            user_id: User ID to look up.

        Returns:
            User object if found, None otherwise.
        """
        model = self.db.query(UserModel).filter(UserModel.user_id == user_id).first()
        if model:
            return model_to_user(model)
        return None

    def find_user(self, phone_or_email: str) -> Optional[UserModel]:
        """Look a user up by phone or email (management CLI)."""
        value = phone_or_email.strip()
        return (
            self.db.query(UserModel)
            .filter(or_(UserModel.phone == value, UserModel.email == value.lower()))
            .first()
        )

    def authenticate(self, phone: str, password: str) -> Optional[User]:
        """Check a phone + password pair.

        The hash is only read here. Both failure paths return None so callers
        cannot tell an unknown phone from a wrong password.

        Returns:
            The User on success, None otherwise.
        """
        model = self.db.query(UserModel).filter(UserModel.phone == phone.strip()).first()
        if model is None:
            self.verify_password(password, _DUMMY_HASH)
            return None
        if not self.verify_password(password, model.password_hash):
            return None
        return model_to_user(model)

    def count_users(self, *roles: Role) -> int:
        query = self.db.query(UserModel)
        if roles:
            query = query.filter(UserModel.role.in_([Role(r).value for r in roles]))
        return query.count()

    def delete_user(self, user_id: str) -> Optional[str]:
        """Delete a user; a team the user leads goes with them.

        Members of a deleted team are detached rather than deleted. Stored
        submission files are left for the orphan sweep.

        Returns:
            Name of the deleted team, if any.
        """
        # Local imports keep the user layer free of team-level dependencies
        from models.submission import SubmissionModel
        from models.team import TeamModel
        from models.team_membership import TeamMembershipModel

        model = self._get_model(user_id)
        deleted_team = None
        team = self.db.query(TeamModel).filter(TeamModel.leader_id == user_id).first()
        if team:
            deleted_team = team.team_name
            self.db.query(UserModel).filter(UserModel.team_id == team.team_id).update(
                {UserModel.team_id: None}, synchronize_session=False
            )
            self.db.query(SubmissionModel).filter(
                SubmissionModel.team_id == team.team_id
            ).delete(synchronize_session=False)
            self.db.delete(team)
            self.db.flush()
        self.db.query(TeamMembershipModel).filter(
            TeamMembershipModel.user_id == user_id
        ).delete(synchronize_session=False)
        self.db.delete(model)
        self.db.commit()
        logger.info("Deleted user %s (team deleted: %s)", user_id, deleted_team)
        return deleted_team
