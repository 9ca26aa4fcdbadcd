"""User and authentication schema definitions.

Registration fields are optional at the schema level so that a missing field
produces the portal's own "Please provide all required fields" message
instead of a generic validation error.
"""

from typing import Optional

from schemas.base import CamelModel


class RegisterLeaderRequest(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None
    team_name: Optional[str] = None
    college_name: Optional[str] = None
    city: Optional[str] = None
    year: Optional[str] = None
    branch: Optional[str] = None
    instagram: Optional[str] = None
    linkedin: Optional[str] = None

    def missing_required(self) -> bool:
        required = [
            self.name,
            self.email,
            self.phone,
            self.password,
            self.team_name,
            self.college_name,
        ]
        return not all(value and value.strip() for value in required)


class RegisterMemberRequest(CamelModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None
    team_code: Optional[str] = None
    year: Optional[str] = None
    branch: Optional[str] = None

    def missing_required(self) -> bool:
        required = [self.name, self.email, self.phone, self.password, self.team_code]
        return not all(value and value.strip() for value in required)


class LoginRequest(CamelModel):
    phone: Optional[str] = None
    password: Optional[str] = None


class User(CamelModel):
    """Authenticated principal as seen by route handlers (no password hash)."""

    user_id: str
    name: str
    email: str
    phone: str
    role: str
    team_id: Optional[str] = None
    city: Optional[str] = None
    year: Optional[str] = None
    branch: Optional[str] = None
    instagram: Optional[str] = None
    linkedin: Optional[str] = None
    institute_name: Optional[str] = None
    create_at: str


class UserSummary(CamelModel):
    """Short user block returned by registration and login."""

    id: str
    name: str
    role: str
    phone: Optional[str] = None
    email: Optional[str] = None
    team_id: Optional[str] = None

