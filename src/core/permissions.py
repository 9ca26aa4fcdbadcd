"""Roles, capabilities and the authorization check.

Every route that needs more than an authenticated principal declares the
capability it requires; the table below is the single place that decides
which roles hold which capabilities.
"""

from enum import Enum
from typing import Dict, FrozenSet, Iterable, Union

from core.exceptions import PermissionDeniedError


class Role(str, Enum):
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    EVALUATOR = "evaluator"
    LEADER = "leader"
    MEMBER = "member"


class Capability(str, Enum):
    MANAGE_EVENT = "manage_event"  # phases and tasks
    VIEW_STATS = "view_stats"  # dashboard counts and team roster
    REVIEW_SUBMISSIONS = "review_submissions"
    GRADE_SUBMISSIONS = "grade_submissions"
    SUBMIT_WORK = "submit_work"
    VIEW_OWN_SUBMISSIONS = "view_own_submissions"


_STAFF = frozenset(
    {
        Capability.MANAGE_EVENT,
        Capability.VIEW_STATS,
        Capability.REVIEW_SUBMISSIONS,
        Capability.GRADE_SUBMISSIONS,
    }
)
_PARTICIPANT = frozenset({Capability.SUBMIT_WORK, Capability.VIEW_OWN_SUBMISSIONS})

ROLE_CAPABILITIES: Dict[Role, FrozenSet[Capability]] = {
    Role.SUPER_ADMIN: _STAFF,
    Role.ADMIN: _STAFF,
    Role.EVALUATOR: frozenset(
        {Capability.REVIEW_SUBMISSIONS, Capability.GRADE_SUBMISSIONS}
    ),
    Role.LEADER: _PARTICIPANT,
    Role.MEMBER: _PARTICIPANT,
}


def parse_role(role: Union[str, Role]) -> Role:
    """Convert a stored role string into a Role.

    Raises:
        PermissionDeniedError: If the string is not a known role.
    """
    try:
        return Role(role)
    except ValueError:
        raise PermissionDeniedError(f"Unknown role '{role}'")


def has_capability(role: Union[str, Role], capability: Capability) -> bool:
    try:
        return capability in ROLE_CAPABILITIES[Role(role)]
    except ValueError:
        return False


def authorize(role: Union[str, Role], capability: Capability) -> None:
    """Ensure a role holds a capability.

    Args:
        role: Role of the authenticated principal.
        capability: Capability the action requires.

    Raises:
        PermissionDeniedError: If the role does not hold the capability.
    """
    if not has_capability(role, capability):
        raise PermissionDeniedError(
            f"User role {getattr(role, 'value', role)} is not authorized to access this route"
        )


def authorize_roles(role: Union[str, Role], allowed: Iterable[Role]) -> None:
    """Ensure a role is in an explicit allow-list."""
    if parse_role(role) not in set(allowed):
        raise PermissionDeniedError(
            f"User role {getattr(role, 'value', role)} is not authorized to access this route"
        )
